import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from app.api.v1.health import router as health_router
from app.api.v1.questions import router as questions_router
from app.api.v1.diagnose import router as diagnose_router
from app.core.cors import cors_options
from app.core.errors import DiagnosisError
from app.core.rate_limit import limiter
from app.core.config import settings
from app.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
logger = logging.getLogger(__name__)
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Love Language Diagnosis API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **cors_options())
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(DiagnosisError)
async def diagnosis_error_handler(request: Request, exc: DiagnosisError):
    if exc.status_code >= 500:
        logger.error("diagnosis_failed path=%s code=%s: %s", request.url.path, exc.code, exc)
        detail = "The diagnosis could not be completed. Please try again later."
    else:
        logger.info("diagnosis_rejected path=%s code=%s", request.url.path, exc.code)
        detail = str(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request.")
    detail = f"{location}: {message}" if location else message
    logger.info("request_rejected path=%s issues=%s", request.url.path, len(errors))
    return JSONResponse(status_code=400, content={"error": "invalid_request", "detail": detail})


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(questions_router, prefix="/v1", tags=["Quiz"])
app.include_router(diagnose_router, prefix="/v1", tags=["Diagnose"])
