from fastapi import APIRouter

from app.quiz.questions import QUESTIONS, Question

router = APIRouter()


@router.get("/questions", response_model=list[Question], summary="Quiz questions")
async def list_questions():
    return list(QUESTIONS)
