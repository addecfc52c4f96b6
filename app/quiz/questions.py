from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AnswerKind = Literal["open", "yesno", "yesno+open", "choice"]

YES_TOKEN = "はい"
NO_TOKEN = "いいえ"
YES_NO_TOKENS = (YES_TOKEN, NO_TOKEN)
NOTE_SEPARATOR = "/"


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    kind: AnswerKind
    choices: tuple[str, ...] = ()
    followup: bool = False
    weight: float = Field(default=1.0, gt=0.0)


QUESTIONS: tuple[Question, ...] = (
    Question(id=1, text="最近、“心が動いた”瞬間ってどんなとき？", kind="open"),
    Question(id=2, text="誰かを好きになったら、まずどうしちゃうタイプ？", kind="open", weight=1.2),
    Question(id=3, text="一緒にいる時間って、どんな空気が理想？", kind="open"),
    Question(
        id=4,
        text="恋人からの連絡が少ないとき、どんな気持ちになる？",
        kind="yesno+open",
        followup=True,
        weight=1.3,
    ),
    Question(id=5, text="“愛されてるな”って感じるのは、どんな瞬間？", kind="open", weight=1.1),
    Question(id=6, text="もし別れがくるなら、どんな終わりがいい？", kind="open", weight=1.4),
    Question(id=7, text="一度終わった恋が、また始まることってあると思う？", kind="yesno", weight=0.9),
    Question(id=8, text="相手のために“自分を変える”のはアリ？", kind="yesno"),
    Question(
        id=9,
        text="言葉よりも“沈黙”のほうが伝わることってある？",
        kind="yesno+open",
        followup=True,
        weight=1.2,
    ),
    Question(
        id=10,
        text="あなたの恋は、“静かに続く”方？それとも“燃えるように始まる”方？",
        kind="choice",
        choices=("静かに", "燃えるように", "どちらも"),
    ),
)


def question_catalog() -> dict[int, Question]:
    return {question.id: question for question in QUESTIONS}
