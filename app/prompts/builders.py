from __future__ import annotations

from typing import Mapping, Sequence

from app.ai.types import ChatMessage
from app.schemas.diagnose import MatcherPick
from app.schemas.vocabulary import VocabularyEntry


def build_candidate_context(candidates: Sequence[VocabularyEntry]) -> str:
    blocks = []
    for i, c in enumerate(candidates, start=1):
        lines = [f"#{i} id={c.id} {c.term} ({c.lang})", f"定義: {c.gloss}"]
        if c.tags:
            lines.append(f"タグ: {', '.join(c.tags)}")
        if c.culture_note:
            lines.append(f"文化ノート: {c.culture_note}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_analyzer_messages(answer_text: str, axes: Sequence[str]) -> list[ChatMessage]:
    axis_instruction = "\n".join(f"- {axis}: 0.0〜1.0で評価" for axis in axes)

    system = (
        "あなたは文化言語学の研究員です。入力された愛に関する回答を要約し、"
        "指定された軸で0.0〜1.0の連続値スコアを出力してください。\n"
        '出力は必ずJSONのみ: {"summary": "...", "scores": {"<axis>": 0.0〜1.0}}\n'
        "スコアは0.0以上1.0以下の小数（小数第2位程度）で提供し、全軸について値を埋めてください。\n"
        "要約は200字以内の自然な日本語で書いてください。"
    )
    user = f"入力:\n{answer_text}\n\n評価軸:\n{axis_instruction}"

    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content=user),
    ]


def build_matcher_messages(
    summary: str,
    scores: Mapping[str, float],
    candidates: Sequence[VocabularyEntry],
    max_picks: int = 1,
) -> list[ChatMessage]:
    if max_picks <= 1:
        pick_instruction = "候補語彙から最適な1語のみ選び"
    else:
        pick_instruction = f"候補語彙から適合する語を1〜{max_picks}語、適合度の高い順に選び"

    system = (
        f"あなたは文化言語学の編集者です。{pick_instruction}、"
        "語ごとに100〜140字の適合理由と30字以内のSNS向けキャッチを日本語で生成してください。\n"
        "出力は必ずJSONのみ:\n"
        '{"picks": [{"id": "...", "term": "...", "lang": "...", "gloss": "...", '
        '"reason": "...", "catchphrase": "..."}]}\n'
        "理由は敬体ではなく常体で端的にまとめ、キャッチは語を含めてもよいが30字以内で完結させます。"
    )

    score_text = ", ".join(f"{key}: {value:.2f}" for key, value in scores.items())
    user = (
        f"診断要約:\n{summary}\n\n"
        f"スコア:\n{score_text}\n\n"
        f"候補語彙:\n{build_candidate_context(candidates)}\n\n"
        "条件:\n"
        "- 候補以外を選ばない。idは候補のidをそのまま返す\n"
        "- 日本語候補は他言語よりも明確な適合理由がある場合のみ選ぶ。その際は理由にその判断根拠を書く\n"
        "- glossが空なら空文字を返してよい\n"
        "- reasonは100〜140字、catchphraseは30字以内\n"
        "- JSON以外のテキストを出力しない"
    )

    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content=user),
    ]


def build_reflection_messages(
    summary: str,
    excerpts: Sequence[str],
    picks: Sequence[MatcherPick],
) -> list[ChatMessage]:
    system = (
        "あなたは言葉に寄り添う聞き手です。回答者自身の言葉の抜粋を根拠に、"
        "診断結果がなぜその人に響くのかを120字以内の日本語でやさしく解釈してください。\n"
        '出力は必ずJSONのみ: {"excerpts": ["..."], "interpretation": "...", "toneHint": "..."}\n'
        "excerptsには与えられた抜粋だけをそのまま使い、新しい引用を作らないこと。"
        "toneHintは gentle / warm / wistful / bright のいずれか1語。"
    )

    excerpt_text = "\n".join(f"- {item}" for item in excerpts) or "- （抜粋なし）"
    pick_text = "\n".join(f"- {pick.term} ({pick.lang}): {pick.gloss}" for pick in picks)
    user = (
        f"診断要約:\n{summary}\n\n"
        f"回答からの抜粋:\n{excerpt_text}\n\n"
        f"選ばれた言葉:\n{pick_text}"
    )

    return [
        ChatMessage(role="system", content=system),
        ChatMessage(role="user", content=user),
    ]
