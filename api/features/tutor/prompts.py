"""System framing for the math tutor persona.

The framing is injected at invocation time by the context window builder and
is never persisted with the conversation.
"""
from __future__ import annotations

MATH_TUTOR_SYSTEM_PROMPT = (
    "당신은 수학 문제를 해결하는 전문 AI 조수입니다. "
    "사용자가 수학 문제를 제공하면, 단계별로 자세히 풀이 과정을 설명하고 최종 답을 제시하세요. "
    "수식은 LaTeX 형식으로 작성하여 $...$ 또는 $$...$$ 로 감싸주세요."
)


def build_system_prompt(*, extra_instructions: str | None = None) -> str:
    """Tutor persona prompt, optionally followed by deployment-specific instructions."""
    if extra_instructions and extra_instructions.strip():
        return f"{MATH_TUTOR_SYSTEM_PROMPT}\n\n{extra_instructions.strip()}"
    return MATH_TUTOR_SYSTEM_PROMPT
