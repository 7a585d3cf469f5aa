"""
Prompt Assembly: Persona → 지시문.

조립 순서:
1. 배경 지식 (다른 페르소나 요약, 선택)
2. 페르소나 시스템 프롬프트
3. "설정에 완벽히 빙의" 지시
4. 이미지 트리거 규칙
5. "사용자 질문에 답하라" 지시

최종 메시지 = 지시문 + "\n\n質問: " + 질문
"""

from collections.abc import Iterable

from src.domain.schemas import Persona

EMBODY_INSTRUCTION = (
    "あなたは以上の設定に完璧になりきってください。\n"
    "さらに、以下のルールにも従ってください。"
)
ANSWER_INSTRUCTION = "以上の設定とルールに基づき、ユーザーからの以下の質問に答えてください。"
BACKGROUND_HEADER = "【背景知識】あなたと同じ世界に暮らす他の猫たちの基本情報です。話題に出たときはこの情報と矛盾しないように答えてください。"
QUESTION_PREFIX = "質問: "


def summarize_persona(persona: Persona) -> str:
    """배경 지식 1줄: `- 이름 (성별, 나이, 출신지)`."""
    details = [v for v in (persona.gender, persona.age, persona.birthplace) if v]
    if details:
        return f"- {persona.name}（{'、'.join(details)}）"
    return f"- {persona.name}"


def build_background_knowledge(
    personas: Iterable[Persona],
    exclude_id: str,
) -> str:
    """
    다른 페르소나들의 기본 정보 요약.

    Args:
        personas: 전체 페르소나
        exclude_id: 현재 대화 중인 페르소나 id (제외)

    Returns:
        배경 지식 블록 (다른 페르소나가 없으면 빈 문자열)
    """
    lines = [summarize_persona(p) for p in personas if p.id != exclude_id]
    if not lines:
        return ""
    return "\n".join([BACKGROUND_HEADER, *lines])


def build_instruction(persona: Persona, background: str = "") -> str:
    """페르소나 지시문 조립."""
    sections = []
    if background:
        sections.append(background)
    sections.append(persona.system_prompt)
    sections.append(f"{EMBODY_INSTRUCTION}\n{persona.image_trigger_rule}")
    sections.append(ANSWER_INSTRUCTION)
    return "\n\n".join(sections)


def compose_message(instruction: str, question: str) -> str:
    """지시문 + 질문 → 전송 메시지."""
    return f"{instruction}\n\n{QUESTION_PREFIX}{question}"
