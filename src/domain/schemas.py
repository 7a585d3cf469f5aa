"""
Data schemas for the cat chat.

규칙:
- Persona는 프로세스 수명 동안 불변 (frozen)
- 대화 턴은 클라이언트가 소유, 서버는 요청마다 받아서 그대로 전달
- JSON 키는 클라이언트 계약 그대로 (profileImage, catId 등 camelCase)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Persona
# =============================================================================

@dataclass(frozen=True)
class Persona:
    """
    페르소나 레코드.

    data/<id>.txt 한 파일 = 한 페르소나.
    id는 파일명 stem과 동일해야 함.
    """
    id: str
    name: str
    profile_image: str = ""
    gender: str = ""
    age: str = ""
    birthplace: str = ""
    system_prompt: str = ""
    image_trigger_rule: str = ""

    # 메타데이터 원본 (알 수 없는 키 포함)
    metadata: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class CatalogEntry:
    """카탈로그 표시용 엔트리."""
    id: str
    name: str
    profile_image: str
    description: str

    def to_dict(self) -> dict[str, str]:
        """GET /cats 응답 형식."""
        return {
            "id": self.id,
            "name": self.name,
            "profileImage": self.profile_image,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogEntry":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            profile_image=str(data.get("profileImage") or ""),
            description=str(data.get("description") or ""),
        )


# =============================================================================
# Conversation
# =============================================================================

class ChatRole(str, Enum):
    """대화 턴 역할 (Gemini 규약)."""
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ConversationTurn:
    """대화 턴 1개."""
    role: ChatRole
    text: str

    def to_dict(self) -> dict[str, str]:
        """클라이언트 ↔ 서버 전송 형식."""
        return {"role": self.role.value, "text": self.text}

    def to_gemini(self) -> dict[str, Any]:
        """Gemini start_chat(history=...) 형식."""
        return {"role": self.role.value, "parts": [self.text]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationTurn":
        """
        dict → ConversationTurn.

        허용 형식:
        - {"role": "user", "text": "..."}
        - {"role": "user", "parts": [{"text": "..."}]}  (Gemini 형식)

        Raises:
            ValueError: role이 user/model이 아니거나 텍스트가 문자열이 아닐 때
                (parts가 리스트가 아닌 경우 포함)
        """
        role = ChatRole(data.get("role"))

        text = data.get("text")
        if text is None:
            parts = data.get("parts") or []
            if not isinstance(parts, list):
                raise ValueError(f"turn parts must be a list: {parts!r}")
            texts = []
            for part in parts:
                part_text = part.get("text") if isinstance(part, dict) else part
                if not isinstance(part_text, str):
                    raise ValueError(f"turn part text must be a string: {part!r}")
                texts.append(part_text)
            text = "".join(texts)

        if not isinstance(text, str):
            raise ValueError(f"turn text must be a string: {text!r}")

        return cls(role=role, text=text)


@dataclass
class ChatRequest:
    """
    POST /chat 요청 값 객체.

    사용자 메시지 1건당 1회 전송 (재시도/큐잉 없음).
    """
    cat_id: str
    question: str
    history: list[ConversationTurn] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "catId": self.cat_id,
            "question": self.question,
            "history": [turn.to_dict() for turn in self.history],
        }


@dataclass(frozen=True)
class ChatReply:
    """POST /chat 응답."""
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"reply": self.text}
