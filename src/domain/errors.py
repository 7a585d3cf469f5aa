"""
Error definitions for the cat chat.

규칙:
- 조용한 실패 금지 → 코드가 있는 예외로 명시적 실패
- 클라이언트 응답에는 내부 상세를 싣지 않는다 (로그에만 기록)
"""

from typing import Any


class CatChatError(Exception):
    """
    猫チャット 도메인 에러.

    Usage:
        raise PersonaNotFoundError(
            ErrorCodes.PERSONA_NOT_FOUND,
            "persona not found",
            persona_id="tama",
        )
    """

    def __init__(self, code: str, message: str = "", **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        parts = [f"[{self.code}]"]
        if self.message:
            parts.append(self.message)
        if ctx_str:
            parts.append(f"({ctx_str})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class PersonaNotFoundError(CatChatError):
    """요청한 페르소나 레코드가 없음 (또는 id 형식 위반)."""
    pass


class PersonaStoreError(CatChatError):
    """페르소나 디렉토리/파일 읽기 실패."""
    pass


class ChatRequestError(CatChatError):
    """채팅 요청 값 오류 (필수 필드 누락, 잘못된 history)."""
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Persona Store ===
    PERSONA_NOT_FOUND = "PERSONA_NOT_FOUND"
    PERSONA_DIR_UNREADABLE = "PERSONA_DIR_UNREADABLE"
    PERSONA_READ_FAILED = "PERSONA_READ_FAILED"

    # === Chat Request ===
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_HISTORY = "INVALID_HISTORY"
    INVALID_REQUEST_BODY = "INVALID_REQUEST_BODY"

    # === Generation (Gemini) ===
    GEMINI_KEY_MISSING = "GEMINI_KEY_MISSING"
    GEMINI_NOT_INSTALLED = "GEMINI_NOT_INSTALLED"
    GEMINI_AUTH_FAILED = "GEMINI_AUTH_FAILED"
    GEMINI_QUOTA_EXCEEDED = "GEMINI_QUOTA_EXCEEDED"
    GEMINI_UNAVAILABLE = "GEMINI_UNAVAILABLE"
    GEMINI_INVALID_REQUEST = "GEMINI_INVALID_REQUEST"
    GEMINI_EMPTY_RESPONSE = "GEMINI_EMPTY_RESPONSE"
    GENERATION_TIMEOUT = "GENERATION_TIMEOUT"
    GENERATION_FAILED = "GENERATION_FAILED"
