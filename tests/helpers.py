"""
테스트 헬퍼: Fake provider, 테스트 앱 구성.
"""

from fastapi import FastAPI

from src.app.providers.base import ChatProvider
from src.app.routes import cats, chat
from src.core.personas import PersonaStore
from src.domain.schemas import ConversationTurn


class FakeChatProvider(ChatProvider):
    """호출 기록 + 고정 응답 Provider."""

    def __init__(self, reply: str = "こんにちはにゃ", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[list[ConversationTurn], str]] = []

    async def send_chat(self, history: list[ConversationTurn], message: str) -> str:
        self.calls.append((list(history), message))
        if self.error is not None:
            raise self.error
        return self.reply


def build_app(
    persona_store: PersonaStore,
    provider: ChatProvider,
    config: dict,
) -> FastAPI:
    """lifespan 없이 라우터 + state만 구성한 앱."""
    app = FastAPI()
    app.include_router(chat.router)
    app.include_router(cats.api_router)
    app.include_router(chat.api_router)

    app.state.config = config
    app.state.persona_store = persona_store
    app.state.provider = provider
    return app
