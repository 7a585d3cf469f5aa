"""
test_client_to_server.py - 클라이언트 → 서버 통합 테스트

CatChatAPI + ChatController를 ASGITransport로 실제 라우트에 연결.
Gemini만 FakeChatProvider로 대체.

검증 포인트:
- /cats 우선순위 순서가 선택 목록에 그대로 반영
- 이력이 턴마다 서버까지 전달
- [IMAGE: ...] 마커 → 이미지 항목
- 서버 오류 → 사과 메시지, 이력 불변
"""

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from src.app.providers.base import ProviderError
from src.client.api import CatChatAPI, ClientError
from src.client.controller import ChatController
from src.client.session import REPLY_FAILED, Sender
from src.core.personas import PersonaStore
from src.domain.schemas import ChatRequest, ChatRole
from tests.helpers import FakeChatProvider, build_app


@pytest.fixture
def provider() -> FakeChatProvider:
    return FakeChatProvider(reply="見て見て！[IMAGE: images/pino/happy.jpg]")


@pytest_asyncio.fixture
async def api(
    persona_store: PersonaStore,
    provider: FakeChatProvider,
    test_config: dict,
) -> AsyncGenerator[CatChatAPI, None]:
    app = build_app(persona_store, provider, test_config)
    client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    )
    async with CatChatAPI("http://test", client=client) as api:
        yield api
    await client.aclose()


class TestClientToServer:
    """클라이언트/서버 왕복."""

    @pytest.mark.asyncio
    async def test_catalog_in_priority_order(self, api: CatChatAPI):
        controller = ChatController(api)

        picker = await controller.load_catalog()

        assert [p.id for p in picker] == ["pino", "teto", "mike", "zorro"]
        assert picker[0].description == "性別: オス / 年齢: 3歳 / 出身: 北海道"

    @pytest.mark.asyncio
    async def test_conversation_round_trip(self, api: CatChatAPI, provider: FakeChatProvider):
        controller = ChatController(api)
        await controller.load_catalog()
        controller.select("pino")

        entry = await controller.submit("写真見せて")
        await controller.submit("もう一枚")

        assert entry.sender == Sender.CAT
        assert entry.text == "見て見て！"
        assert entry.images == ("images/pino/happy.jpg",)

        # 두 번째 호출은 첫 턴의 user/model 쌍을 받는다
        second_history, second_message = provider.calls[1]
        assert [t.role for t in second_history] == [ChatRole.USER, ChatRole.MODEL]
        assert second_history[0].text == "写真見せて"
        assert second_history[1].text == "見て見て！[IMAGE: images/pino/happy.jpg]"
        assert second_message.endswith("もう一枚")

    @pytest.mark.asyncio
    async def test_provider_failure_apologizes(
        self, api: CatChatAPI, provider: FakeChatProvider
    ):
        controller = ChatController(api)
        await controller.load_catalog()
        controller.select("teto")
        provider.error = ProviderError("GEMINI_UNAVAILABLE", "down")

        entry = await controller.submit("やあ")

        assert entry.text == REPLY_FAILED
        assert controller.session.history == []

    @pytest.mark.asyncio
    async def test_unknown_cat_is_404(self, api: CatChatAPI):
        with pytest.raises(ClientError) as exc_info:
            await api.send_chat(ChatRequest("tama", "やあ"))

        assert exc_info.value.status_code == 404
