"""
HTTP client for the cat chat server.

- GET /cats → list[CatalogEntry]
- POST /chat → reply text

네트워크 오류, 2xx 이외 응답, JSON 형식 오류는 모두 ClientError.
재시도 없음.
"""

import logging
from typing import Any

import httpx

from src.domain.schemas import CatalogEntry, ChatRequest

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """서버 호출 실패."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CatChatAPI:
    """
    猫チャット 서버 클라이언트.

    Usage:
        async with CatChatAPI("http://localhost:10000") as api:
            cats = await api.fetch_cats()
            reply = await api.send_chat(ChatRequest("pino", "こんにちは"))
    """

    def __init__(
        self,
        base_url: str = "http://localhost:10000",
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: 서버 주소
            client: 주입용 httpx 클라이언트 (테스트에서 transport 교체)
        """
        self.base_url = base_url
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=None)
        self._owns_client = client is None

    async def __aenter__(self) -> "CatChatAPI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ClientError(f"network error: {e}") from e

        if not response.is_success:
            logger.error(f"{method} {path} returned {response.status_code}")
            raise ClientError(
                f"server error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ClientError("invalid JSON response", response.status_code) from e

    async def fetch_cats(self) -> list[CatalogEntry]:
        """猫 카탈로그 (서버 정렬 순서 유지)."""
        data = await self._request("GET", "/cats")
        if not isinstance(data, list):
            raise ClientError("catalog must be a list")
        try:
            return [CatalogEntry.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise ClientError(f"invalid catalog entry: {e}") from e

    async def send_chat(self, request: ChatRequest) -> str:
        """채팅 1건 전송 → 응답 텍스트."""
        data = await self._request("POST", "/chat", json=request.to_dict())
        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise ClientError("reply missing in response")
        return reply
