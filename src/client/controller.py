"""
Chat Controller: API 호출 + 세션 상태 전이.

UI(브라우저/터미널)는 이 컨트롤러의 뷰 모델만 그린다.
요청은 한 번에 하나 (세션 상태가 게이트).
"""

import logging

from src.client.api import CatChatAPI, ClientError
from src.client.session import (
    CATALOG_LOAD_FAILED,
    ChatSession,
    PickerEntry,
    TranscriptEntry,
    build_picker,
)
from src.domain.schemas import CatalogEntry

logger = logging.getLogger(__name__)


class ChatController:
    """
    클라이언트 컨트롤러.

    Usage:
        controller = ChatController(api)
        await controller.load_catalog()
        controller.select("pino")
        entry = await controller.submit("こんにちは")
    """

    def __init__(self, api: CatChatAPI):
        self.api = api
        self.catalog: list[CatalogEntry] = []
        self.session = ChatSession()

    @property
    def picker(self) -> list[PickerEntry]:
        selected = self.session.persona.id if self.session.persona else None
        return build_picker(self.catalog, selected)

    @property
    def transcript(self) -> list[TranscriptEntry]:
        return self.session.transcript

    async def load_catalog(self) -> list[PickerEntry]:
        """
        카탈로그 로드 (페이지 로드 시 1회).

        실패하면 빈 목록 + 대화창에 오류 안내.
        """
        try:
            self.catalog = await self.api.fetch_cats()
        except ClientError as e:
            logger.error(f"Catalog load failed: {e}")
            self.catalog = []
            self.session.add_system(CATALOG_LOAD_FAILED)
        return self.picker

    def select(self, cat_id: str) -> ChatSession:
        """
        猫 선택 → 새 세션.

        Raises:
            KeyError: 카탈로그에 없는 id
        """
        persona = next((c for c in self.catalog if c.id == cat_id), None)
        if persona is None:
            raise KeyError(cat_id)

        self.session = ChatSession.start(persona)
        return self.session

    async def submit(self, text: str) -> TranscriptEntry | None:
        """
        메시지 제출.

        Returns:
            추가된 응답/사과 항목. 제출 불가면 None (no-op).
        """
        session = self.session
        request = session.begin_submit(text)
        if request is None:
            return None

        try:
            reply = await self.api.send_chat(request)
        except ClientError as e:
            logger.error(f"Chat request failed: {e}")
            return session.fail()
        except Exception:
            # 예상 밖 오류도 AWAITING_REPLY에 남기지 않는다
            session.fail()
            raise

        # 대기 중 猫가 바뀌었으면 이전 세션에만 반영됨
        return session.complete(reply)
