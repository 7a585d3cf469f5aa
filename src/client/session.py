"""
Chat Session: 클라이언트 상태 머신 + 뷰 모델.

상태:
    NO_PERSONA_SELECTED → IDLE ⇄ AWAITING_REPLY

규칙:
- 猫 선택 = 새 세션 (이력/대화창 초기화, 이전 猫 이력 누수 없음)
- 제출은 IDLE + 비어있지 않은 텍스트일 때만 (그 외는 no-op, 큐잉 없음)
- 이력은 성공 응답 때만 증가 (user, model 두 턴)
- 렌더링과 분리: 여기서는 TranscriptEntry 목록만 만든다
"""

from dataclasses import dataclass, field
from enum import Enum

from src.client.reply import parse_reply
from src.domain.schemas import CatalogEntry, ChatRequest, ChatRole, ConversationTurn

# 화면 문구
CATALOG_LOAD_FAILED = "エラー: 猫の情報を読み込めませんでした。"
REPLY_FAILED = "ごめんなさい、AIとの通信に失敗しました。"
CHAT_STARTED = "{name}とのチャットを開始しました。"
INPUT_PLACEHOLDER = "{name}へのメッセージを入力"


class ChatState(str, Enum):
    """클라이언트 상태."""
    NO_PERSONA_SELECTED = "no_persona_selected"
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class Sender(str, Enum):
    """대화창 항목 발신자."""
    USER = "user"
    CAT = "cat"
    SYSTEM = "system"


@dataclass(frozen=True)
class TranscriptEntry:
    """대화창 항목 1개."""
    sender: Sender
    text: str
    images: tuple[str, ...] = ()


@dataclass(frozen=True)
class PickerEntry:
    """猫 선택 목록 항목."""
    id: str
    name: str
    profile_image: str
    description: str
    selected: bool = False


def build_picker(
    catalog: list[CatalogEntry],
    selected_id: str | None = None,
) -> list[PickerEntry]:
    """카탈로그 → 선택 목록 (순서 유지)."""
    return [
        PickerEntry(
            id=entry.id,
            name=entry.name,
            profile_image=entry.profile_image,
            description=entry.description,
            selected=entry.id == selected_id,
        )
        for entry in catalog
    ]


@dataclass
class ChatSession:
    """
    猫 1마리와의 대화 세션.

    컨트롤러가 소유하고, 猫를 바꾸면 새 세션으로 교체한다.
    """
    persona: CatalogEntry | None = None
    state: ChatState = ChatState.NO_PERSONA_SELECTED
    history: list[ConversationTurn] = field(default_factory=list)
    transcript: list[TranscriptEntry] = field(default_factory=list)
    pending_question: str | None = None

    @classmethod
    def start(cls, persona: CatalogEntry) -> "ChatSession":
        """새 세션: 빈 이력 + 시작 안내 1줄."""
        return cls(
            persona=persona,
            state=ChatState.IDLE,
            transcript=[
                TranscriptEntry(Sender.SYSTEM, CHAT_STARTED.format(name=persona.name))
            ],
        )

    @property
    def input_enabled(self) -> bool:
        return self.state == ChatState.IDLE

    @property
    def typing(self) -> bool:
        """타이핑 인디케이터 표시 여부."""
        return self.state == ChatState.AWAITING_REPLY

    @property
    def placeholder(self) -> str:
        if self.persona is None:
            return ""
        return INPUT_PLACEHOLDER.format(name=self.persona.name)

    def add_system(self, text: str) -> TranscriptEntry:
        entry = TranscriptEntry(Sender.SYSTEM, text)
        self.transcript.append(entry)
        return entry

    def begin_submit(self, text: str) -> ChatRequest | None:
        """
        사용자 메시지 제출.

        Returns:
            보낼 ChatRequest. 제출 불가(猫 미선택, 대기 중, 빈 텍스트)면 None.
        """
        question = (text or "").strip()
        if not question or self.persona is None or self.state != ChatState.IDLE:
            return None

        self.transcript.append(TranscriptEntry(Sender.USER, question))
        self.state = ChatState.AWAITING_REPLY
        self.pending_question = question

        return ChatRequest(
            cat_id=self.persona.id,
            question=question,
            history=list(self.history),
        )

    def complete(self, reply_text: str) -> TranscriptEntry:
        """응답 도착: 렌더링 + 이력 2턴 추가 → IDLE."""
        if self.state != ChatState.AWAITING_REPLY or self.pending_question is None:
            raise RuntimeError(f"no pending request (state={self.state.value})")

        rendered = parse_reply(reply_text)
        entry = TranscriptEntry(Sender.CAT, rendered.text, rendered.images)
        self.transcript.append(entry)

        self.history.append(ConversationTurn(ChatRole.USER, self.pending_question))
        self.history.append(ConversationTurn(ChatRole.MODEL, reply_text))

        self.pending_question = None
        self.state = ChatState.IDLE
        return entry

    def fail(self) -> TranscriptEntry:
        """요청 실패: 사과 메시지 → IDLE (이력 변화 없음)."""
        if self.state != ChatState.AWAITING_REPLY:
            raise RuntimeError(f"no pending request (state={self.state.value})")

        self.pending_question = None
        self.state = ChatState.IDLE
        return self.add_system(REPLY_FAILED)
