"""
Catalog Service: 페르소나 목록 → 표시용 엔트리.

정렬 규칙:
- 고정 우선순위 목록(config personas.priority) 순서
- 목록에 없는 id는 뒤로, 파일명 순서 유지 (stable)
"""

from collections.abc import Sequence

from src.core.personas import PersonaStore
from src.domain.constants import DEFAULT_PERSONA_PRIORITY
from src.domain.schemas import CatalogEntry, Persona

# description 구성 (라벨, Persona 속성)
DESCRIPTION_FIELDS = (
    ("性別", "gender"),
    ("年齢", "age"),
    ("出身", "birthplace"),
)
DESCRIPTION_SEPARATOR = " / "


def build_description(persona: Persona) -> str:
    """성별/나이/출신지 고정 조합. 빈 값은 생략."""
    parts = []
    for label, attr in DESCRIPTION_FIELDS:
        value = getattr(persona, attr)
        if value:
            parts.append(f"{label}: {value}")
    return DESCRIPTION_SEPARATOR.join(parts)


def to_catalog_entry(persona: Persona) -> CatalogEntry:
    """Persona → CatalogEntry."""
    return CatalogEntry(
        id=persona.id,
        name=persona.name,
        profile_image=persona.profile_image,
        description=build_description(persona),
    )


def sort_by_priority(
    entries: Sequence[CatalogEntry],
    priority: Sequence[str],
) -> list[CatalogEntry]:
    """우선순위 목록 기준 정렬 (목록 밖은 뒤로, stable)."""
    rank = {persona_id: index for index, persona_id in enumerate(priority)}
    fallback = len(rank)
    return sorted(entries, key=lambda entry: rank.get(entry.id, fallback))


class CatalogService:
    """
    카탈로그 서비스.

    요청마다 디스크에서 읽는다 (캐시 없음).
    """

    def __init__(
        self,
        store: PersonaStore,
        priority: Sequence[str] | None = None,
    ):
        """
        Args:
            store: 페르소나 저장소
            priority: 고정 우선순위 id 목록 (None이면 기본값)
        """
        self.store = store
        self.priority = tuple(priority) if priority is not None else DEFAULT_PERSONA_PRIORITY

    def list_entries(self) -> list[CatalogEntry]:
        """
        정렬된 카탈로그.

        Raises:
            PersonaStoreError: 디렉토리를 읽을 수 없을 때
        """
        entries = [to_catalog_entry(p) for p in self.store.load_all()]
        return sort_by_priority(entries, self.priority)
