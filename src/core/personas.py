"""
Persona Store: data/<id>.txt → Persona

레코드 포맷 (UTF-8, `---` 구분):
- 1번째 세그먼트: 메타데이터 (`key: value` 줄)
- 2번째 세그먼트: 시스템 프롬프트
- 3번째 세그먼트: 이미지 트리거 규칙 (생략 가능 → 빈 문자열)

규칙:
- 요청마다 디스크에서 읽는다 (서버는 상태를 갖지 않음)
- id = 파일명 stem. 메타데이터의 id와 다르면 경고만 남기고 stem 우선
- id 형식 위반(경로 탈출 등)은 "없음"으로 취급
"""

import logging
import re
from pathlib import Path

from src.domain.constants import (
    PERSONA_DELIMITER,
    PERSONA_FILE_SUFFIX,
    PERSONA_ID_PATTERN,
)
from src.domain.errors import ErrorCodes, PersonaNotFoundError, PersonaStoreError
from src.domain.schemas import Persona

logger = logging.getLogger(__name__)

_PERSONA_ID_RE = re.compile(PERSONA_ID_PATTERN)

# 메타데이터 키 → Persona 필드
_METADATA_FIELDS = {
    "name": "name",
    "profileimage": "profile_image",
    "profile_image": "profile_image",
    "gender": "gender",
    "age": "age",
    "birthplace": "birthplace",
}


# =============================================================================
# Parsing
# =============================================================================


def split_record(text: str) -> tuple[str, str, str]:
    """
    레코드를 (metadata, system_prompt, image_trigger_rule)로 분리.

    세그먼트가 모자라면 빈 문자열. 네 번째 이후 세그먼트는 무시.
    """
    parts = text.split(PERSONA_DELIMITER)
    metadata = parts[0] if len(parts) > 0 else ""
    system_prompt = parts[1].strip() if len(parts) > 1 else ""
    image_rule = parts[2].strip() if len(parts) > 2 else ""
    return metadata, system_prompt, image_rule


def parse_metadata(block: str) -> dict[str, str]:
    """
    `key: value` 블록 파싱.

    - 첫 번째 `:` 기준으로 분리 (값에 `:` 포함 가능)
    - 키는 소문자로 정규화
    - 빈 줄, `:` 없는 줄은 무시
    """
    metadata: dict[str, str] = {}
    for line in block.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        if not key:
            continue
        metadata[key] = value.strip()
    return metadata


def parse_persona_record(persona_id: str, text: str) -> Persona:
    """
    레코드 텍스트 → Persona.

    Args:
        persona_id: 파일명 stem
        text: 레코드 원문

    Returns:
        Persona
    """
    metadata_block, system_prompt, image_rule = split_record(text)
    metadata = parse_metadata(metadata_block)

    declared_id = metadata.get("id")
    if declared_id and declared_id != persona_id:
        logger.warning(
            f"Persona id mismatch: file stem '{persona_id}' "
            f"but metadata id '{declared_id}'. Using file stem."
        )

    fields = {
        target: metadata[key]
        for key, target in _METADATA_FIELDS.items()
        if metadata.get(key)
    }
    fields.setdefault("name", persona_id)

    return Persona(
        id=persona_id,
        system_prompt=system_prompt,
        image_trigger_rule=image_rule,
        metadata=metadata,
        **fields,
    )


def is_valid_persona_id(persona_id: str) -> bool:
    """파일명 stem 규칙 검사."""
    return bool(_PERSONA_ID_RE.match(persona_id or ""))


# =============================================================================
# Store
# =============================================================================


class PersonaStore:
    """
    페르소나 레코드 저장소 (읽기 전용).

    Usage:
        store = PersonaStore(Path("data"))
        pino = store.get("pino")
        everyone = store.load_all()
    """

    def __init__(self, data_dir: Path):
        """
        Args:
            data_dir: 페르소나 레코드 디렉토리
        """
        self.data_dir = data_dir

    def list_ids(self) -> list[str]:
        """
        레코드 id 목록 (파일명 순).

        Raises:
            PersonaStoreError: 디렉토리를 읽을 수 없을 때
        """
        try:
            paths = [
                p for p in self.data_dir.iterdir()
                if p.is_file() and p.suffix == PERSONA_FILE_SUFFIX
            ]
        except OSError as e:
            raise PersonaStoreError(
                ErrorCodes.PERSONA_DIR_UNREADABLE,
                "persona directory is not readable",
                path=str(self.data_dir),
                error=str(e),
            ) from e

        return sorted(p.stem for p in paths if is_valid_persona_id(p.stem))

    def path_for(self, persona_id: str) -> Path:
        """id → 레코드 경로."""
        return self.data_dir / f"{persona_id}{PERSONA_FILE_SUFFIX}"

    def get(self, persona_id: str) -> Persona:
        """
        페르소나 1건 로드.

        Raises:
            PersonaNotFoundError: id 형식 위반 또는 파일 없음
            PersonaStoreError: 파일 읽기/디코딩 실패
        """
        if not is_valid_persona_id(persona_id):
            raise PersonaNotFoundError(
                ErrorCodes.PERSONA_NOT_FOUND,
                "invalid persona id",
                persona_id=persona_id,
            )

        path = self.path_for(persona_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise PersonaNotFoundError(
                ErrorCodes.PERSONA_NOT_FOUND,
                "persona record not found",
                persona_id=persona_id,
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise PersonaStoreError(
                ErrorCodes.PERSONA_READ_FAILED,
                "persona record could not be read",
                persona_id=persona_id,
                path=str(path),
                error=str(e),
            ) from e

        return parse_persona_record(persona_id, text)

    def load_all(self) -> list[Persona]:
        """
        전체 페르소나 로드 (list_ids 순서).

        개별 레코드 읽기 실패는 경고 후 건너뛴다.
        디렉토리 자체를 못 읽으면 PersonaStoreError.
        """
        personas: list[Persona] = []
        for persona_id in self.list_ids():
            try:
                personas.append(self.get(persona_id))
            except (PersonaNotFoundError, PersonaStoreError) as e:
                logger.warning(f"Skipping persona '{persona_id}': {e}")
        return personas
