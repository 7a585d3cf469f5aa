"""
Core layer: 페르소나 레코드 저장소와 로깅 설정.

역할:
- data/<id>.txt 파싱, 목록/단건 로드
- 진입점 로깅 초기화
"""

from .logging import setup_logging
from .personas import (
    PersonaStore,
    is_valid_persona_id,
    parse_metadata,
    parse_persona_record,
    split_record,
)

__all__ = [
    # personas
    "PersonaStore",
    "is_valid_persona_id",
    "parse_metadata",
    "parse_persona_record",
    "split_record",
    # logging
    "setup_logging",
]
