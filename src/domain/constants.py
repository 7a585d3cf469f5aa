"""
Domain Constants: 猫チャット 전역 상수.

페르소나 레코드 포맷, 기본 우선순위 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Persona Record Format (페르소나 레코드 포맷)
# =============================================================================
# data/<persona_id>.txt
# ├── metadata (key: value 줄)
# ├── ---
# ├── system prompt (자유 텍스트)
# ├── ---
# └── image trigger rule (자유 텍스트, 생략 가능)

PERSONA_DELIMITER = "---"
PERSONA_FILE_SUFFIX = ".txt"
PERSONA_DATA_DIR = "data"

# 파일명 stem 규칙 (경로 탈출 방지)
PERSONA_ID_PATTERN = r"^[A-Za-z0-9_-]+$"

# =============================================================================
# Catalog Ordering (카탈로그 정렬)
# =============================================================================
# 목록에 없는 id는 뒤로 (파일명 순서 유지)

DEFAULT_PERSONA_PRIORITY = ("pino", "teto", "mike", "kuro")

# =============================================================================
# Generation Defaults (생성 기본값)
# =============================================================================

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_MAX_OUTPUT_TOKENS = 1000
DEFAULT_GENERATION_TIMEOUT = 60.0
DEFAULT_PORT = 10000

# =============================================================================
# Reply Convention (응답 내 이미지 마커)
# =============================================================================
# 예: "見て！[IMAGE: images/pino/happy.jpg]"

IMAGE_MARKER_PATTERN = r"\[IMAGE:\s*(.*?)\]"
