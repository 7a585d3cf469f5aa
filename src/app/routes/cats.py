"""
Cat Catalog Routes.

- GET /cats → [{id, name, profileImage, description}]

정렬: config personas.priority 우선, 나머지는 파일명 순.
디렉토리를 읽을 수 없으면 500 (상세는 로그에만).
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.app.services.catalog import CatalogService
from src.domain.errors import PersonaStoreError

logger = logging.getLogger(__name__)

api_router = APIRouter()

ERROR_CATALOG_UNAVAILABLE = "猫の情報を読み込めませんでした。"


def get_catalog_service(request: Request) -> CatalogService:
    """app.state 기반 CatalogService 생성."""
    persona_config = request.app.state.config.get("personas", {}) or {}
    return CatalogService(
        store=request.app.state.persona_store,
        priority=persona_config.get("priority"),
    )


@api_router.get("/cats")
async def list_cats(request: Request) -> JSONResponse:
    """猫 카탈로그."""
    service = get_catalog_service(request)
    try:
        entries = service.list_entries()
    except PersonaStoreError as e:
        logger.error(f"Catalog load failed: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": ERROR_CATALOG_UNAVAILABLE})

    return JSONResponse(content=[entry.to_dict() for entry in entries])
