"""
Reply rendering: 응답 텍스트 내 이미지 마커 처리.

규약: 응답에 `[IMAGE: <path>]`가 있으면 마커를 제거하고
<path>를 이미지 참조로 분리한다. 여러 개면 등장 순서대로.
"""

import re
from dataclasses import dataclass

from src.domain.constants import IMAGE_MARKER_PATTERN

_IMAGE_MARKER_RE = re.compile(IMAGE_MARKER_PATTERN)


@dataclass(frozen=True)
class RenderedReply:
    """마커 제거된 텍스트 + 이미지 경로."""
    text: str
    images: tuple[str, ...] = ()


def parse_reply(text: str) -> RenderedReply:
    """
    응답 텍스트 → RenderedReply.

    Examples:
        >>> parse_reply("見て！[IMAGE: images/x.jpg]")
        RenderedReply(text='見て！', images=('images/x.jpg',))
    """
    images = tuple(
        path.strip() for path in _IMAGE_MARKER_RE.findall(text) if path.strip()
    )
    stripped = _IMAGE_MARKER_RE.sub("", text).strip()
    return RenderedReply(text=stripped, images=images)
