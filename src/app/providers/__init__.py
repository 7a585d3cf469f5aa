"""
AI Provider Abstraction.

모델 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .base import ChatProvider, GenerationParams, ProviderError
from .gemini import GeminiChatProvider

__all__ = [
    "ChatProvider",
    "GenerationParams",
    "ProviderError",
    "GeminiChatProvider",
]
