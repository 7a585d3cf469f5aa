"""Domain layer: errors and schemas."""

from .errors import (
    CatChatError,
    ChatRequestError,
    ErrorCodes,
    PersonaNotFoundError,
    PersonaStoreError,
)
from .schemas import (
    CatalogEntry,
    ChatReply,
    ChatRequest,
    ChatRole,
    ConversationTurn,
    Persona,
)

__all__ = [
    "CatChatError",
    "ChatRequestError",
    "ErrorCodes",
    "PersonaNotFoundError",
    "PersonaStoreError",
    "CatalogEntry",
    "ChatReply",
    "ChatRequest",
    "ChatRole",
    "ConversationTurn",
    "Persona",
]
