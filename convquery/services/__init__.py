"""Services package."""

from .conversation_query import ConversationQueryService

__all__ = ["ConversationQueryService"]
