"""Database package - connection and repositories."""

from .connection import MongoConnection
from .repositories import (
    ConversationStore,
    TriggerIntentProvider,
    ConversationRepository,
    ProjectRepository,
)

__all__ = [
    "MongoConnection",
    "ConversationStore",
    "TriggerIntentProvider",
    "ConversationRepository",
    "ProjectRepository",
]
