"""Repositories package."""

from .base import BaseRepository, ConversationStore, TriggerIntentProvider
from .conversation import ConversationRepository
from .project import ProjectRepository

__all__ = [
    "BaseRepository",
    "ConversationStore",
    "TriggerIntentProvider",
    "ConversationRepository",
    "ProjectRepository",
]
