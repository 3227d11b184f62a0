"""Base repository class."""

from typing import Protocol, Any, Dict, List, Optional

from pymongo.collection import Collection

from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, collection: Collection):
        """
        Initialize repository with a collection.

        Args:
            collection: pymongo collection (or a compatible test double)
        """
        self.collection = collection
        self.logger = get_app_logger("repository")


class ConversationStore(Protocol):
    """Read access the query service needs from the conversation store."""

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]: ...

    def find_one(
        self,
        project_id: str,
        conversation_id: Optional[str] = None,
        sender_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]: ...

    def distinct_intents(self, project_id: str) -> List[str]: ...


class TriggerIntentProvider(Protocol):
    """Per-project configuration: intents that start triggered conversations."""

    async def get_trigger_intents(self, project_id: str) -> List[str]: ...
