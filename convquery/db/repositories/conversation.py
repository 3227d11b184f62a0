"""Conversation repository for read queries."""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ...errors import StoreError
from .base import BaseRepository


def _normalize(document: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored document JSON friendly (ObjectId ids become strings)."""
    if isinstance(document.get("_id"), ObjectId):
        document = {**document, "_id": str(document["_id"])}
    return document


class ConversationRepository(BaseRepository):
    """Repository for conversation reads. Never retries a failed query."""

    def __init__(self, collection: Collection, allow_disk_use: bool = True):
        super().__init__(collection)
        self.allow_disk_use = allow_disk_use

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Run an aggregation pipeline.

        Args:
            pipeline: Aggregation stages

        Returns:
            Result documents

        Raises:
            StoreError: If the store fails to execute the pipeline
        """
        try:
            results = list(self.collection.aggregate(pipeline, allowDiskUse=self.allow_disk_use))
        except PyMongoError as e:
            self.logger.error(f"Conversation aggregation failed: {e}")
            raise StoreError(f"Conversation aggregation failed: {e}") from e

        for facet in results:
            if isinstance(facet.get("conversations"), list):
                facet["conversations"] = [_normalize(c) for c in facet["conversations"]]
        return results

    def find_one(
        self,
        project_id: str,
        conversation_id: Optional[str] = None,
        sender_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get one conversation of a project, by sender id when given, else by id.

        Returns:
            The conversation document or None
        """
        query: Dict[str, Any] = {"projectId": project_id}
        if sender_id:
            query["tracker.sender_id"] = sender_id
        else:
            query["_id"] = conversation_id
        try:
            document = self.collection.find_one(query)
        except PyMongoError as e:
            self.logger.error(f"Failed to get conversation {conversation_id or sender_id}: {e}")
            raise StoreError(f"Failed to get conversation: {e}") from e
        return _normalize(document) if document else None

    def distinct_intents(self, project_id: str) -> List[str]:
        """Distinct intents recorded on a project's conversations."""
        try:
            intents = self.collection.distinct("intents", {"projectId": project_id})
        except PyMongoError as e:
            self.logger.error(f"Failed to list intents for project {project_id}: {e}")
            raise StoreError(f"Failed to list intents: {e}") from e
        return sorted(i for i in intents if i is not None)
