"""Project repository: per-project query configuration."""

import asyncio
from typing import List

from pymongo.errors import PyMongoError

from ...errors import StoreError
from .base import BaseRepository


class ProjectRepository(BaseRepository):
    """Reads project documents from the projects collection."""

    def _trigger_intents(self, project_id: str) -> List[str]:
        try:
            project = self.collection.find_one({"_id": project_id}, {"triggerIntents": 1})
        except PyMongoError as e:
            self.logger.error(f"Failed to load project {project_id}: {e}")
            raise StoreError(f"Failed to load project {project_id}: {e}") from e
        if not project:
            self.logger.warning(f"Project {project_id} not found, assuming no trigger intents")
            return []
        return list(project.get("triggerIntents") or [])

    async def get_trigger_intents(self, project_id: str) -> List[str]:
        """
        Intents that open triggered (not user initiated) conversations.

        Args:
            project_id: Project ID

        Returns:
            Intent names, empty when the project defines none
        """
        return await asyncio.to_thread(self._trigger_intents, project_id)
