"""Tests for ConversationRepository."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from convquery.db.repositories.conversation import ConversationRepository
from convquery.errors import StoreError


@pytest.fixture
def collection():
    """Provide a mocked pymongo collection."""
    return MagicMock()


@pytest.fixture
def repo(collection):
    """Provide a ConversationRepository."""
    return ConversationRepository(collection)


class TestConversationRepository:
    """Tests for ConversationRepository."""

    class TestAggregate:
        """SUT: ConversationRepository.aggregate"""

        def test_passes_pipeline_with_disk_use(self, repo, collection):
            """aggregate() should forward the pipeline and allowDiskUse."""
            collection.aggregate.return_value = iter([{"conversations": [], "pages": []}])
            pipeline = [{"$match": {"projectId": "bf"}}]
            assert repo.aggregate(pipeline) == [{"conversations": [], "pages": []}]
            collection.aggregate.assert_called_once_with(pipeline, allowDiskUse=True)

        def test_disk_use_configurable(self, collection):
            """allow_disk_use=False should be forwarded."""
            collection.aggregate.return_value = iter([])
            ConversationRepository(collection, allow_disk_use=False).aggregate([])
            collection.aggregate.assert_called_once_with([], allowDiskUse=False)

        def test_object_ids_normalized(self, repo, collection):
            """ObjectId ids in the page should become strings."""
            oid = ObjectId()
            collection.aggregate.return_value = iter([
                {"conversations": [{"_id": oid, "status": "new"}], "pages": [{"numberOfDocuments": 1}]}
            ])
            result = repo.aggregate([])
            assert result[0]["conversations"][0] == {"_id": str(oid), "status": "new"}

        def test_failure_raises_store_error_once(self, repo, collection):
            """A driver failure should become StoreError without retrying."""
            collection.aggregate.side_effect = ServerSelectionTimeoutError("no servers")
            with pytest.raises(StoreError) as exc:
                repo.aggregate([])
            assert isinstance(exc.value.__cause__, ServerSelectionTimeoutError)
            assert collection.aggregate.call_count == 1

    class TestFindOne:
        """SUT: ConversationRepository.find_one"""

        def test_by_id(self, repo, collection):
            """Without sender id the lookup should use _id."""
            collection.find_one.return_value = {"_id": "c1", "projectId": "bf"}
            assert repo.find_one("bf", "c1") == {"_id": "c1", "projectId": "bf"}
            collection.find_one.assert_called_once_with({"projectId": "bf", "_id": "c1"})

        def test_by_sender(self, repo, collection):
            """A sender id should take precedence over the id."""
            collection.find_one.return_value = None
            assert repo.find_one("bf", "c1", sender_id="s1") is None
            collection.find_one.assert_called_once_with({"projectId": "bf", "tracker.sender_id": "s1"})

        def test_failure(self, repo, collection):
            """Driver failures should raise StoreError."""
            collection.find_one.side_effect = OperationFailure("boom")
            with pytest.raises(StoreError):
                repo.find_one("bf", "c1")

    class TestDistinctIntents:
        """SUT: ConversationRepository.distinct_intents"""

        def test_sorted_without_null(self, repo, collection):
            """Should drop nulls and sort."""
            collection.distinct.return_value = ["greet", None, "bye"]
            assert repo.distinct_intents("bf") == ["bye", "greet"]
            collection.distinct.assert_called_once_with("intents", {"projectId": "bf"})

        def test_failure(self, repo, collection):
            """Driver failures should raise StoreError."""
            collection.distinct.side_effect = OperationFailure("boom")
            with pytest.raises(StoreError):
                repo.distinct_intents("bf")
