"""Pytest fixtures for API testing."""

import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI

from convquery.api.v1 import conversations
from convquery.services import ConversationQueryService

from factories import RecordingStore, StaticTriggerIntents


@pytest.fixture
def api_store():
    """Store double shared by the service under test."""
    return RecordingStore()


@pytest.fixture
async def client(api_store):
    """Create async HTTP client around the conversations router."""
    conversations.query_service = ConversationQueryService(api_store, StaticTriggerIntents(["trigger_welcome"]))

    # Create a test app without lifespan (no MongoDB needed)
    test_app = FastAPI(title="Conversation Query Test")
    test_app.include_router(conversations.router)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    conversations.query_service = None
