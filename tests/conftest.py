"""Shared fixtures: conversation documents and store doubles."""

import pytest

from convquery.errors import StoreError
from convquery.services import ConversationQueryService

from factories import RecordingStore, StaticTriggerIntents, action, conversation, user


@pytest.fixture
def greet_bye():
    """The reference scenario conversation."""
    return conversation([
        user("greet", 100.0),
        action("utter_hi", 101.0),
        user("bye", 130.0),
        action("utter_bye", 131.0),
    ])


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def trigger_intents():
    return StaticTriggerIntents(["trigger_welcome"])


@pytest.fixture
def service(store, trigger_intents):
    return ConversationQueryService(store, trigger_intents)


@pytest.fixture
def failing_store():
    return RecordingStore(error=StoreError("connection refused"))
