"""Conversation query API models."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ConversationPage(BaseModel):
    """One page of matching conversations."""

    conversations: List[Dict[str, Any]] = Field(default_factory=list, description="Conversation documents")
    pages: int = Field(description="Number of pages for the current page size, 0 when nothing matched")


class FunnelStepCount(BaseModel):
    """Number of conversations that reached a funnel step."""

    step: str = Field(description="Step label, e.g. 'intent: greet'")
    count: int = Field(description="Conversations that reached at least this step")


class FunnelReport(BaseModel):
    """Step-by-step funnel for the filtered conversations."""

    steps: List[FunnelStepCount] = Field(description="One entry per funnel step, in order")
    total: int = Field(description="Conversations that passed the other filters")


class ConversationExplanation(BaseModel):
    """Which filter clauses a single conversation passes."""

    conversation_id: str = Field(description="Conversation ID")
    checks: Dict[str, bool] = Field(default_factory=dict, description="Active clause name -> passed")
    funnel_progress: Optional[int] = Field(None, description="Funnel steps reached, when a funnel is requested")
    matches: bool = Field(description="True when every active clause passes")


class IntentsResponse(BaseModel):
    """Distinct intents seen in a project's conversations."""

    intents: List[str] = Field(description="Intent names")
