"""Pydantic models package."""

from .filters import (
    FilterSpec,
    ComparatorName,
    StepType,
    SortKey,
    EventFilterOperator,
    UNBOUNDED_PAGE_SIZE,
    to_unix,
)
from .conversation import (
    ConversationPage,
    FunnelStepCount,
    FunnelReport,
    ConversationExplanation,
    IntentsResponse,
)

__all__ = [
    "FilterSpec",
    "ComparatorName",
    "StepType",
    "SortKey",
    "EventFilterOperator",
    "UNBOUNDED_PAGE_SIZE",
    "to_unix",
    "ConversationPage",
    "FunnelStepCount",
    "FunnelReport",
    "ConversationExplanation",
    "IntentsResponse",
]
