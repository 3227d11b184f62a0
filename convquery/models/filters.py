"""Filter specification models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


UNBOUNDED_PAGE_SIZE = -1


class ComparatorName(str, Enum):
    """Comparisons accepted for confidence, length and duration thresholds."""

    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    EQUALS = "equals"


class StepType(str, Enum):
    """Kinds of tracker events a funnel step can target."""

    INTENT = "intent"
    ACTION = "action"


class SortKey(str, Enum):
    """Supported sort orders."""

    UPDATED_AT_ASC = "updatedAt_ASC"
    UPDATED_AT_DESC = "updatedAt_DESC"


class EventFilterOperator(str, Enum):
    """Event filter operators; only IN_ORDER drives the sequence matcher."""

    AND = "and"
    OR = "or"
    IN_ORDER = "inOrder"


class FilterSpec(BaseModel):
    """Declarative conversation filter, as sent by the console.

    Field names are snake_case in Python and camelCase on the wire
    (``projectId``, ``pageSize``, ``xThanLength``...); both are accepted.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: str = Field(min_length=1, description="Owning project, every query is scoped to one")
    page: int = Field(default=1, ge=1, description="1-based page number")
    page_size: int = Field(default=20, description="Page size, -1 for a single unbounded page")
    status: List[str] = Field(default_factory=list, description="Accepted statuses, empty for any")
    sort: Optional[str] = Field(default=None, description="updatedAt_ASC or updatedAt_DESC")
    env: Optional[str] = Field(default="development", description="Deployment environment")

    length_filter: Optional[int] = Field(default=None, description="Bound on the number of user turns")
    x_than_length: Optional[str] = Field(default=None, description="Comparator applied to length_filter")
    duration_filter_lower_bound: Optional[float] = Field(default=None, description="Minimum duration in seconds")
    duration_filter_upper_bound: Optional[float] = Field(default=None, description="Maximum duration in seconds")
    confidence_filter: Optional[float] = Field(default=None, description="NLU confidence bound (0-1)")
    x_than_confidence: Optional[str] = Field(default=None, description="Comparator applied to confidence_filter")

    start_date: Optional[datetime] = Field(default=None, description="Start of the date window")
    end_date: Optional[datetime] = Field(default=None, description="End of the date window")
    user_id: Optional[str] = Field(default=None, description="Restrict to one user")

    event_filter_operator: str = Field(default=EventFilterOperator.OR.value, description="and, or, inOrder")
    event_filter: List[Union[str, Dict[str, Any]]] = Field(default_factory=list, description="Funnel steps")

    user_initiated_conversations: Optional[bool] = Field(default=None, description="Keep conversations opened by the user")
    triggered_conversations: Optional[bool] = Field(default=None, description="Keep conversations opened by a trigger intent")

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v != UNBOUNDED_PAGE_SIZE and v < 1:
            raise ValueError("pageSize must be -1 (unbounded) or a positive integer")
        return v

    @property
    def unbounded(self) -> bool:
        return self.page_size == UNBOUNDED_PAGE_SIZE

    @property
    def in_order(self) -> bool:
        return self.event_filter_operator == EventFilterOperator.IN_ORDER.value


def to_unix(value: datetime) -> int:
    """Convert a datetime to unix seconds, reading naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())
