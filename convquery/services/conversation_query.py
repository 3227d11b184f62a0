"""Conversation query orchestration.

Composes the match predicate, derived-field filters, funnel matching, sort
and pagination into one aggregation and shapes its result.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..db.repositories.base import ConversationStore, TriggerIntentProvider
from ..errors import ConversationNotFoundError, FunnelSpecError
from ..models.conversation import (
    ConversationExplanation,
    ConversationPage,
    FunnelReport,
    FunnelStepCount,
)
from ..models.filters import FilterSpec, to_unix
from ..query.comparators import resolve_comparator
from ..query.filters import (
    DEFAULT_ENV,
    confidence_filter_active,
    create_filter_object,
    event_confidences,
    stored_field_checks,
)
from ..query.funnel import (
    create_matching_steps,
    funnel_progress_stages,
    funnel_steps_for,
    match_conversation,
    step_counts,
)
from ..query.pagination import facet_stage, shape_page, sort_stage
from ..query.secondary import (
    add_fields_for_date_range,
    add_first_intent_field,
    conversation_duration,
    conversation_length,
    conversation_window,
    duration_filter_stages,
    filter_by_first_intent_type,
    first_intent,
    length_filter_active,
    length_filter_stages,
    needs_trigger_intents,
)
from ..utils.logger import get_app_logger


class ConversationQueryService:
    """Stateless per-request query engine over an injected conversation store."""

    def __init__(
        self,
        store: ConversationStore,
        trigger_intents: TriggerIntentProvider,
        default_env: str = DEFAULT_ENV
    ):
        """
        Initialize the service.

        Args:
            store: Conversation store executing aggregations
            trigger_intents: Provider of each project's trigger intents
            default_env: Environment that also matches conversations without env
        """
        self.store = store
        self.trigger_intents = trigger_intents
        self.default_env = default_env
        self.logger = get_app_logger("query")

    async def _first_intent_filter(self, spec: FilterSpec) -> Dict[str, Any]:
        if not needs_trigger_intents(spec):
            return {}
        intents = await self.trigger_intents.get_trigger_intents(spec.project_id)
        return filter_by_first_intent_type(
            intents, spec.user_initiated_conversations, spec.triggered_conversations
        )

    def _filter_stages(self, spec: FilterSpec, first_intent_filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Everything before the funnel: window, first intent, match, length, duration."""
        return [
            *add_fields_for_date_range(),
            add_first_intent_field(),
            {
                "$match": {
                    "$and": [
                        create_filter_object(spec, self.default_env),
                        first_intent_filter,
                    ]
                }
            },
            *length_filter_stages(spec),
            *duration_filter_stages(spec),
        ]

    def build_pipeline(self, spec: FilterSpec, first_intent_filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Compose the full aggregation for ``spec``.

        Stage order is fixed: filter, derive, filter, funnel, sort, page + count.

        Raises:
            ComparatorError: If a comparator name is unknown
            FunnelSpecError: If a funnel step cannot be resolved
        """
        return [
            *self._filter_stages(spec, first_intent_filter or {}),
            *create_matching_steps(spec),
            sort_stage(spec.sort),
            facet_stage(spec.page, spec.page_size),
        ]

    async def _aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.store.aggregate, pipeline)

    async def query_conversations(self, spec: FilterSpec) -> ConversationPage:
        """
        Run one conversation query.

        Args:
            spec: Validated filter specification

        Returns:
            ConversationPage with the requested page and the page count

        Raises:
            ComparatorError, FunnelSpecError, StoreError
        """
        pipeline = self.build_pipeline(spec, await self._first_intent_filter(spec))
        self.logger.debug(
            f"Querying conversations of project {spec.project_id} with {len(pipeline)} stages"
        )
        results = await self._aggregate(pipeline)
        return shape_page(results, spec.page_size)

    async def funnel_report(self, spec: FilterSpec) -> FunnelReport:
        """
        Count how many filtered conversations reached each funnel step.

        Raises:
            FunnelSpecError: If no in-order funnel is requested
        """
        steps = funnel_steps_for(spec)
        if not steps:
            raise FunnelSpecError("A funnel report needs an inOrder event filter with at least one step")

        pipeline = [
            *self._filter_stages(spec, await self._first_intent_filter(spec)),
            *funnel_progress_stages(steps),
            {"$group": {"_id": "$funnelProgress", "count": {"$sum": 1}}},
        ]
        groups = await self._aggregate(pipeline)
        progress_counts = {int(g["_id"]): int(g["count"]) for g in groups if g.get("_id") is not None}

        return FunnelReport(
            steps=[FunnelStepCount(step=label, count=count) for label, count in step_counts(progress_counts, steps)],
            total=sum(progress_counts.values()),
        )

    async def get_conversation(
        self,
        project_id: str,
        conversation_id: Optional[str] = None,
        sender_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get one conversation by id, or by tracker sender id.

        Raises:
            ConversationNotFoundError: If nothing matches
        """
        conversation = await asyncio.to_thread(self.store.find_one, project_id, conversation_id, sender_id)
        if conversation is None:
            raise ConversationNotFoundError(
                f"Conversation not found: {sender_id or conversation_id}"
            )
        return conversation

    async def get_intents(self, project_id: str) -> List[str]:
        """Distinct intents seen in a project's conversations."""
        return await asyncio.to_thread(self.store.distinct_intents, project_id)

    async def explain(self, spec: FilterSpec, conversation: Mapping[str, Any]) -> ConversationExplanation:
        """
        Evaluate the clauses of ``spec`` on one conversation in process.

        Only clauses active in ``spec`` appear in ``checks``; ``matches`` is
        True when the query would return the conversation.
        """
        checks: Dict[str, bool] = stored_field_checks(spec, conversation, self.default_env)

        if needs_trigger_intents(spec):
            intents = await self.trigger_intents.get_trigger_intents(spec.project_id)
            triggered = first_intent(conversation) in intents
            checks["firstIntent"] = triggered if spec.triggered_conversations else not triggered

        if length_filter_active(spec):
            comparator = resolve_comparator(spec.x_than_length)
            checks["length"] = comparator.predicate(conversation_length(conversation), spec.length_filter)

        duration = conversation_duration(conversation)
        if spec.duration_filter_lower_bound and spec.duration_filter_lower_bound > 0:
            checks["durationLowerBound"] = duration is not None and duration >= spec.duration_filter_lower_bound
        if spec.duration_filter_upper_bound and spec.duration_filter_upper_bound > 0:
            checks["durationUpperBound"] = duration is not None and duration <= spec.duration_filter_upper_bound

        if confidence_filter_active(spec):
            comparator = resolve_comparator(spec.x_than_confidence)
            checks["confidence"] = any(
                comparator.predicate(value, spec.confidence_filter) for value in event_confidences(conversation)
            )

        if spec.start_date and spec.end_date:
            start, end = conversation_window(conversation)
            checks["dateRange"] = (
                start is not None
                and start <= to_unix(spec.end_date)
                and end >= to_unix(spec.start_date)
            )

        progress = None
        steps = funnel_steps_for(spec)
        if steps:
            outcome = match_conversation(conversation, steps)
            progress = outcome.progress
            checks["funnel"] = outcome.passed

        return ConversationExplanation(
            conversation_id=str(conversation.get("_id", "")),
            checks=checks,
            funnel_progress=progress,
            matches=all(checks.values()),
        )
