"""Base match predicate for conversation queries."""

from typing import Any, Dict, List, Mapping

from ..models.filters import FilterSpec, to_unix
from .comparators import Comparator, resolve_comparator
from .secondary import date_range_condition


DEFAULT_ENV = "development"


def confidence_filter_active(spec: FilterSpec) -> bool:
    return bool(spec.x_than_confidence) and (spec.confidence_filter or 0) > 0


def confidence_condition(comparator: Comparator, bound: float) -> List[Dict[str, Any]]:
    """Either event shape carrying the NLU confidence may satisfy the bound."""
    return [
        {
            "tracker.events": {
                "$elemMatch": {
                    "parse_data.intent.confidence": {"$exists": True, **comparator.query(bound)},
                }
            }
        },
        {
            "tracker.events": {
                "$elemMatch": {
                    "confidence": {"$exists": True, **comparator.query(bound)},
                }
            }
        },
    ]


def event_confidences(conversation: Mapping[str, Any]) -> List[float]:
    """Every confidence value carried by a conversation's events, in either shape."""
    values = []
    for event in ((conversation.get("tracker") or {}).get("events")) or []:
        if not isinstance(event, Mapping):
            continue
        intent = (event.get("parse_data") or {}).get("intent") or {}
        if intent.get("confidence") is not None:
            values.append(intent["confidence"])
        if event.get("confidence") is not None:
            values.append(event["confidence"])
    return values


def create_filter_object(spec: FilterSpec, default_env: str = DEFAULT_ENV) -> Dict[str, Any]:
    """
    Build the conjunctive predicate on stored and window fields.

    Args:
        spec: Validated filter specification
        default_env: Environment that also matches conversations without env

    Returns:
        A query document for a ``$match`` stage

    Raises:
        ComparatorError: If the confidence comparator is unknown
    """
    filters: Dict[str, Any] = {"projectId": spec.project_id}

    if spec.status:
        filters["status"] = {"$in": list(spec.status)}

    if spec.env:
        if spec.env == default_env:
            # no recorded environment counts as the default one
            filters["env"] = {"$in": [default_env, None]}
        else:
            filters["env"] = spec.env

    if confidence_filter_active(spec):
        comparator = resolve_comparator(spec.x_than_confidence)
        filters["$or"] = confidence_condition(comparator, spec.confidence_filter)

    if spec.start_date and spec.end_date:
        filters["$and"] = date_range_condition(to_unix(spec.start_date), to_unix(spec.end_date))

    if spec.user_id:
        filters["userId"] = spec.user_id

    return filters


def stored_field_checks(
    spec: FilterSpec,
    conversation: Mapping[str, Any],
    default_env: str = DEFAULT_ENV
) -> Dict[str, bool]:
    """Evaluate the status, env and user clauses of ``create_filter_object`` on one conversation."""
    checks: Dict[str, bool] = {}

    if spec.status:
        checks["status"] = conversation.get("status") in spec.status

    if spec.env:
        env = conversation.get("env")
        if spec.env == default_env:
            checks["env"] = env is None or env == default_env
        else:
            checks["env"] = env == spec.env

    if spec.user_id:
        checks["userId"] = conversation.get("userId") == spec.user_id

    return checks
