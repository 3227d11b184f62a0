"""Derived-field filters: time window, first intent, length and duration."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.filters import FilterSpec
from .comparators import resolve_comparator


def _events(conversation: Mapping[str, Any]) -> List[Any]:
    return ((conversation.get("tracker") or {}).get("events")) or []


_USER_EVENTS = {
    "$filter": {
        "input": "$tracker.events",
        "as": "event",
        "cond": {"$eq": ["$$event.event", "user"]},
    }
}


# ---------------------------------------------------------------------------
# Time window
# ---------------------------------------------------------------------------

def add_fields_for_date_range() -> List[Dict[str, Any]]:
    """Derive ``startTime``/``endTime`` from the first and last event timestamps."""
    return [
        {
            "$addFields": {
                "startTime": {"$arrayElemAt": ["$tracker.events.timestamp", 0]},
                "endTime": {"$arrayElemAt": ["$tracker.events.timestamp", -1]},
            }
        }
    ]


def date_range_condition(start: int, end: int) -> List[Dict[str, Any]]:
    """Conversations whose [startTime, endTime] window meets [start, end], both inclusive."""
    return [
        {"startTime": {"$lte": end}},
        {"endTime": {"$gte": start}},
    ]


def conversation_window(conversation: Mapping[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    timestamps = [
        e["timestamp"] for e in _events(conversation)
        if isinstance(e, Mapping) and e.get("timestamp") is not None
    ]
    if not timestamps:
        return None, None
    return timestamps[0], timestamps[-1]


# ---------------------------------------------------------------------------
# First intent (user initiated vs triggered)
# ---------------------------------------------------------------------------

def add_first_intent_field() -> Dict[str, Any]:
    """Derive ``firstIntent``: the intent of the first intent-bearing user event."""
    intent_events = {
        "$filter": {
            "input": {"$ifNull": ["$tracker.events", []]},
            "as": "event",
            "cond": {
                "$and": [
                    {"$eq": ["$$event.event", "user"]},
                    {"$ne": [{"$ifNull": ["$$event.parse_data.intent.name", None]}, None]},
                ]
            },
        }
    }
    return {
        "$addFields": {
            "firstIntent": {
                "$let": {
                    "vars": {"first": {"$arrayElemAt": [intent_events, 0]}},
                    "in": "$$first.parse_data.intent.name",
                }
            }
        }
    }


def needs_trigger_intents(spec: FilterSpec) -> bool:
    """Only one of the two classes is requested, so the project's trigger intents are needed."""
    return bool(spec.user_initiated_conversations) != bool(spec.triggered_conversations)


def filter_by_first_intent_type(
    trigger_intents: Iterable[str],
    user_initiated: Optional[bool],
    triggered: Optional[bool],
) -> Dict[str, Any]:
    """
    Restrict conversations by how they started.

    Asking for both classes, or for neither, leaves the result unconstrained.
    """
    if bool(user_initiated) == bool(triggered):
        return {}
    intents = list(trigger_intents)
    if triggered:
        return {"firstIntent": {"$in": intents}}
    return {"firstIntent": {"$nin": intents}}


def first_intent(conversation: Mapping[str, Any]) -> Optional[str]:
    for event in _events(conversation):
        if isinstance(event, Mapping) and event.get("event") == "user":
            name = ((event.get("parse_data") or {}).get("intent") or {}).get("name")
            if name is not None:
                return name
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------

def length_filter_active(spec: FilterSpec) -> bool:
    return bool(spec.x_than_length) and (spec.length_filter or 0) > 0


def length_filter_stages(spec: FilterSpec) -> List[Dict[str, Any]]:
    """Keep conversations whose user-turn count, minus the opening turn, meets the bound."""
    if not length_filter_active(spec):
        return []
    comparator = resolve_comparator(spec.x_than_length)
    return [
        {"$addFields": {"convLen": {"$subtract": [{"$size": {"$ifNull": [_USER_EVENTS, []]}}, 1]}}},
        {"$match": {"convLen": comparator.query(spec.length_filter)}},
    ]


def conversation_length(conversation: Mapping[str, Any]) -> int:
    users = sum(1 for e in _events(conversation) if isinstance(e, Mapping) and e.get("event") == "user")
    return users - 1


# ---------------------------------------------------------------------------
# Duration
# ---------------------------------------------------------------------------

def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def duration_filter_stages(spec: FilterSpec) -> List[Dict[str, Any]]:
    """Bound ``difference = endTime - startTime``; each bound applies only when > 0."""
    lower = spec.duration_filter_lower_bound
    upper = spec.duration_filter_upper_bound
    if not _positive(lower) and not _positive(upper):
        return []
    stages: List[Dict[str, Any]] = [
        {"$addFields": {"difference": {"$subtract": ["$endTime", "$startTime"]}}},
    ]
    if _positive(lower):
        stages.append({"$match": {"difference": {"$gte": lower}}})
    if _positive(upper):
        stages.append({"$match": {"difference": {"$lte": upper}}})
    return stages


def conversation_duration(conversation: Mapping[str, Any]) -> Optional[float]:
    start, end = conversation_window(conversation)
    if start is None or end is None:
        return None
    return end - start
