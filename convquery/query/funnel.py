"""Ordered event-sequence (funnel) matching.

A funnel is an ordered list of steps such as ``intent: greet`` then
``action: utter_menu``. A conversation completes the funnel when its tracker
events contain the steps as an in-order, not necessarily contiguous,
subsequence.

The same walk exists twice: ``match_sequence`` folds over events in Python,
and ``funnel_progress_stages`` compiles it into a ``$reduce`` expression run by
the store. Both record one token per event: the label of the step it
advanced, or ``STOP``. ``STOP`` tokens are dropped before the remaining
tokens are counted.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from ..errors import FunnelSpecError
from ..models.filters import FilterSpec, StepType


STOP = "STOP"
END_EVENT = {"event": "END"}

# tracker event discriminator for each step type
EVENT_FOR_TYPE = {
    StepType.INTENT: "user",
    StepType.ACTION: "action",
}

FunnelEntry = Union[str, Mapping[str, Any]]


@dataclass(frozen=True)
class FunnelStep:
    """One resolved funnel step.

    ``names`` holds one name for a plain step and several for a "one of"
    step. An ``excluded`` step is reached by an event of the right type whose
    name is not in ``names``.
    """

    type: StepType
    names: Tuple[str, ...]
    excluded: bool = False

    @property
    def event(self) -> str:
        return EVENT_FOR_TYPE[self.type]

    @property
    def label(self) -> str:
        names = " | ".join(self.names)
        if self.excluded:
            return f"{self.type.value}: NOT {names}"
        return f"{self.type.value}: {names}"

    def matches(self, event: Any) -> bool:
        if not isinstance(event, Mapping) or event.get("event") != self.event:
            return False
        return (_event_name(event) in self.names) != self.excluded

    def to_document(self) -> Dict[str, Any]:
        return {
            "event": self.event,
            "names": list(self.names),
            "excluded": self.excluded,
            "label": self.label,
        }


def _event_name(event: Mapping[str, Any]):
    if event.get("event") == "user":
        intent = (event.get("parse_data") or {}).get("intent") or {}
        return intent.get("name")
    return event.get("name")


@dataclass(frozen=True)
class FunnelMatch:
    """Outcome of walking one conversation."""

    matching: Tuple[str, ...]
    expected: int

    @property
    def progress(self) -> int:
        return len(self.matching)

    @property
    def passed(self) -> bool:
        return self.progress == self.expected


# ---------------------------------------------------------------------------
# Reshaping
# ---------------------------------------------------------------------------

def _resolve_type(raw: Any, entry: Any) -> StepType:
    try:
        return StepType(str(raw).strip())
    except ValueError:
        raise FunnelSpecError(f"Unknown funnel step type {raw!r} in {entry!r}") from None


def _collect_names(value: Any, step_type: StepType, entry: Any) -> List[str]:
    """Flatten a name, a list of names or ``{"intent": name}`` items."""
    if isinstance(value, str):
        names = [value.strip()]
    elif isinstance(value, Mapping) and len(value) == 1 and step_type.value in value:
        names = _collect_names(value[step_type.value], step_type, entry)
    elif isinstance(value, (list, tuple)):
        names = [n for item in value for n in _collect_names(item, step_type, entry)]
    else:
        raise FunnelSpecError(f"Cannot resolve funnel step name in {entry!r}")
    if not names or not all(names):
        raise FunnelSpecError(f"Empty funnel step name in {entry!r}")
    return names


def reshape_step(entry: FunnelEntry) -> FunnelStep:
    """
    Normalize one console funnel entry into a FunnelStep.

    Accepted shapes:
        "intent: greet"
        {"type": "intent", "name": "greet"}
        {"type": "intent", "name": ["a", "b"]}          one of
        {"type": "intent", "name": {"OR": ["a", "b"]}}  one of
        {"type": "intent", "name": {"NOT": "x"}}        any other intent
        {"type": "action", "name": "x", "excluded": true}

    Raises:
        FunnelSpecError: If the type is unknown or no name can be resolved
    """
    if isinstance(entry, str):
        raw_type, sep, raw_name = entry.partition(":")
        if not sep:
            raise FunnelSpecError(f"Funnel step {entry!r} is not of the form 'type: name'")
        step_type = _resolve_type(raw_type, entry)
        return FunnelStep(step_type, tuple(_collect_names(raw_name, step_type, entry)))

    if not isinstance(entry, Mapping) or "type" not in entry:
        raise FunnelSpecError(f"Funnel step {entry!r} has no type")

    step_type = _resolve_type(entry["type"], entry)
    name = entry.get("name")
    excluded = bool(entry.get("excluded", False))

    if isinstance(name, Mapping) and "NOT" in name:
        name, excluded = name["NOT"], True
    elif isinstance(name, Mapping) and "OR" in name:
        name = name["OR"]

    names = _collect_names(name, step_type, entry)
    # keep first occurrence order for stable labels
    return FunnelStep(step_type, tuple(dict.fromkeys(names)), excluded)


def reshape_sequence(event_filter: Iterable[FunnelEntry]) -> List[FunnelStep]:
    """Normalize the requested entries into ordered FunnelSteps."""
    return [reshape_step(entry) for entry in event_filter]


def funnel_steps_for(spec: FilterSpec) -> List[FunnelStep]:
    """Steps the matcher must enforce for ``spec``; empty disables it."""
    if not spec.in_order or not spec.event_filter:
        return []
    return reshape_sequence(spec.event_filter)


# ---------------------------------------------------------------------------
# In-process walk
# ---------------------------------------------------------------------------

def _advance(steps: Sequence[FunnelStep]):
    def step(state, event):
        cursor, tokens = state
        if cursor < len(steps) and steps[cursor].matches(event):
            return cursor + 1, tokens + (steps[cursor].label,)
        return cursor, tokens + (STOP,)
    return step


def match_sequence(events: Iterable[Any], steps: Sequence[FunnelStep]) -> FunnelMatch:
    """
    Walk ``events`` once and report how far the funnel got.

    The END sentinel is appended before the walk; no step can match it.
    """
    stream = [*events, END_EVENT]
    _, tokens = reduce(_advance(steps), stream, (0, ()))
    return FunnelMatch(
        matching=tuple(t for t in tokens if t != STOP),
        expected=len(steps),
    )


def match_conversation(conversation: Mapping[str, Any], steps: Sequence[FunnelStep]) -> FunnelMatch:
    events = ((conversation.get("tracker") or {}).get("events")) or []
    return match_sequence(events, steps)


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------

def _step_matches_expression() -> Dict[str, Any]:
    """True when ``$$this`` (an event) reaches ``$$step`` (the expected step)."""
    name = {
        "$cond": [
            {"$eq": ["$$step.event", "user"]},
            "$$this.parse_data.intent.name",
            "$$this.name",
        ]
    }
    return {
        "$and": [
            {"$eq": ["$$this.event", "$$step.event"]},
            {
                "$ne": [
                    {"$in": [{"$ifNull": [name, None]}, {"$ifNull": ["$$step.names", []]}]},
                    {"$ifNull": ["$$step.excluded", False]},
                ]
            },
        ]
    }


def _walk_expression() -> Dict[str, Any]:
    return {
        "$reduce": {
            "input": {"$concatArrays": [{"$ifNull": ["$tracker.events", []]}, [END_EVENT]]},
            "initialValue": {"cursor": 0, "matching": []},
            "in": {
                "$let": {
                    "vars": {"step": {"$arrayElemAt": ["$sequence", "$$value.cursor"]}},
                    "in": {
                        "$cond": [
                            _step_matches_expression(),
                            {
                                "cursor": {"$add": ["$$value.cursor", 1]},
                                "matching": {"$concatArrays": ["$$value.matching", ["$$step.label"]]},
                            },
                            {
                                "cursor": "$$value.cursor",
                                "matching": {"$concatArrays": ["$$value.matching", [STOP]]},
                            },
                        ]
                    },
                }
            },
        }
    }


def funnel_progress_stages(steps: Sequence[FunnelStep]) -> List[Dict[str, Any]]:
    """Stages that annotate each conversation with ``matching`` and ``funnelProgress``."""
    if not steps:
        return []
    return [
        {
            "$addFields": {
                "sequence": {"$literal": [s.to_document() for s in steps]},
                "eventTypes": {"$literal": [s.type.value for s in steps]},
            }
        },
        {"$addFields": {"matching": {"$let": {"vars": {"walk": _walk_expression()}, "in": "$$walk.matching"}}}},
        {"$set": {"matching": {"$filter": {"input": "$matching", "cond": {"$ne": ["$$this", STOP]}}}}},
        {"$addFields": {"funnelProgress": {"$size": "$matching"}}},
    ]


def create_matching_steps(spec: FilterSpec) -> List[Dict[str, Any]]:
    """Stages keeping only conversations that complete the requested funnel."""
    steps = funnel_steps_for(spec)
    if not steps:
        return []
    return [
        *funnel_progress_stages(steps),
        {"$match": {"matching": {"$size": len(steps)}}},
    ]


def step_counts(progress_counts: Mapping[int, int], steps: Sequence[FunnelStep]) -> List[Tuple[str, int]]:
    """Turn ``{progress: conversations}`` into cumulative per-step counts."""
    result = []
    for index, step in enumerate(steps, start=1):
        reached = sum(count for progress, count in progress_counts.items() if progress >= index)
        result.append((step.label, reached))
    return result
