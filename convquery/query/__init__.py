"""Query compiler package: comparators, predicates, funnel matching, pagination."""

from .comparators import Comparator, resolve_comparator
from .filters import create_filter_object
from .funnel import (
    FunnelStep,
    FunnelMatch,
    reshape_sequence,
    match_sequence,
    create_matching_steps,
)
from .pagination import facet_stage, shape_page, sort_stage

__all__ = [
    "Comparator",
    "resolve_comparator",
    "create_filter_object",
    "FunnelStep",
    "FunnelMatch",
    "reshape_sequence",
    "match_sequence",
    "create_matching_steps",
    "facet_stage",
    "shape_page",
    "sort_stage",
]
