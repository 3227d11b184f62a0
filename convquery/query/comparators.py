"""Resolve symbolic comparison names to query and in-process operators."""

import operator
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import ComparatorError
from ..models.filters import ComparatorName


@dataclass(frozen=True)
class Comparator:
    """A resolved comparison.

    ``symbol`` is the textual operator (``>=``, ``<=``, ``==``), ``mongo`` the
    equivalent aggregation operator, and ``predicate(a, b)`` the in-process
    test used when a clause is recomputed outside the store.
    """

    name: ComparatorName
    symbol: str
    mongo: str
    predicate: Callable[[Any, Any], bool]

    def query(self, bound: Any) -> dict:
        """Query-language condition comparing a field against ``bound``."""
        return {self.mongo: bound}

    def expression(self, value: Any, bound: Any) -> dict:
        """Aggregation expression comparing ``value`` against ``bound``."""
        return {self.mongo: [value, bound]}


_COMPARATORS = {
    ComparatorName.GREATER_THAN: Comparator(ComparatorName.GREATER_THAN, ">=", "$gte", operator.ge),
    ComparatorName.LESS_THAN: Comparator(ComparatorName.LESS_THAN, "<=", "$lte", operator.le),
    ComparatorName.EQUALS: Comparator(ComparatorName.EQUALS, "==", "$eq", operator.eq),
}


def resolve_comparator(name) -> Comparator:
    """
    Resolve a comparison name.

    Args:
        name: "greaterThan", "lessThan", "equals" or a ComparatorName

    Returns:
        The matching Comparator

    Raises:
        ComparatorError: If the name is not one of the supported comparisons
    """
    try:
        key = ComparatorName(name)
    except ValueError:
        raise ComparatorError(name) from None
    return _COMPARATORS[key]
