"""Exceptions raised by the conversation query engine."""


class ConversationQueryError(Exception):
    """Base class for all query engine errors."""


class ComparatorError(ConversationQueryError, ValueError):
    """Raised when a comparison name cannot be resolved."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Comparison with {value} not supported")


class FunnelSpecError(ConversationQueryError, ValueError):
    """Raised when a funnel step cannot be resolved to a matchable event."""


class StoreError(ConversationQueryError):
    """Raised when the conversation store fails to execute a query."""


class ConversationNotFoundError(ConversationQueryError):
    """Raised when a single conversation lookup finds nothing."""
