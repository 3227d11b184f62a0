"""Conversation query and funnel-analytics engine."""

__version__ = "1.0.0"
