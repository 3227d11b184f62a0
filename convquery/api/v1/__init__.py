"""API v1 routers."""

from . import conversations

__all__ = ["conversations"]
