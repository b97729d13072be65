"""Infrastructure layer implementations."""

from orderdesk.infrastructure import lookup, storage

__all__ = ["storage", "lookup"]
