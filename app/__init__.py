"""User rating service application package."""

__all__ = []
