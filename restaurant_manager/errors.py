"""Errors raised by manager operations."""

from __future__ import annotations


class RestaurantError(Exception):
    """Base class for rejected manager operations."""


class ValidationError(RestaurantError, ValueError):
    """Input is malformed: bad interval, non-positive amount, empty text."""


class NotFoundError(RestaurantError, LookupError):
    """A referenced table, reservation, dish or order does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(RestaurantError):
    """The operation would break a business rule."""
