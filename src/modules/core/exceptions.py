"""Shared domain exceptions.

Raised by the Service Layer when a rule is violated.  None of these
classes know about HTTP: ``modules.core.exception_handler`` is the only
place that maps them onto response codes.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for every business-rule violation."""


class NotFound(DomainError):
    """The requested entity does not exist.

    Subclasses pin ``entity_name``; ``field`` says which key was used
    for the look-up (``code`` for API callers, ``id`` for internal FKs).
    """

    entity_name = "Resource"

    def __init__(self, key: Any, field: str = "code") -> None:
        self.key = key
        self.field = field
        super().__init__(f"{self.entity_name} with {field} {key} not found")


class OptimisticLockConflict(DomainError):
    """The entity was modified by another request since it was read."""

    def __init__(self, entity_name: str, key: Any) -> None:
        self.entity_name = entity_name
        self.key = key
        super().__init__(
            f"{entity_name} {key} was modified by another request"
        )


class DuplicateResource(DomainError):
    """A unique business field already holds the submitted value."""

    def __init__(self, entity_name: str, field: str, value: Any) -> None:
        self.entity_name = entity_name
        self.field = field
        self.value = value
        super().__init__(f"{entity_name} with {field} '{value}' already exists")
