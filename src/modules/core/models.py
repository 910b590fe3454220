"""Base abstract model shared by every persisted entity.

Provides ``VersionedModel``:

- ``id``: ``BigAutoField`` surrogate key, used for foreign keys only.
- ``code``: UUIDv7 opaque identifier exposed to API callers.
- ``created_at`` / ``updated_at`` timestamps.
- ``version``: optimistic-concurrency counter.

Design decisions:
- ``version`` starts at ``0`` and is incremented by exactly one on every
  ``save()`` of an existing row.  The increment is a conditional
  ``UPDATE ... WHERE id = %s AND version = %s``: when another transaction
  committed first, no row matches and ``OptimisticLockConflict`` is raised
  before any column is written.
- ``save()`` guard ensures ``updated_at`` and ``version`` are included when
  ``update_fields`` is specified (Django skips ``auto_now`` fields otherwise).
"""

from __future__ import annotations

from typing import Any

import uuid6
from django.db import models
from django.db.models import F

from modules.core.exceptions import OptimisticLockConflict


class VersionedModel(models.Model):
    """Abstract base with surrogate PK, UUIDv7 code and version stamp."""

    id = models.BigAutoField(primary_key=True)
    code = models.UUIDField(
        default=uuid6.uuid7,
        unique=True,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    version = models.PositiveBigIntegerField(default=0, editable=False)

    class Meta:
        abstract = True

    @classmethod
    def entity_name(cls) -> str:
        return cls._meta.object_name

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self._state.adding:
            super().save(*args, **kwargs)
            return

        self._bump_version()

        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            missing = [f for f in ("version", "updated_at") if f not in update_fields]
            kwargs["update_fields"] = list(update_fields) + missing
        super().save(*args, **kwargs)

    def _bump_version(self) -> None:
        expected = self.version
        matched = (
            type(self)
            ._base_manager.filter(pk=self.pk, version=expected)
            .update(version=F("version") + 1)
        )
        if not matched:
            raise OptimisticLockConflict(self.entity_name(), self.code)
        self.version = expected + 1
