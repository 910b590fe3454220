"""Look-up and concurrency helpers shared by the service layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, TypeVar
from uuid import UUID

import structlog

from modules.core.exceptions import NotFound, OptimisticLockConflict

if TYPE_CHECKING:
    from modules.core.models import VersionedModel

logger = structlog.get_logger(__name__)

T_co = TypeVar("T_co", covariant=True)


class CodeLookup(Protocol[T_co]):
    def get_by_code(self, code: UUID) -> Optional[T_co]: ...


def require_by_code(
    repository: CodeLookup[T_co], not_found: type[NotFound], code: UUID
) -> T_co:
    """Return the entity with *code* or raise *not_found*."""
    entity = repository.get_by_code(code)
    if entity is None:
        raise not_found(code)
    return entity


def require_version_match(entity: VersionedModel, expected_version: int) -> None:
    """Fail fast when the caller's version differs from the persisted one.

    Must run before any field of *entity* is touched so that a rejected
    update leaves nothing half-applied.
    """
    if entity.version != expected_version:
        logger.warning(
            "concurrency.version_mismatch",
            entity=entity.entity_name(),
            code=str(entity.code),
            expected=expected_version,
            actual=entity.version,
        )
        raise OptimisticLockConflict(entity.entity_name(), entity.code)
