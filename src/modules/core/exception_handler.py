"""DRF exception handler: the single place domain errors meet HTTP.

Every error response has the same shape::

    {
        "type": "client_error",
        "title": "Not Found",
        "status": 404,
        "errors": [{"code": "not_found", "detail": "...", "attr": null}]
    }

Domain exceptions are mapped by class (first match wins, so subclasses
must be listed before their bases).  Anything unknown falls through to
DRF's default handler and is then reshaped; a ``None`` result lets Django
produce its usual 500.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import IntegrityError
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import (
    DuplicateResource,
    NotFound,
    OptimisticLockConflict,
)
from modules.orders.exceptions import (
    DuplicateLineItem,
    InvalidStatusTransition,
    OrderNotModifiable,
)
from modules.products.exceptions import InsufficientStock

logger = structlog.get_logger(__name__)

_DOMAIN_ERRORS: List[tuple[type[Exception], int, str]] = [
    (NotFound, status.HTTP_404_NOT_FOUND, "not_found"),
    (OptimisticLockConflict, status.HTTP_409_CONFLICT, "optimistic_lock_conflict"),
    (DuplicateResource, status.HTTP_409_CONFLICT, "duplicate_resource"),
    (InsufficientStock, status.HTTP_400_BAD_REQUEST, "insufficient_stock"),
    (
        InvalidStatusTransition,
        status.HTTP_400_BAD_REQUEST,
        "invalid_status_transition",
    ),
    (DuplicateLineItem, status.HTTP_400_BAD_REQUEST, "duplicate_line_item"),
    (OrderNotModifiable, status.HTTP_400_BAD_REQUEST, "order_not_modifiable"),
]

_TITLES = {
    status.HTTP_400_BAD_REQUEST: "Bad Request",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method Not Allowed",
    status.HTTP_409_CONFLICT: "Conflict",
}


def api_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    """Translate *exc* into a standardized error response."""
    for error_class, status_code, code in _DOMAIN_ERRORS:
        if isinstance(exc, error_class):
            logger.info(
                "api.domain_error",
                error=type(exc).__name__,
                status_code=status_code,
                detail=str(exc),
            )
            return _error_response(status_code, [_error(code, str(exc))])

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                "invalid",
                item["msg"],
                ".".join(str(part) for part in item["loc"]) or None,
            )
            for item in exc.errors()
        ]
        return _error_response(status.HTTP_400_BAD_REQUEST, errors)

    if isinstance(exc, IntegrityError):
        logger.warning("api.integrity_error", detail=str(exc))
        return _error_response(
            status.HTTP_409_CONFLICT,
            [_error("integrity_error", _classify_integrity_error(exc))],
        )

    response = exception_handler(exc, context)
    if response is None:
        return None
    response.data = _envelope(response.status_code, _flatten(response.data))
    return response


def _classify_integrity_error(exc: IntegrityError) -> str:
    message = str(exc).lower()
    if "unique" in message or "duplicate" in message:
        return "Duplicate value violates uniqueness constraint"
    if "foreign key" in message:
        return "Referenced resource not found or invalid"
    if "check" in message:
        return "Value violates check constraint"
    return "Data integrity violation"


def _flatten(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten DRF's nested ``ErrorDetail`` structure into a list."""
    if isinstance(data, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in data.items():
            if key == "detail" and attr is None:
                errors.extend(_flatten(value))
                continue
            nested = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten(value, nested))
        return errors
    if isinstance(data, list):
        errors = []
        for index, value in enumerate(data):
            nested = attr
            if isinstance(value, (dict, list)):
                nested = f"{attr}.{index}" if attr else str(index)
            errors.extend(_flatten(value, nested))
        return errors
    return [_error(getattr(data, "code", "error"), str(data), attr)]


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _envelope(status_code: int, errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    if status_code >= 500:
        error_type = "server_error"
    elif any(e["attr"] for e in errors):
        error_type = "validation_error"
    else:
        error_type = "client_error"
    return {
        "type": error_type,
        "title": _TITLES.get(status_code, "Error"),
        "status": status_code,
        "errors": errors,
    }


def _error_response(status_code: int, errors: List[Dict[str, Any]]) -> Response:
    return Response(_envelope(status_code, errors), status=status_code)
