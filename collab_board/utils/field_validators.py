"""Validation helpers for submitted post fields.

Errors only name the offending field; they never echo submitted values.
"""

from __future__ import annotations

import logging
from typing import Mapping

from collab_board.core.errors import ValidationAppError

logger = logging.getLogger(__name__)


def is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(fields: Mapping[str, object]) -> None:
    """Raise if any of ``fields`` is missing or blank.

    Args:
        fields: Field name to submitted value, in the order to report them.

    Raises:
        ValidationAppError: ``missing_required_field`` naming the first
            missing field.
    """
    for name, value in fields.items():
        if is_blank(value):
            logger.info("validation.missing_field", extra={"field": name})
            raise ValidationAppError(
                code="missing_required_field",
                message="Missing required field",
                details={"field": name},
            )


def check_max_length(name: str, value: str | None, max_length: int) -> None:
    """Raise if ``value`` is longer than ``max_length`` characters."""
    if value is not None and len(value) > max_length:
        raise ValidationAppError(
            code="field_too_long",
            message="Field too long",
            details={"field": name, "max_length": max_length, "actual_length": len(value)},
        )


def clean_optional(value: str | None) -> str | None:
    """Trim an optional text field, mapping blank input to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
