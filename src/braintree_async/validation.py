"""Precondition checks run before any call reaches the Braintree SDK."""

from collections.abc import Mapping
from typing import Any

from braintree_async.exceptions import ValidationError


def is_blank(value: Any) -> bool:
    """Return True for None, empty or whitespace-only strings and empty mappings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping):
        return not value
    return False


def require(value: Any, field: str, message: str | None = None) -> None:
    """Raise ValidationError if ``value`` is blank."""
    if is_blank(value):
        raise ValidationError(field, message)


def require_one_of(values: Mapping[str, Any], message: str) -> str:
    """Require exactly one non-blank entry in ``values`` and return its key.

    Raises:
        ValidationError: If none or more than one of the values is set. The
            error's ``field`` lists every candidate name joined by ``|``.
    """
    present = [name for name, value in values.items() if not is_blank(value)]
    if len(present) != 1:
        raise ValidationError("|".join(values), message)
    return present[0]
