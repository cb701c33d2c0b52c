"""Lenient parsing of query-string and form values.

Bad input (letters in a number box, an unknown sort column) is treated as
"not given" instead of failing the page.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TypeVar

from django.http import QueryDict

E = TypeVar("E", bound=Enum)

TRUE_VALUES = {"1", "true", "on", "yes"}


def query_str(data: QueryDict, key: str) -> str | None:
    value = data.get(key, "").strip()
    return value or None


def query_int(
    data: QueryDict, key: str, minimum: int | None = None, maximum: int | None = None
) -> int | None:
    try:
        value = int(data.get(key, ""))
    except ValueError:
        return None
    if minimum is not None and value < minimum:
        return None
    if maximum is not None and value > maximum:
        return None
    return value


def query_decimal(data: QueryDict, key: str, minimum: Decimal | None = None) -> Decimal | None:
    raw = data.get(key, "").strip().replace(",", ".")
    if not raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    if not value.is_finite() or (minimum is not None and value < minimum):
        return None
    return value


def query_bool(data: QueryDict, key: str) -> bool | None:
    """True for a ticked checkbox; None (no filter) otherwise."""
    return True if data.get(key, "").lower() in TRUE_VALUES else None


def query_choice(data: QueryDict, key: str, choices: type[E]) -> E | None:
    try:
        return choices(data.get(key, ""))
    except ValueError:
        return None
