"""
Parse-or-default helpers used when hydrating records from stored rows.

Stored data is heterogeneous legacy data, so none of these raise: a value
that cannot be converted becomes the target type's default instead.
"""
import logging
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Optional
from uuid import UUID

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError, PydanticUserError

logger = logging.getLogger(__name__)

_LAX_CONFIG = ConfigDict(coerce_numbers_to_str=True)

# Sentinel for "no parse"; None is a legitimate parsed value.
MISSING = object()

# Scalars whose text form is a faithful str conversion.
_TEXT_SCALARS = (bool, int, float, Decimal, datetime, date, UUID, Enum)

_ZERO_VALUES = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
    Decimal: Decimal(0),
    datetime: datetime.min,
    date: date.min,
}


def is_class(value_type) -> bool:
    """A plain class, not a parametrized generic such as list[int]."""
    return isinstance(value_type, type) and typing.get_origin(value_type) is None


def is_enum_type(value_type) -> bool:
    return is_class(value_type) and issubclass(value_type, Enum)


def is_value_type(value_type) -> bool:
    """True for types whose null representation is their zero value."""
    if is_enum_type(value_type):
        return True
    return is_class(value_type) and any(issubclass(value_type, t) for t in _ZERO_VALUES if t is not str)


def default_for(value_type, nullable: bool = False) -> Any:
    """Zero/default value of a type: "" for str, 0, False, first enum member, else None."""
    if nullable or not is_class(value_type):
        return None
    if is_enum_type(value_type):
        members = list(value_type)
        return members[0] if members else None
    # datetime before date: datetime is a date subclass
    for t in (bool, int, float, Decimal, datetime, date, str):
        if issubclass(value_type, t):
            return _ZERO_VALUES[t]
    return None


def parse_enum(enum_type: type[Enum], value, default=MISSING):
    """
    Case-insensitive parse of ``value`` into ``enum_type``.
    Accepts a member, a member name, a member value, or a numeric string
    matching a member value. Returns ``default`` when nothing matches.
    """
    if isinstance(value, enum_type):
        return value
    if value is None:
        return default
    text = value.name if isinstance(value, Enum) else str(value).strip()
    if not text:
        return default

    lowered = text.lower()
    for name, member in enum_type.__members__.items():
        if name.lower() == lowered:
            return member
    for member in enum_type:
        if isinstance(member.value, str) and member.value.lower() == lowered:
            return member

    candidates = [value.value if isinstance(value, Enum) else value]
    try:
        candidates.append(int(text))
    except ValueError:
        pass
    for candidate in candidates:
        try:
            return enum_type(candidate)
        except (ValueError, TypeError):
            continue
    return default


@lru_cache(maxsize=None)
def _adapter_for(value_type) -> Optional[TypeAdapter]:
    try:
        return TypeAdapter(value_type, config=_LAX_CONFIG)
    except (PydanticSchemaGenerationError, NameError, TypeError) as e:
        logger.debug("No coercion schema for %r: %s", value_type, e)
        return None
    except PydanticUserError:
        # models and dataclasses carry their own config
        pass
    try:
        return TypeAdapter(value_type)
    except (PydanticUserError, NameError, TypeError) as e:
        logger.debug("No coercion schema for %r: %s", value_type, e)
        return None


def _scalar_conversion(value, value_type):
    """Conversions pydantic's lax mode refuses but a plain cast accepts, else MISSING."""
    if value_type is str and isinstance(value, _TEXT_SCALARS):
        return value.name if isinstance(value, Enum) else str(value)
    if value_type is bool and isinstance(value, (int, float, Decimal)):
        return value != 0
    return MISSING


def change_type(value, value_type, nullable: bool = False):
    """
    Convert ``value`` into ``value_type`` with pydantic's lax rules.
    Falls back to ``default_for(value_type, nullable)`` on any failure.
    """
    if value_type is Any:
        return value
    try:
        adapter = _adapter_for(value_type)
    except TypeError:
        # unhashable annotation
        adapter = None

    if adapter is not None:
        try:
            return adapter.validate_python(value)
        except ValidationError as e:
            converted = _scalar_conversion(value, value_type)
            if converted is not MISSING:
                return converted
            logger.debug("Could not convert %r to %r (%d errors)", value, value_type, e.error_count())
    elif is_class(value_type) and isinstance(value, value_type):
        return value
    return default_for(value_type, nullable)
