"""
Dynamic accessor: get/set a named property on any record instance.

Properties are resolved on the instance's runtime type through the metadata
cache. Missing or inaccessible properties are not errors, and values that
cannot be converted fall back to the property type's default.
"""
import logging
from typing import Any, Optional

from pydantic import ValidationError

from datory.core.coercion import MISSING, change_type, default_for, is_enum_type, is_value_type, parse_enum
from datory.core.metadata_cache import TypeMetadataCache, default_cache
from datory.core.reflection import PropertyInfo

logger = logging.getLogger(__name__)


def _null_value(prop: PropertyInfo):
    if prop.nullable or not is_value_type(prop.value_type):
        return None
    return default_for(prop.value_type)


def _assign_or_default(instance, prop: PropertyInfo, value) -> None:
    """
    Assign ``value``; if the model's own assignment validation rejects it,
    assign the type's default instead, and if that is rejected too leave
    the property unchanged.
    """
    try:
        setattr(instance, prop.name, value)
        return
    except ValidationError as e:
        logger.debug("Assignment of %r to %s rejected (%d errors)", value, prop.name, e.error_count())
    fallback = default_for(prop.value_type, prop.nullable)
    try:
        setattr(instance, prop.name, fallback)
    except ValidationError:
        logger.debug("Default %r for %s rejected too; left unchanged", fallback, prop.name)


class DynamicAccessor:
    def __init__(self, cache: Optional[TypeMetadataCache] = None):
        self.cache = cache if cache is not None else default_cache

    def get_value(self, instance, name: str) -> Any:
        prop = self.cache.get_property(type(instance), name)
        if prop is None or not prop.can_read:
            return None

        raw = getattr(instance, name, None)
        if is_enum_type(prop.value_type):
            return parse_enum(prop.value_type, raw, default=raw)
        return raw

    def set_value(self, instance, name: str, value) -> None:
        prop = self.cache.get_property(type(instance), name)
        if prop is None or not prop.can_write:
            logger.debug("No writable property %r on %s", name, type(instance).__qualname__)
            return

        if value is None:
            converted = _null_value(prop)
        elif is_enum_type(prop.value_type):
            converted = parse_enum(prop.value_type, value)
            if converted is MISSING:
                converted = change_type(value, prop.value_type, prop.nullable)
        else:
            converted = change_type(value, prop.value_type, prop.nullable)
        _assign_or_default(instance, prop, converted)


_default_accessor = DynamicAccessor()


def get_value(instance, name: str) -> Any:
    return _default_accessor.get_value(instance, name)


def set_value(instance, name: str, value) -> None:
    _default_accessor.set_value(instance, name, value)
