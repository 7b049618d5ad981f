"""
Type metadata cache: memoized schema lookups keyed by type identity.

Every lookup is read-through: the first call for a type derives the value from
the type's declarations, later calls return the stored value. Concurrent first
calls may derive the same value twice; publishing goes through
``dict.setdefault`` so one value wins and every caller gets that one.
Stored values are immutable (tuples, frozen models); list results are copies.
"""
import logging
from typing import Any, Callable, Optional

from datory.annotations import DataIgnore, JsonIgnore, get_data_table
from datory.core.column_classifier import classify_columns
from datory.core.reflection import PropertyInfo, find_property, reflect_properties
from datory.models.table import TableColumn

logger = logging.getLogger(__name__)


def _pydantic_excluded(cls) -> set[str]:
    """Fields a pydantic model declares with ``Field(exclude=True)``."""
    fields = getattr(cls, "model_fields", None)
    if not isinstance(fields, dict):
        return set()
    return {name for name, info in fields.items() if getattr(info, "exclude", None) is True}


class TypeMetadataCache:
    """Process-lifetime store of derived schema metadata, one entry per (kind, type)."""

    def __init__(self, default_length: Optional[int] = None):
        self._entries: dict[tuple[str, type], Any] = {}
        self._default_length = default_length

    def _memoize(self, kind: str, cls: type, derive: Callable[[type], Any]) -> Any:
        key = (kind, cls)
        try:
            return self._entries[key]
        except KeyError:
            pass
        value = derive(cls)
        logger.debug("Derived %s for %s.%s", kind, cls.__module__, cls.__qualname__)
        return self._entries.setdefault(key, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    # ── Properties ────────────────────────────────────────────────────────────

    def _properties(self, cls: type) -> tuple[PropertyInfo, ...]:
        return self._memoize("properties", cls, lambda c: tuple(reflect_properties(c)))

    def get_properties(self, cls: type) -> list[PropertyInfo]:
        return list(self._properties(cls))

    def get_property(self, cls: type, name: str) -> Optional[PropertyInfo]:
        return find_property(self._properties(cls), name)

    def get_property_names(self, cls: type) -> list[str]:
        return list(self._memoize(
            "property_names", cls, lambda c: tuple(p.name for p in self._properties(c))
        ))

    # ── Table schema ──────────────────────────────────────────────────────────

    def get_table_name(self, cls: type) -> str:
        def derive(c):
            table = get_data_table(c)
            return table.name if table is not None else ""
        return self._memoize("table_name", cls, derive)

    def get_table_columns(self, cls: type) -> list[TableColumn]:
        return list(self._memoize(
            "table_columns", cls,
            lambda c: tuple(classify_columns(self._properties(c), self._default_length)),
        ))

    def get_column_names(self, cls: type) -> list[str]:
        return list(self._memoize(
            "column_names", cls, lambda c: tuple(col.attribute_name for col in self.get_table_columns(c))
        ))

    def get_extend_column_name(self, cls: type) -> str:
        """
        Name of the column marked as extended text, or "" if none.
        If several columns are marked, the first one in column order wins.
        """
        def derive(c):
            return next((col.attribute_name for col in self.get_table_columns(c) if col.is_extend), "")
        return self._memoize("extend_column_name", cls, derive)

    # ── Ignore lists ──────────────────────────────────────────────────────────

    def get_storage_ignore_names(self, cls: type) -> list[str]:
        return list(self._memoize(
            "storage_ignore_names", cls,
            lambda c: tuple(p.name for p in self._properties(c) if p.has_marker(DataIgnore)),
        ))

    def get_serialization_ignore_names(self, cls: type) -> list[str]:
        def derive(c):
            excluded = _pydantic_excluded(c)
            return tuple(
                p.name for p in self._properties(c)
                if p.has_marker(JsonIgnore) or p.name in excluded
            )
        return list(self._memoize("serialization_ignore_names", cls, derive))


# Process-wide default instance; inject a dedicated cache where isolation matters.
default_cache = TypeMetadataCache()


def get_table_name(cls: type) -> str:
    return default_cache.get_table_name(cls)


def get_table_columns(cls: type) -> list[TableColumn]:
    return default_cache.get_table_columns(cls)


def get_property_names(cls: type) -> list[str]:
    return default_cache.get_property_names(cls)


def get_column_names(cls: type) -> list[str]:
    return default_cache.get_column_names(cls)


def get_extend_column_name(cls: type) -> str:
    return default_cache.get_extend_column_name(cls)


def get_storage_ignore_names(cls: type) -> list[str]:
    return default_cache.get_storage_ignore_names(cls)


def get_serialization_ignore_names(cls: type) -> list[str]:
    return default_cache.get_serialization_ignore_names(cls)
