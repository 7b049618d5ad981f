"""
Declaration vocabulary for mapped record types.

Column-level markers go inside ``typing.Annotated``::

    @data_table("siteserver_Content")
    class Content(Entity):
        Title: Annotated[str, DataColumn(length=255)] = ""
        Body: Annotated[str, DataColumn(text=True, extend=True)] = ""
        Cache: Annotated[str, DataIgnore(), JsonIgnore()] = ""

The markers are frozen dataclasses so pydantic leaves them alone when it
builds a model's validators.
"""
from dataclasses import dataclass

TABLE_ATTR = "__datory_table__"


@dataclass(frozen=True)
class DataTable:
    name: str


@dataclass(frozen=True)
class DataColumn:
    length: int = 0
    text: bool = False
    extend: bool = False


@dataclass(frozen=True)
class DataIgnore:
    """Property is left out of storage mapping."""


@dataclass(frozen=True)
class JsonIgnore:
    """Property is left out of external serialization."""


def data_table(name: str):
    """Class decorator attaching a table name to a record type."""
    def decorate(cls):
        setattr(cls, TABLE_ATTR, DataTable(name))
        return cls
    return decorate


def get_data_table(cls) -> DataTable | None:
    table = getattr(cls, TABLE_ATTR, None)
    return table if isinstance(table, DataTable) else None
