"""
Column classifier: turns a type's decorated properties into TableColumns.
Reserved identity/audit columns lead in their fixed order; everything else
keeps declaration order.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from datory.annotations import DataColumn
from datory.config import settings
from datory.core.coercion import is_class
from datory.core.reflection import PropertyInfo
from datory.models.table import DataType, TableColumn, RESERVED_COLUMN_NAMES

_RESERVED_RANK = {name.lower(): rank for rank, name in enumerate(RESERVED_COLUMN_NAMES)}


def _is_textual(value_type) -> bool:
    return is_class(value_type) and issubclass(value_type, (str, Enum))


def classify_type(value_type) -> DataType:
    """Map a non-textual value type to its storage type; VarChar if unknown."""
    if not is_class(value_type):
        return DataType.VARCHAR
    # bool before int: bool is an int subclass
    if issubclass(value_type, bool):
        return DataType.BOOLEAN
    if issubclass(value_type, int):
        return DataType.INTEGER
    if issubclass(value_type, (datetime, date)):
        return DataType.DATETIME
    if issubclass(value_type, (float, Decimal)):
        return DataType.DECIMAL
    return DataType.VARCHAR


def to_table_column(prop: PropertyInfo, default_length: Optional[int] = None) -> Optional[TableColumn]:
    """Build the TableColumn for one property, or None if it is not mapped."""
    column = prop.find_marker(DataColumn)
    if column is None:
        return None

    if _is_textual(prop.value_type):
        if column.text:
            return TableColumn(
                attribute_name=prop.name,
                data_type=DataType.TEXT,
                is_extend=column.extend,
            )
        length = column.length
        if length <= 0:
            length = default_length if default_length is not None else settings.VARCHAR_DEFAULT_LENGTH
        return TableColumn(attribute_name=prop.name, data_type=DataType.VARCHAR, data_length=length)

    return TableColumn(attribute_name=prop.name, data_type=classify_type(prop.value_type))


def classify_columns(properties: list[PropertyInfo], default_length: Optional[int] = None) -> list[TableColumn]:
    """
    Produce the ordered column list for a type's declared properties.
    Pure: the same declarations always give the same list.
    """
    reserved: list[TableColumn] = []
    others: list[TableColumn] = []
    for prop in properties:
        col = to_table_column(prop, default_length)
        if col is None:
            continue
        if col.attribute_name.lower() in _RESERVED_RANK:
            reserved.append(col)
        else:
            others.append(col)
    # sorted() is stable: same-rank names keep declaration order
    reserved = sorted(reserved, key=lambda c: _RESERVED_RANK[c.attribute_name.lower()])
    return reserved + others
