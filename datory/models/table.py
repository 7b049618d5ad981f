"""Pydantic schemas for table columns and record base types."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict

from datory.annotations import DataColumn


class DataType(str, Enum):
    VARCHAR = "VarChar"
    TEXT = "Text"
    INTEGER = "Integer"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    DECIMAL = "Decimal"


class TableColumn(BaseModel):
    model_config = ConfigDict(frozen=True)

    attribute_name: str
    data_type: DataType = DataType.VARCHAR
    data_length: int = 0            # VarChar only
    is_extend: bool = False


# Reserved identity/audit columns, in the order they lead every column list.
RESERVED_COLUMN_NAMES = ("Id", "Guid", "CreatedDate", "LastModifiedDate")


class Entity(BaseModel):
    """Base record carrying the reserved identity/audit columns."""
    Id: Annotated[int, DataColumn()] = 0
    Guid: Annotated[str, DataColumn(length=50)] = ""
    CreatedDate: Annotated[Optional[datetime], DataColumn()] = None
    LastModifiedDate: Annotated[Optional[datetime], DataColumn()] = None
