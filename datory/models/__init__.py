from datory.models.table import DataType, TableColumn, Entity, RESERVED_COLUMN_NAMES  # noqa: F401
from datory.models.connection import DatabaseType  # noqa: F401
