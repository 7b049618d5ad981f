"""
Datory: schema metadata for annotated record types.
Derives table names, ordered column lists and ignore lists from declarations,
caches them per type, and reads/writes record properties with lenient coercion.
"""
from datory.annotations import DataTable, DataColumn, DataIgnore, JsonIgnore, data_table  # noqa: F401
from datory.models import DataType, TableColumn, Entity, DatabaseType  # noqa: F401
from datory.core import (  # noqa: F401
    TypeMetadataCache, default_cache,
    get_table_name, get_table_columns, get_property_names, get_column_names,
    get_extend_column_name, get_storage_ignore_names, get_serialization_ignore_names,
    DynamicAccessor, get_value, set_value, Database,
)

__version__ = "1.0.0"
