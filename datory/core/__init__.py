from datory.core.metadata_cache import (  # noqa: F401
    TypeMetadataCache, default_cache,
    get_table_name, get_table_columns, get_property_names, get_column_names,
    get_extend_column_name, get_storage_ignore_names, get_serialization_ignore_names,
)
from datory.core.column_classifier import classify_columns  # noqa: F401
from datory.core.accessor import DynamicAccessor, get_value, set_value  # noqa: F401
from datory.core.database import Database, get_connection_string_user_id  # noqa: F401
