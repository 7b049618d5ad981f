"""
Database descriptor: static facts about a live SQLAlchemy connection.
Everything is read from the handle's URL at construction; no queries are issued
and the handle is never closed or modified.
"""
import logging
from typing import Union

from sqlalchemy.engine import Connection, Engine, URL
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError

from datory.models.connection import DatabaseType

logger = logging.getLogger(__name__)

# Key names carrying the login in key=value;... connection strings, in lookup order.
USER_ID_KEYS = ("Uid", "User ID", "UserID", "User", "Username")


def get_value_from_connection_string(connection_string: str, key: str) -> str:
    """Case-insensitive lookup of ``key`` in a ``key=value;key=value`` string."""
    if not connection_string:
        return ""
    wanted = key.strip().lower()
    for part in connection_string.split(";"):
        name, sep, value = part.partition("=")
        if sep and name.strip().lower() == wanted:
            return value.strip()
    return ""


def get_connection_string_user_id(connection_string: str) -> str:
    """Extract the login from a URL-style or key=value connection string; "" if absent."""
    if not connection_string:
        return ""
    if "://" in connection_string:
        try:
            return make_url(connection_string).username or ""
        except ArgumentError as e:
            logger.debug("Connection string is not a valid URL: %s", e)
            return ""
    for key in USER_ID_KEYS:
        value = get_value_from_connection_string(connection_string, key)
        if value:
            return value
    return ""


class Database:
    """Immutable description of a live connection: vendor, name, connection string, owner."""

    __slots__ = ("_database_type", "_connection", "_connection_string", "_name", "_owner")

    def __init__(self, database_type: DatabaseType, connection: Union[Engine, Connection]):
        if not isinstance(connection, (Engine, Connection)):
            raise TypeError(f"Expected an SQLAlchemy Engine or Connection, got {type(connection).__name__}")
        url: URL = connection.engine.url

        self._database_type = DatabaseType(database_type)
        self._connection = connection
        self._connection_string = url.render_as_string(hide_password=False)
        self._name = url.database or ""
        self._owner = get_connection_string_user_id(self._connection_string)

    @classmethod
    def from_connection(cls, connection: Union[Engine, Connection]) -> "Database":
        """Build a descriptor, inferring the vendor from the connection's dialect."""
        return cls(DatabaseType.from_dialect(connection.engine.dialect.name), connection)

    @property
    def database_type(self) -> DatabaseType:
        return self._database_type

    @property
    def connection(self) -> Union[Engine, Connection]:
        return self._connection

    @property
    def connection_string(self) -> str:
        return self._connection_string

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner(self) -> str:
        return self._owner

    def __repr__(self) -> str:
        return f"Database(type={self._database_type.value}, name={self._name!r}, owner={self._owner!r})"
