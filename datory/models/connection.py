"""Database vendor enumeration."""
from enum import Enum


class DatabaseType(str, Enum):
    MYSQL = "MySql"
    SQLSERVER = "SqlServer"
    POSTGRESQL = "PostgreSql"
    ORACLE = "Oracle"
    SQLITE = "SQLite"

    @classmethod
    def from_dialect(cls, dialect_name: str) -> "DatabaseType":
        """Map an SQLAlchemy dialect name (``engine.dialect.name``) to a DatabaseType."""
        try:
            return _DIALECTS[dialect_name.lower()]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {dialect_name}") from None


_DIALECTS = {
    "mysql": DatabaseType.MYSQL,
    "mariadb": DatabaseType.MYSQL,
    "mssql": DatabaseType.SQLSERVER,
    "postgresql": DatabaseType.POSTGRESQL,
    "oracle": DatabaseType.ORACLE,
    "sqlite": DatabaseType.SQLITE,
}
