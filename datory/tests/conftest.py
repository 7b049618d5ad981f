import os
import sys

# Add the repository root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

import pytest
import sqlite3
import tempfile
from sqlalchemy import create_engine

from datory.core.metadata_cache import TypeMetadataCache
from datory.core.accessor import DynamicAccessor


@pytest.fixture
def cache():
    yield TypeMetadataCache()


@pytest.fixture
def accessor(cache):
    return DynamicAccessor(cache)


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        cur = conn.cursor()
        cur.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, email TEXT UNIQUE);")
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)


@pytest.fixture
def sqlite_engine(temp_sqlite_db):
    engine = create_engine(f"sqlite:///{temp_sqlite_db}")
    yield engine
    engine.dispose()
