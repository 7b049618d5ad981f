import threading
import pytest
from typing import Annotated, Optional
from pydantic import BaseModel, Field

import datory.core.metadata_cache as metadata_cache
from datory.annotations import DataColumn, DataIgnore, JsonIgnore, data_table
from datory.core.metadata_cache import TypeMetadataCache
from datory.models.table import DataType, Entity


@data_table("siteserver_Content")
class Content(Entity):
    ChannelId: Annotated[int, DataColumn()] = 0
    Title: Annotated[str, DataColumn(length=255)] = ""
    Body: Annotated[str, DataColumn(text=True, extend=True)] = ""
    SettingsXml: Annotated[str, DataColumn(text=True, extend=True)] = ""
    RenderedHtml: Annotated[str, DataIgnore()] = ""
    Password: Annotated[str, DataColumn(), JsonIgnore()] = ""
    Checksum: str = Field(default="", exclude=True)


class Plain(BaseModel):
    Name: Annotated[str, DataColumn()] = ""
    Notes: Optional[str] = None


def test_table_name(cache):
    assert cache.get_table_name(Content) == "siteserver_Content"

def test_table_name_empty_for_undecorated_type(cache):
    assert cache.get_table_name(Plain) == ""

def test_property_names(cache):
    assert cache.get_property_names(Plain) == ["Name", "Notes"]
    names = cache.get_property_names(Content)
    assert names[:4] == ["Id", "Guid", "CreatedDate", "LastModifiedDate"]
    assert "RenderedHtml" in names and "Checksum" in names

def test_column_names(cache):
    assert cache.get_column_names(Content) == [
        "Id", "Guid", "CreatedDate", "LastModifiedDate",
        "ChannelId", "Title", "Body", "SettingsXml", "Password",
    ]

def test_extend_column_first_match_wins(cache):
    # Body and SettingsXml are both marked; the first in column order is reported.
    assert cache.get_extend_column_name(Content) == "Body"

def test_extend_column_empty_when_none_marked(cache):
    assert cache.get_extend_column_name(Plain) == ""

def test_storage_ignore_names(cache):
    assert cache.get_storage_ignore_names(Content) == ["RenderedHtml"]
    assert cache.get_storage_ignore_names(Plain) == []

def test_serialization_ignore_names(cache):
    assert cache.get_serialization_ignore_names(Content) == ["Password", "Checksum"]

def test_repeated_calls_are_equal(cache):
    assert cache.get_table_columns(Content) == cache.get_table_columns(Content)
    assert cache.get_table_name(Content) == cache.get_table_name(Content)
    assert cache.get_column_names(Content) == cache.get_column_names(Content)

def test_second_call_does_not_reinspect(cache, monkeypatch):
    calls = []
    real_classify = metadata_cache.classify_columns
    real_reflect = metadata_cache.reflect_properties

    def counting_classify(*args, **kwargs):
        calls.append("classify")
        return real_classify(*args, **kwargs)

    def counting_reflect(cls):
        calls.append("reflect")
        return real_reflect(cls)

    monkeypatch.setattr(metadata_cache, "classify_columns", counting_classify)
    monkeypatch.setattr(metadata_cache, "reflect_properties", counting_reflect)

    cache.get_table_columns(Content)
    assert calls == ["reflect", "classify"]
    cache.get_table_columns(Content)
    cache.get_property_names(Content)
    cache.get_column_names(Content)
    assert calls == ["reflect", "classify"]

def test_returned_lists_are_copies(cache):
    columns = cache.get_table_columns(Content)
    columns.clear()
    names = cache.get_column_names(Content)
    names.append("Injected")
    assert len(cache.get_table_columns(Content)) == 9
    assert "Injected" not in cache.get_column_names(Content)

def test_caches_are_independent():
    first = TypeMetadataCache(default_length=100)
    second = TypeMetadataCache(default_length=200)
    assert first.get_table_columns(Plain)[0].data_length == 100
    assert second.get_table_columns(Plain)[0].data_length == 200

def test_clear_resets_entries(cache):
    cache.get_table_columns(Content)
    assert len(cache) > 0
    cache.clear()
    assert len(cache) == 0
    assert cache.get_table_name(Content) == "siteserver_Content"

def test_get_property(cache):
    prop = cache.get_property(Content, "Title")
    assert prop is not None
    assert prop.value_type is str
    assert cache.get_property(Content, "title") is None
    assert cache.get_property(Content, "Missing") is None

def test_module_level_functions_use_default_cache():
    assert metadata_cache.get_table_name(Content) == "siteserver_Content"
    assert metadata_cache.get_column_names(Content)[0] == "Id"
    assert metadata_cache.get_table_columns(Content)[6].data_type == DataType.TEXT

def test_concurrent_first_calls_agree(cache):
    @data_table("model_Race")
    class Race(Entity):
        A: Annotated[str, DataColumn()] = ""
        B: Annotated[int, DataColumn()] = 0
        C: Annotated[str, DataColumn(text=True, extend=True)] = ""

    n_threads = 16
    barrier = threading.Barrier(n_threads)
    results = [None] * n_threads
    errors = []

    def worker(i):
        try:
            barrier.wait()
            results[i] = cache.get_table_columns(Race)
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    expected = cache.get_table_columns(Race)
    assert len(expected) == 7
    assert all(r == expected for r in results)
