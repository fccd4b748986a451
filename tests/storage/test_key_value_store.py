"""
🧪 test_key_value_store.py: сховища ключ-значення (аналог localStorage)
"""

import json

import aiofiles.os
import pytest

from homego.infrastructure.storage.key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore


@pytest.mark.asyncio
async def test_in_memory_store_roundtrip():
    store = InMemoryKeyValueStore({"a": "1"})

    await store.set("b", "2")
    await store.remove("a")
    await store.remove("missing")

    assert await store.get("a") is None
    assert await store.get("b") == "2"
    assert store.snapshot() == {"b": "2"}


@pytest.mark.asyncio
async def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    store = JsonFileKeyValueStore(path)

    await store.set("token", "abc")
    await store.set("currency", "EUR")
    await store.remove("currency")

    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc"}
    assert not path.with_suffix(".json.tmp").exists()

    reopened = JsonFileKeyValueStore(path)
    assert await reopened.get("token") == "abc"
    assert await reopened.get("currency") is None


@pytest.mark.asyncio
async def test_json_file_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    assert await store.get("token") is None

    await store.set("token", "fresh")
    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "fresh"}


@pytest.mark.asyncio
async def test_json_file_store_missing_file(tmp_path):
    store = JsonFileKeyValueStore(tmp_path / "absent.json")

    assert await store.get("anything") is None
    assert store.path.name == "absent.json"


@pytest.mark.asyncio
async def test_json_file_store_keeps_cache_in_sync_when_write_fails(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    store = JsonFileKeyValueStore(path)
    await store.set("token", "abc")

    async def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(aiofiles.os, "replace", broken_replace)

    with pytest.raises(OSError):
        await store.set("currency", "EUR")
    with pytest.raises(OSError):
        await store.remove("token")

    assert await store.get("currency") is None
    assert await store.get("token") == "abc"
    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc"}


@pytest.mark.asyncio
async def test_json_file_store_unwritable_directory_leaves_store_empty(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = JsonFileKeyValueStore(blocker / "storage.json")

    with pytest.raises(OSError):
        await store.set("token", "abc")

    assert await store.get("token") is None
