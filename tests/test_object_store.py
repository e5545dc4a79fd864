"""Tests for the local filesystem object store."""

import io

import pytest

from hirehub.core.errors import StorageError
from hirehub.services.object_store import LocalObjectStore, sanitize_filename


@pytest.fixture
def local_store(tmp_path):
    return LocalObjectStore(root_dir=str(tmp_path / "objects"), base_url="http://testserver/uploads")


async def put_bytes(store, data=b"hello", name="My Resume (final).pdf", category="cv"):
    return await store.put(
        io.BytesIO(data), "application/pdf", category=category, owner_id="42", original_filename=name
    )


def test_sanitize_filename_replaces_unsafe_characters():
    assert sanitize_filename("My Resume (final).pdf") == "My_Resume__final_.pdf"
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("") == "file"


async def test_put_writes_object_and_reports_size(local_store):
    stored = await put_bytes(local_store, data=b"x" * 1500)

    assert stored.size_bytes == 1500
    assert stored.key.startswith("cv/")
    assert stored.key.endswith("-My_Resume__final_.pdf")
    assert "-42-" in stored.key
    assert local_store.exists(stored.key)
    assert local_store.resolve_path(stored.key).read_bytes() == b"x" * 1500


async def test_put_generates_distinct_keys_for_same_name(local_store):
    first = await put_bytes(local_store)
    second = await put_bytes(local_store)

    assert first.key != second.key


async def test_delete_is_idempotent(local_store):
    stored = await put_bytes(local_store)

    assert await local_store.delete(stored.key) is True
    assert await local_store.delete(stored.key) is False
    assert not local_store.exists(stored.key)


async def test_delete_never_written_key(local_store):
    assert await local_store.delete("cv/never-written.pdf") is False


def test_keys_escaping_root_are_rejected(local_store):
    with pytest.raises(StorageError):
        local_store.resolve_path("../outside.txt")


async def test_put_failure_surfaces_storage_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = LocalObjectStore(root_dir=str(blocker), base_url="http://testserver/uploads")

    with pytest.raises(StorageError):
        await put_bytes(store)


def test_url_for_builds_absolute_url(local_store):
    assert local_store.url_for("cv/1-a.pdf") == "http://testserver/uploads/cv/1-a.pdf"


@pytest.mark.parametrize(
    "value",
    [
        "http://testserver/uploads/cv/1-a.pdf",
        "https://cdn.example.com/uploads/cv/1-a.pdf?download=1",
        "/uploads/cv/1-a.pdf",
        "uploads/cv/1-a.pdf",
        "cv/1-a.pdf",
    ],
)
def test_key_from_url_accepts_absolute_relative_and_bare(local_store, value):
    assert local_store.key_from_url(value) == "cv/1-a.pdf"


def test_key_from_url_round_trips_url_for(local_store):
    key = "projects/1700000000000-42-abcd1234-shot.png"
    assert local_store.key_from_url(local_store.url_for(key)) == key


@pytest.mark.parametrize(
    "value",
    [
        "http://h/app/uploads/cv/1-a.pdf",
        "/app/uploads/cv/1-a.pdf",
        "cv/1-a.pdf",
    ],
)
def test_key_from_url_under_sub_path_base_url(tmp_path, value):
    store = LocalObjectStore(root_dir=str(tmp_path / "objects"), base_url="http://h/app/uploads")

    assert store.key_from_url(store.url_for("cv/1-a.pdf")) == "cv/1-a.pdf"
    assert store.key_from_url(value) == "cv/1-a.pdf"
