import io
import json
import shutil

import pytest

from content_files_api.adapters.storage import LocalBlobStorage


@pytest.fixture
def storage(tmp_path) -> LocalBlobStorage:
    return LocalBlobStorage(str(tmp_path / "blobs"))


def test_create_container_if_absent_is_idempotent(storage: LocalBlobStorage):
    assert not storage.container_exists("docs")
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "a.txt", io.BytesIO(b"abc"), "text/plain")
    storage.create_container_if_absent("docs", public=False)

    assert storage.container_exists("docs")
    assert storage.blob_exists("docs", "a.txt")


def test_create_container_if_absent_applies_access_level(storage: LocalBlobStorage):
    storage.create_container_if_absent("assets", public=True)
    assert storage.is_public("assets")

    storage.create_container_if_absent("assets", public=False)
    assert not storage.is_public("assets")


def test_upload_download_keeps_content_type(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "report.pdf", io.BytesIO(b"%PDF-1.4"), "application/pdf")

    download = storage.download_blob("docs", "report.pdf")

    assert download.content_type == "application/pdf"
    assert download.content_length == len(b"%PDF-1.4")
    assert b"".join(download.chunks) == b"%PDF-1.4"


def test_upload_without_content_type_defaults_to_octet_stream(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "blob", io.BytesIO(b"\x00\x01"), None)
    assert storage.download_blob("docs", "blob").content_type == "application/octet-stream"


def test_upload_streams_large_payloads(storage: LocalBlobStorage):
    payload = bytes(range(256)) * 1024  # several chunks
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "big.bin", io.BytesIO(payload), "application/octet-stream")
    assert b"".join(storage.download_blob("docs", "big.bin").chunks) == payload


def test_upload_overwrites(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "a.txt", io.BytesIO(b"first"), "text/plain")
    storage.upload_blob("docs", "a.txt", io.BytesIO(b"second"), "text/csv")

    download = storage.download_blob("docs", "a.txt")
    assert b"".join(download.chunks) == b"second"
    assert download.content_type == "text/csv"
    assert storage.list_blobs("docs") == ["a.txt"]


def test_delete_blob(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "a.txt", io.BytesIO(b"abc"), "text/plain")

    storage.delete_blob("docs", "a.txt")

    assert not storage.blob_exists("docs", "a.txt")
    assert storage.list_blobs("docs") == []


def test_delete_missing_blob_raises(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=False)
    with pytest.raises(FileNotFoundError):
        storage.delete_blob("docs", "missing.txt")


def test_list_blobs_round_trips_unusual_names(storage: LocalBlobStorage):
    names = ["..", ".", "a/b/c.txt", "50% off.txt", "container.json", "x.blob"]
    storage.create_container_if_absent("docs", public=False)
    for name in names:
        storage.upload_blob("docs", name, io.BytesIO(name.encode()), "text/plain")

    assert storage.list_blobs("docs") == sorted(names)
    for name in names:
        assert b"".join(storage.download_blob("docs", name).chunks) == name.encode()


def test_names_cannot_escape_the_storage_root(storage: LocalBlobStorage, tmp_path):
    storage.create_container_if_absent("..", public=False)
    storage.upload_blob("..", "../../escaped.txt", io.BytesIO(b"nope"), "text/plain")

    assert not (tmp_path / "escaped.txt").exists()
    assert all(path.is_relative_to(storage.root) for path in storage.root.rglob("*"))
    assert storage.list_blobs("..") == ["../../escaped.txt"]


def test_containers_are_isolated(storage: LocalBlobStorage):
    storage.create_container_if_absent("one", public=False)
    storage.create_container_if_absent("two", public=False)
    storage.upload_blob("one", "a.txt", io.BytesIO(b"abc"), "text/plain")

    assert storage.blob_exists("one", "a.txt")
    assert not storage.blob_exists("two", "a.txt")
    assert storage.list_blobs("two") == []


def test_access_file_records_container_name(storage: LocalBlobStorage):
    storage.create_container_if_absent("docs", public=True)
    access = json.loads((storage._container_dir("docs") / LocalBlobStorage.ACCESS_FILE).read_text())
    assert access == {"name": "docs", "public_access": "blob"}


def test_long_non_ascii_names_fit_on_disk(storage: LocalBlobStorage):
    container_name = "é" * 75
    blob_name = "ü" * 75
    storage.create_container_if_absent(container_name, public=False)
    storage.upload_blob(container_name, blob_name, io.BytesIO(b"abc"), "text/plain")

    assert storage.container_exists(container_name)
    assert b"".join(storage.download_blob(container_name, blob_name).chunks) == b"abc"
    assert storage.list_blobs(container_name) == [blob_name]
    assert all(len(path.name.encode()) < 255 for path in storage.root.rglob("*"))


def test_failed_metadata_write_keeps_previous_metadata(storage: LocalBlobStorage, monkeypatch):
    storage.create_container_if_absent("docs", public=False)
    storage.upload_blob("docs", "a.txt", io.BytesIO(b"abc"), "text/plain")
    real_copyfileobj = shutil.copyfileobj
    writes = []

    # blob content is copied first, metadata second
    def copyfileobj(src, dst, length=0):
        writes.append(src)
        if len(writes) == 2:
            raise OSError("disk full")
        return real_copyfileobj(src, dst, length)

    monkeypatch.setattr(shutil, "copyfileobj", copyfileobj)
    with pytest.raises(OSError):
        storage.upload_blob("docs", "a.txt", io.BytesIO(b"a,b"), "text/csv")

    assert storage.download_blob("docs", "a.txt").content_type == "text/plain"
    assert not list(storage._container_dir("docs").glob("*.tmp"))


def test_check_connection_fails_without_storage_dir(storage: LocalBlobStorage):
    storage.check_connection()
    storage.root.rmdir()
    with pytest.raises(FileNotFoundError):
        storage.check_connection()
