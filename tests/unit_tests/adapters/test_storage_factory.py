from unittest.mock import patch

from content_files_api.adapters.storage import (
    AzureBlobStorage,
    LocalBlobStorage,
    S3BlobStorage,
    StorageFactory,
)
from content_files_api.config.settings import Settings


def test_local_backend(tmp_path):
    settings = Settings(storage_backend="local", storage_dir=str(tmp_path / "blobs"))
    storage = StorageFactory.get_blob_storage(settings)
    assert isinstance(storage, LocalBlobStorage)
    assert (tmp_path / "blobs").is_dir()


def test_s3_backend(mocked_aws):
    storage = StorageFactory.get_blob_storage(Settings(storage_backend="s3"))
    assert isinstance(storage, S3BlobStorage)
    assert storage.s3_client.meta.region_name == "us-east-1"


def test_azure_backend():
    settings = Settings(storage_backend="azure", storage_connection_string="UseDevelopmentStorage=true")
    with patch("content_files_api.adapters.storage.BlobServiceClient") as client_class:
        storage = StorageFactory.get_blob_storage(settings)
    assert isinstance(storage, AzureBlobStorage)
    client_class.from_connection_string.assert_called_once_with("UseDevelopmentStorage=true")
