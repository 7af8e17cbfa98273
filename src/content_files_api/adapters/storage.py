"""
Blob storage adapters.

Every adapter exposes the same small set of container/blob operations; the
Content Files API never talks to a storage SDK directly.
"""

import hashlib
import io
import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional

import boto3
from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobServiceClient, ContentSettings, PublicAccess

from content_files_api.config.settings import Settings
from content_files_api.s3.buckets import bucket_exists, create_bucket_if_absent, set_bucket_public_read
from content_files_api.s3.delete_objects import delete_s3_object
from content_files_api.s3.read_objects import fetch_s3_object, fetch_s3_object_keys, object_exists_in_s3
from content_files_api.s3.write_objects import DEFAULT_CONTENT_TYPE, upload_s3_object

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class BlobDownload:
    """An open blob: its content as a chunk iterator plus stored properties."""
    chunks: Iterator[bytes]
    content_type: str
    content_length: Optional[int] = None


class BlobStorage:
    """Base class for blob storage (to be extended by specific implementations)"""
    backend_name = "base"

    def check_connection(self) -> None:
        """Raise if the backend cannot be reached. Reads only, creates nothing."""
        raise NotImplementedError

    def container_exists(self, container_name: str) -> bool:
        raise NotImplementedError

    def create_container_if_absent(self, container_name: str, public: bool) -> None:
        """Create the container unless it exists, then apply its access level."""
        raise NotImplementedError

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        raise NotImplementedError

    def upload_blob(self, container_name: str, blob_name: str, stream: BinaryIO, content_type: Optional[str]) -> None:
        """Overwrite the blob with the content of `stream`."""
        raise NotImplementedError

    def download_blob(self, container_name: str, blob_name: str) -> BlobDownload:
        raise NotImplementedError

    def delete_blob(self, container_name: str, blob_name: str) -> None:
        raise NotImplementedError

    def list_blobs(self, container_name: str) -> List[str]:
        """Names of every blob in the container, flattened."""
        raise NotImplementedError


def _iter_file(file_obj: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    try:
        while True:
            chunk = file_obj.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        file_obj.close()


class LocalBlobStorage(BlobStorage):
    """Handles blob storage on the local file system, one directory per container"""
    backend_name = "local"

    ACCESS_FILE = "container.json"
    BLOB_SUFFIX = ".blob"
    META_SUFFIX = ".meta"

    def __init__(self, storage_dir: str):
        self.root = Path(storage_dir)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalBlobStorage initialized at: %s", self.root)

    # On-disk names are fixed-length digests; the real names live in
    # container.json and the .meta files.
    @staticmethod
    def _digest(name: str) -> str:
        return hashlib.sha256(name.encode("utf-8")).hexdigest()

    def _container_dir(self, container_name: str) -> Path:
        return self.root / f"{self._digest(container_name)}.container"

    def _blob_path(self, container_name: str, blob_name: str) -> Path:
        return self._container_dir(container_name) / f"{self._digest(blob_name)}{self.BLOB_SUFFIX}"

    def _meta_path(self, container_name: str, blob_name: str) -> Path:
        return self._container_dir(container_name) / f"{self._digest(blob_name)}{self.META_SUFFIX}"

    def _write_atomically(self, target: Path, stream: BinaryIO) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                shutil.copyfileobj(stream, tmp, CHUNK_SIZE)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def _write_json(self, target: Path, data: dict) -> None:
        self._write_atomically(target, io.BytesIO(json.dumps(data).encode("utf-8")))

    def _read_json(self, source: Path) -> dict:
        return json.loads(source.read_text(encoding="utf-8"))

    def check_connection(self) -> None:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Storage directory {self.root} does not exist")

    def container_exists(self, container_name: str) -> bool:
        return self._container_dir(container_name).is_dir()

    def create_container_if_absent(self, container_name: str, public: bool) -> None:
        container_dir = self._container_dir(container_name)
        container_dir.mkdir(parents=True, exist_ok=True)
        self._write_json(container_dir / self.ACCESS_FILE, {
            "name": container_name,
            "public_access": "blob" if public else "off",
        })

    def is_public(self, container_name: str) -> bool:
        access_file = self._container_dir(container_name) / self.ACCESS_FILE
        if not access_file.exists():
            return False
        return self._read_json(access_file).get("public_access") == "blob"

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        return self._blob_path(container_name, blob_name).is_file()

    def upload_blob(self, container_name: str, blob_name: str, stream: BinaryIO, content_type: Optional[str]) -> None:
        self._write_atomically(self._blob_path(container_name, blob_name), stream)
        self._write_json(self._meta_path(container_name, blob_name), {
            "name": blob_name,
            "content_type": content_type or DEFAULT_CONTENT_TYPE,
        })

    def download_blob(self, container_name: str, blob_name: str) -> BlobDownload:
        blob_path = self._blob_path(container_name, blob_name)
        meta_path = self._meta_path(container_name, blob_name)
        content_type = DEFAULT_CONTENT_TYPE
        if meta_path.exists():
            content_type = self._read_json(meta_path).get("content_type", content_type)
        file_obj = open(blob_path, "rb")
        return BlobDownload(
            chunks=_iter_file(file_obj),
            content_type=content_type,
            content_length=os.fstat(file_obj.fileno()).st_size,
        )

    def delete_blob(self, container_name: str, blob_name: str) -> None:
        self._blob_path(container_name, blob_name).unlink()
        self._meta_path(container_name, blob_name).unlink(missing_ok=True)

    def list_blobs(self, container_name: str) -> List[str]:
        container_dir = self._container_dir(container_name)
        names = []
        for blob_path in container_dir.glob(f"*{self.BLOB_SUFFIX}"):
            meta_path = blob_path.with_suffix(self.META_SUFFIX)
            if meta_path.exists():
                names.append(self._read_json(meta_path)["name"])
        return sorted(names)


class S3BlobStorage(BlobStorage):
    """Handles blob storage in AWS S3, one bucket per container"""
    backend_name = "s3"

    def __init__(self, settings: Settings, s3_client=None):
        self.s3_client = s3_client or boto3.client(
            "s3",
            endpoint_url=settings.aws_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
        )

        logger.info("S3BlobStorage initialized")
        logger.info(f"  Endpoint: {settings.aws_endpoint_url}")
        logger.info(f"  Region: {settings.aws_region}")

    def check_connection(self) -> None:
        self.s3_client.list_buckets()

    def container_exists(self, container_name: str) -> bool:
        return bucket_exists(container_name, s3_client=self.s3_client)

    def create_container_if_absent(self, container_name: str, public: bool) -> None:
        create_bucket_if_absent(container_name, s3_client=self.s3_client)
        set_bucket_public_read(container_name, public, s3_client=self.s3_client)

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        return object_exists_in_s3(container_name, blob_name, s3_client=self.s3_client)

    def upload_blob(self, container_name: str, blob_name: str, stream: BinaryIO, content_type: Optional[str]) -> None:
        upload_s3_object(
            bucket_name=container_name,
            object_key=blob_name,
            file_content=stream,
            content_type=content_type,
            s3_client=self.s3_client,
        )

    def download_blob(self, container_name: str, blob_name: str) -> BlobDownload:
        get_object_response = fetch_s3_object(container_name, blob_name, s3_client=self.s3_client)
        body = get_object_response["Body"]

        def iter_body() -> Iterator[bytes]:
            try:
                yield from body.iter_chunks(chunk_size=CHUNK_SIZE)
            finally:
                body.close()

        return BlobDownload(
            chunks=iter_body(),
            content_type=get_object_response.get("ContentType", DEFAULT_CONTENT_TYPE),
            content_length=get_object_response.get("ContentLength"),
        )

    def delete_blob(self, container_name: str, blob_name: str) -> None:
        delete_s3_object(container_name, blob_name, s3_client=self.s3_client)

    def list_blobs(self, container_name: str) -> List[str]:
        return fetch_s3_object_keys(container_name, s3_client=self.s3_client)


class AzureBlobStorage(BlobStorage):
    """Handles blob storage in an Azure Storage account addressed by connection string"""
    backend_name = "azure"

    def __init__(self, connection_string: str, blob_service_client: Optional[BlobServiceClient] = None):
        self.blob_service_client = blob_service_client or BlobServiceClient.from_connection_string(connection_string)
        logger.info(f"AzureBlobStorage initialized for account: {self.blob_service_client.account_name}")

    def check_connection(self) -> None:
        self.blob_service_client.get_account_information()

    def container_exists(self, container_name: str) -> bool:
        return self.blob_service_client.get_container_client(container_name).exists()

    def create_container_if_absent(self, container_name: str, public: bool) -> None:
        container_client = self.blob_service_client.get_container_client(container_name)
        public_access = PublicAccess.BLOB if public else None
        try:
            container_client.create_container(public_access=public_access)
            logger.info(f"Created container {container_name}")
        except ResourceExistsError:
            pass
        container_client.set_container_access_policy(signed_identifiers={}, public_access=public_access)

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        return self.blob_service_client.get_blob_client(container_name, blob_name).exists()

    def upload_blob(self, container_name: str, blob_name: str, stream: BinaryIO, content_type: Optional[str]) -> None:
        blob_client = self.blob_service_client.get_blob_client(container_name, blob_name)
        blob_client.upload_blob(
            stream,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type or DEFAULT_CONTENT_TYPE),
        )

    def download_blob(self, container_name: str, blob_name: str) -> BlobDownload:
        downloader = self.blob_service_client.get_blob_client(container_name, blob_name).download_blob()
        content_type = downloader.properties.content_settings.content_type or DEFAULT_CONTENT_TYPE
        return BlobDownload(
            chunks=downloader.chunks(),
            content_type=content_type,
            content_length=downloader.size,
        )

    def delete_blob(self, container_name: str, blob_name: str) -> None:
        self.blob_service_client.get_blob_client(container_name, blob_name).delete_blob()

    def list_blobs(self, container_name: str) -> List[str]:
        container_client = self.blob_service_client.get_container_client(container_name)
        return [blob.name for blob in container_client.list_blobs()]


class StorageFactory:
    """Factory to initialize the correct blob storage adapter based on settings"""

    @staticmethod
    def get_blob_storage(settings: Settings) -> BlobStorage:
        storage_backend = settings.storage_backend
        logger.info(f"Creating blob storage for backend: {storage_backend}")

        if storage_backend == "local":
            return LocalBlobStorage(settings.storage_dir)
        if storage_backend == "s3":
            return S3BlobStorage(settings)
        if storage_backend == "azure":
            return AzureBlobStorage(settings.storage_connection_string)

        raise ValueError(
            f"Invalid storage_backend: {storage_backend}. "
            f"Choose from ['local', 's3', 'azure']"
        )
