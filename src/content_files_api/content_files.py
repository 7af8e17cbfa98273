"""
Content file operations: validate, call blob storage, map the outcome.

Each operation returns a `Success` or a `Failure`; turning those into HTTP
responses is left to the router.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, List, Optional, TypeVar, Union

from fastapi import status

from content_files_api.adapters.storage import BlobDownload, BlobStorage
from content_files_api.schemas import ContentFileSummary, ErrorNumber, ErrorResponse, FileData
from content_files_api.validation import (
    CONTAINER_NAME_PARAM,
    FILE_NAME_PARAM,
    is_public_container,
    validate_file,
    validate_resource_name,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoggingEvents(IntEnum):
    """Event ids attached to log records as `event_id`."""
    LIST_ITEMS = 1001
    GET_ITEM = 1002
    INSERT_ITEM = 1003
    UPDATE_ITEM = 1004
    DELETE_ITEM = 1005
    GET_ITEM_NOT_FOUND = 4000
    UPDATE_ITEM_NOT_FOUND = 4001
    DELETE_ITEM_NOT_FOUND = 4002


@dataclass(frozen=True)
class Success(Generic[T]):
    status_code: int
    value: Optional[T] = None


@dataclass(frozen=True)
class Failure:
    status_code: int
    error: ErrorResponse


OperationResult = Union[Success[T], Failure]


def _bad_request(error: ErrorResponse) -> Failure:
    return Failure(status_code=status.HTTP_400_BAD_REQUEST, error=error)


def _not_found(parameter_name: str, parameter_value: str) -> Failure:
    return Failure(
        status_code=status.HTTP_404_NOT_FOUND,
        error=ErrorResponse(
            error_number=ErrorNumber.NOTFOUND,
            parameter_name=parameter_name,
            parameter_value=parameter_value,
        ),
    )


def _unknown_error() -> Failure:
    return Failure(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error=ErrorResponse(error_number=ErrorNumber.UNKNOWN),
    )


def _event(event_id: LoggingEvents) -> dict:
    return {"event_id": int(event_id)}


class ContentFilesService:
    """
    Create, update, delete, read and list content files held in blob storage.

    Containers are addressed case-insensitively (names are lower-cased before
    reaching storage); file names are used verbatim. The service keeps no
    state between calls besides the storage adapter it was built with.
    """

    def __init__(self, storage: BlobStorage):
        self.storage = storage

    def _overwrite_blob(self, container: str, file_name: str, file_data: FileData) -> None:
        with file_data.stream as stream:
            self.storage.upload_blob(container, file_name, stream, file_data.content_type)

    def put_file(self, container_name: str, file_name: str, file_data: Optional[FileData]) -> OperationResult[None]:
        """
        Create or overwrite a file, creating its container on first use.

        Returns 201 when the file is new and 204 when it replaced an existing one.
        """
        error = (
            validate_resource_name(container_name, CONTAINER_NAME_PARAM)
            or validate_resource_name(file_name, FILE_NAME_PARAM)
            or validate_file(file_data)
        )
        if error:
            return _bad_request(error)

        container = container_name.lower()
        try:
            self.storage.create_container_if_absent(container, public=is_public_container(container_name))
            pre_existing = self.storage.blob_exists(container, file_name)
            self._overwrite_blob(container, file_name, file_data)
        except Exception:
            logger.exception(f"Error while putting {container_name}:{file_name}", extra=_event(LoggingEvents.INSERT_ITEM))
            return _unknown_error()

        if pre_existing:
            logger.info(f"Updated {container_name}:{file_name} via put", extra=_event(LoggingEvents.UPDATE_ITEM))
            return Success(status_code=status.HTTP_204_NO_CONTENT)
        logger.info(f"Inserted {container_name}:{file_name}", extra=_event(LoggingEvents.INSERT_ITEM))
        return Success(status_code=status.HTTP_201_CREATED)

    def update_file(self, container_name: str, file_name: str, file_data: Optional[FileData]) -> OperationResult[None]:
        """Overwrite an existing file; never creates containers or files."""
        error = (
            validate_resource_name(container_name, CONTAINER_NAME_PARAM)
            or validate_resource_name(file_name, FILE_NAME_PARAM)
            or validate_file(file_data)
        )
        if error:
            return _bad_request(error)

        container = container_name.lower()
        try:
            if not self.storage.container_exists(container):
                logger.warning(
                    f"Could not find containerName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.UPDATE_ITEM_NOT_FOUND),
                )
                return _not_found(CONTAINER_NAME_PARAM, container_name)
            if not self.storage.blob_exists(container, file_name):
                logger.warning(
                    f"Could not find fileName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.UPDATE_ITEM_NOT_FOUND),
                )
                return _not_found(FILE_NAME_PARAM, file_name)
            self._overwrite_blob(container, file_name, file_data)
        except Exception:
            logger.exception(f"Error while updating {container_name}:{file_name}", extra=_event(LoggingEvents.UPDATE_ITEM))
            return _unknown_error()

        logger.info(f"Updated {container_name}:{file_name} via patch", extra=_event(LoggingEvents.UPDATE_ITEM))
        return Success(status_code=status.HTTP_204_NO_CONTENT)

    def delete_file(self, container_name: str, file_name: str) -> OperationResult[None]:
        error = (
            validate_resource_name(container_name, CONTAINER_NAME_PARAM)
            or validate_resource_name(file_name, FILE_NAME_PARAM)
        )
        if error:
            return _bad_request(error)

        container = container_name.lower()
        try:
            if not self.storage.container_exists(container):
                logger.warning(
                    f"Could not find containerName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.DELETE_ITEM_NOT_FOUND),
                )
                return _not_found(CONTAINER_NAME_PARAM, container_name)
            if not self.storage.blob_exists(container, file_name):
                logger.warning(
                    f"Could not find fileName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.DELETE_ITEM_NOT_FOUND),
                )
                return _not_found(FILE_NAME_PARAM, file_name)
            self.storage.delete_blob(container, file_name)
        except Exception:
            logger.exception(f"Error while deleting {container_name}:{file_name}", extra=_event(LoggingEvents.DELETE_ITEM))
            return _unknown_error()

        logger.info(f"Deleted {container_name}:{file_name}", extra=_event(LoggingEvents.DELETE_ITEM))
        return Success(status_code=status.HTTP_204_NO_CONTENT)

    def get_file(self, container_name: str, file_name: str) -> OperationResult[BlobDownload]:
        error = (
            validate_resource_name(container_name, CONTAINER_NAME_PARAM)
            or validate_resource_name(file_name, FILE_NAME_PARAM)
        )
        if error:
            return _bad_request(error)

        container = container_name.lower()
        try:
            if not self.storage.container_exists(container):
                logger.warning(
                    f"Could not find containerName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.GET_ITEM_NOT_FOUND),
                )
                return _not_found(CONTAINER_NAME_PARAM, container_name)
            if not self.storage.blob_exists(container, file_name):
                logger.warning(
                    f"Could not find fileName: {container_name}:{file_name}",
                    extra=_event(LoggingEvents.GET_ITEM_NOT_FOUND),
                )
                return _not_found(FILE_NAME_PARAM, file_name)
            download = self.storage.download_blob(container, file_name)
        except Exception:
            logger.exception(f"Error while getting {container_name}:{file_name}", extra=_event(LoggingEvents.GET_ITEM))
            return _unknown_error()

        logger.info(f"Got {container_name}:{file_name}", extra=_event(LoggingEvents.GET_ITEM))
        return Success(status_code=status.HTTP_200_OK, value=download)

    def list_files(self, container_name: str) -> OperationResult[List[ContentFileSummary]]:
        # Single unpaginated listing; very large containers come back in one response.
        error = validate_resource_name(container_name, CONTAINER_NAME_PARAM)
        if error:
            return _bad_request(error)

        container = container_name.lower()
        try:
            if not self.storage.container_exists(container):
                logger.warning(
                    f"Could not find containerName: {container_name} for get all",
                    extra=_event(LoggingEvents.GET_ITEM_NOT_FOUND),
                )
                return _not_found(CONTAINER_NAME_PARAM, container_name)
            blob_names = self.storage.list_blobs(container)
        except Exception:
            logger.exception(
                f"Error while getting all content files from {container_name}",
                extra=_event(LoggingEvents.LIST_ITEMS),
            )
            return _unknown_error()

        return Success(
            status_code=status.HTTP_200_OK,
            value=[ContentFileSummary(name=name) for name in blob_names],
        )
