"""Validation rules for content file requests."""

from typing import Optional

from content_files_api.schemas import ErrorNumber, ErrorResponse, FileData

CONTAINER_NAME_PARAM = "containerName"
FILE_NAME_PARAM = "fileName"
FILE_DATA_PARAM = "fileData"

MIN_RESOURCE_NAME_LENGTH = 1
MAX_RESOURCE_NAME_LENGTH = 75


def validate_resource_name(
    value: Optional[str],
    parameter_name: str,
    min_length: int = MIN_RESOURCE_NAME_LENGTH,
    max_length: int = MAX_RESOURCE_NAME_LENGTH,
) -> Optional[ErrorResponse]:
    """
    Check a container or file name.

    :param value: The name as received in the request.
    :param parameter_name: The name reported back in the error, e.g. "containerName".
    :param min_length: Minimum accepted length.
    :param max_length: Maximum accepted length.
    :return: The first rule violated, or None if the name is acceptable.
    """
    if value is None:
        return ErrorResponse(error_number=ErrorNumber.NOTNULL, parameter_name=parameter_name)
    if not value.strip():
        return ErrorResponse(error_number=ErrorNumber.REQUIRED, parameter_name=parameter_name, parameter_value=value)
    if len(value) < min_length:
        return ErrorResponse(error_number=ErrorNumber.TOOSMALL, parameter_name=parameter_name, parameter_value=value)
    if len(value) > max_length:
        return ErrorResponse(error_number=ErrorNumber.TOOLARGE, parameter_name=parameter_name, parameter_value=value)
    return None


def validate_file(file_data: Optional[FileData]) -> Optional[ErrorResponse]:
    """Check that an upload is present and not empty."""
    if file_data is None:
        return ErrorResponse(error_number=ErrorNumber.NOTNULL, parameter_name=FILE_DATA_PARAM)
    if file_data.length <= 0:
        return ErrorResponse(error_number=ErrorNumber.TOOSMALL, parameter_name=FILE_DATA_PARAM, parameter_value="")
    return None


def is_public_container(container_name: str) -> bool:
    """Containers with "public" anywhere in their name allow anonymous blob reads."""
    return "public" in container_name.lower()
