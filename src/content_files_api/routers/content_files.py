from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse, StreamingResponse

from content_files_api.content_files import ContentFilesService, Failure, OperationResult
from content_files_api.schemas import ContentFileSummary, ErrorResponse, FileData
from content_files_api.validation import FILE_DATA_PARAM

router = APIRouter(prefix="/api/v1/{container_name}/contentfiles")

GET_CONTENT_FILE_ROUTE = "get_content_file"

BAD_REQUEST_RESPONSE = {
    "model": ErrorResponse,
    "description": "A container name, file name or uploaded file failed validation.",
}
NOT_FOUND_RESPONSE = {
    "model": ErrorResponse,
    "description": "The container or the file does not exist; `parameterName` says which.",
}
UNKNOWN_ERROR_RESPONSE = {
    "model": ErrorResponse,
    "description": "The storage backend failed unexpectedly.",
}


def get_content_files_service(request: Request) -> ContentFilesService:
    return request.app.state.content_files_service


def _to_file_data(upload: Optional[UploadFile]) -> Optional[FileData]:
    """Describe an upload without reading it into memory."""
    if upload is None:
        return None
    length = upload.size
    if length is None:
        position = upload.file.tell()
        upload.file.seek(0, 2)
        length = upload.file.tell()
        upload.file.seek(position)
    return FileData(
        stream=upload.file,
        content_type=upload.content_type,
        length=length,
        filename=upload.filename,
    )


def _error_response(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=failure.status_code, content=failure.error.to_json())


def _empty_response(result: OperationResult) -> Response:
    if isinstance(result, Failure):
        return _error_response(result)
    return Response(status_code=result.status_code)


@router.put(
    "/{file_name}",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {
            "description": "New file created.",
            "headers": {
                "Location": {
                    "description": "URL of the created file.",
                    "schema": {"type": "string"},
                },
            },
        },
        status.HTTP_204_NO_CONTENT: {"description": "Existing file replaced."},
        status.HTTP_400_BAD_REQUEST: BAD_REQUEST_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: UNKNOWN_ERROR_RESPONSE,
    },
)
def put_content_file(
    request: Request,
    container_name: str,
    file_name: str,
    file_data: Optional[UploadFile] = File(None, alias=FILE_DATA_PARAM),
    service: ContentFilesService = Depends(get_content_files_service),
) -> Response:
    """
    Create or replace a file.

    The container is created on first upload. Containers whose name contains
    "public" allow anonymous reads of their files; all others are private.
    """
    result = service.put_file(container_name, file_name, _to_file_data(file_data))
    if isinstance(result, Failure):
        return _error_response(result)

    response = Response(status_code=result.status_code)
    if result.status_code == status.HTTP_201_CREATED:
        response.headers["Location"] = str(
            request.url_for(GET_CONTENT_FILE_ROUTE, container_name=container_name, file_name=file_name)
        )
    return response


@router.patch(
    "/{file_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_204_NO_CONTENT: {"description": "File replaced."},
        status.HTTP_400_BAD_REQUEST: BAD_REQUEST_RESPONSE,
        status.HTTP_404_NOT_FOUND: NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: UNKNOWN_ERROR_RESPONSE,
    },
)
def update_content_file(
    container_name: str,
    file_name: str,
    file_data: Optional[UploadFile] = File(None, alias=FILE_DATA_PARAM),
    service: ContentFilesService = Depends(get_content_files_service),
) -> Response:
    """Replace the content of an existing file."""
    return _empty_response(service.update_file(container_name, file_name, _to_file_data(file_data)))


@router.delete(
    "/{file_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_204_NO_CONTENT: {"description": "File deleted."},
        status.HTTP_400_BAD_REQUEST: BAD_REQUEST_RESPONSE,
        status.HTTP_404_NOT_FOUND: NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: UNKNOWN_ERROR_RESPONSE,
    },
)
def delete_content_file(
    container_name: str,
    file_name: str,
    service: ContentFilesService = Depends(get_content_files_service),
) -> Response:
    """Delete a file."""
    return _empty_response(service.delete_file(container_name, file_name))


@router.get(
    "/{file_name}",
    name=GET_CONTENT_FILE_ROUTE,
    response_class=StreamingResponse,
    responses={
        status.HTTP_200_OK: {
            "description": "The file content, with the content type it was uploaded with.",
            "content": {"application/octet-stream": {}},
        },
        status.HTTP_400_BAD_REQUEST: BAD_REQUEST_RESPONSE,
        status.HTTP_404_NOT_FOUND: NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: UNKNOWN_ERROR_RESPONSE,
    },
)
def get_content_file(
    container_name: str,
    file_name: str,
    service: ContentFilesService = Depends(get_content_files_service),
) -> Response:
    """Download a file."""
    result = service.get_file(container_name, file_name)
    if isinstance(result, Failure):
        return _error_response(result)

    download = result.value
    # Passed as a header so Starlette does not append a charset to text types.
    headers = {"Content-Type": download.content_type}
    if download.content_length is not None:
        headers["Content-Length"] = str(download.content_length)
    return StreamingResponse(download.chunks, headers=headers)


@router.get(
    "",
    response_model=List[ContentFileSummary],
    responses={
        status.HTTP_400_BAD_REQUEST: BAD_REQUEST_RESPONSE,
        status.HTTP_404_NOT_FOUND: NOT_FOUND_RESPONSE,
        status.HTTP_500_INTERNAL_SERVER_ERROR: UNKNOWN_ERROR_RESPONSE,
    },
)
def list_content_files(
    container_name: str,
    service: ContentFilesService = Depends(get_content_files_service),
):
    """List every file in a container."""
    result = service.list_files(container_name)
    if isinstance(result, Failure):
        return _error_response(result)
    return result.value
