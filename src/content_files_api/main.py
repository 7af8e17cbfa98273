from textwrap import dedent
import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from content_files_api.adapters.storage import BlobStorage, StorageFactory
from content_files_api.config.settings import Settings
from content_files_api.content_files import ContentFilesService
from content_files_api.errors import (
    handle_broad_exceptions,
    handle_request_validation_errors,
)
from content_files_api.routers.content_files import router as content_files_router
from content_files_api.routers.health import router as health_router

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, storage: BlobStorage | None = None) -> FastAPI:
    """
    Create a FastAPI application.

    :param settings: Application settings; read from the environment when omitted.
    :param storage: A ready blob storage adapter; built from `settings` when omitted.
    """
    settings = settings or Settings()
    storage = storage or StorageFactory.get_blob_storage(settings)

    app = FastAPI(
        title="Content Files API",
        summary="Store files in blob storage containers",
        version="v1",
        description=dedent(
            """\
        Upload, replace, download, delete and list files kept in blob storage,
        addressed as `/api/v1/{containerName}/contentfiles/{fileName}`.

        | Error number | Meaning |
        | --- | --- |
        | 1 | EXISTS |
        | 2 | TOOLARGE |
        | 3 | REQUIRED |
        | 4 | NOTFOUND |
        | 5 | TOOSMALL |
        | 6 | NOTNULL |
        | 7 | UNKNOWN |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.content_files_service = ContentFilesService(storage)
    logger.info(f"Serving content files from {settings.storage_backend} storage")

    app.include_router(content_files_router, tags=["contentfiles"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    from content_files_api.config.settings import get_settings
    from content_files_api.logging_config import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)
