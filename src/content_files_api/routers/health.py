from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of the API and of the blob storage backend it proxies to.
    """
    settings = request.app.state.settings

    health_status = {
        "status": "ok",
        "storage_backend": settings.storage_backend,
        "components": {
            "api": "ready",
            "storage": "initializing",
        },
        "ready": False,
    }

    # Read-only probe of the backend
    try:
        request.app.state.storage.check_connection()
        health_status["components"]["storage"] = "ready"
    except Exception as e:
        health_status["components"]["storage"] = f"error: {type(e).__name__}"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )
    return health_status
