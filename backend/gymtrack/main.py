from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from gymtrack.core.config import settings
from gymtrack.core.exceptions import GymTrackError, InternalError
from gymtrack.core.logging_config import get_logger

logger = get_logger("main")

app = FastAPI(
    title="GymTrack API",
    description="Gym membership, payments and attendance",
    version="1.0.0",
    redirect_slashes=False,
)

# Import router after app creation to catch import errors
try:
    from gymtrack.api.v1.api import api_router
    logger.info("Successfully imported api_router")
except Exception as e:
    logger.error(f"Failed to import api_router: {e}", exc_info=True)
    raise


@app.exception_handler(GymTrackError)
async def gymtrack_exception_handler(request: Request, exc: GymTrackError):
    """Translate service failures into their HTTP status with the service message"""
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.url.path}: {exc.message}", exc_info=exc)
        detail = exc.message if settings.DEBUG else "Internal server error"
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        detail = exc.message
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": str(exc) if settings.DEBUG else "An error occurred"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold exception instances that are not JSON serializable
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
