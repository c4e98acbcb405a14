import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from recipe_reality.app.api.routes import api_router
from recipe_reality.app.core.config import get_settings
from recipe_reality.app.core.errors import RecipeCoreError, http_status_for

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part not in (None, "body"))
        if err.get("type") == "missing":
            messages.append(f"Missing required field: {loc}")
        else:
            messages.append(f"{loc}: {err.get('msg', 'Invalid value')}" if loc else err.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request payload."},
    )


async def recipe_core_exception_handler(request: Request, exc: RecipeCoreError):
    status_code = http_status_for(exc)
    logger.warning(
        "%s failed with %s error: %s (source=%s)",
        request.url.path,
        exc.kind.value,
        exc.message,
        exc.source_url,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Internal server error"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Recipe to Reality", version="0.1.0")
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RecipeCoreError, recipe_core_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
