from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import StoreError, TodoError
from .lifecycle import LifecycleSynchronizer
from .logging_setup import setup_logging
from .repositories import TodoRepository
from .routers import tags as tags_router
from .routers import todos as todos_router
from .settings import Settings, get_settings
from .store import open_store

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
    {"name": "tags", "description": "Attach, detach and look up todos by tag."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Open the store and load todos before serving; flush and close on shutdown.

    uvicorn runs the shutdown half on SIGINT/SIGTERM, so a terminated process
    still writes its todos back before the connection is closed.
    """
    settings: Settings = app.state.settings
    store = await open_store(settings)
    repository = TodoRepository(store)
    sync = LifecycleSynchronizer(repository, store)
    await sync.load_all()

    app.state.store = store
    app.state.repository = repository
    try:
        yield
    finally:
        await sync.flush_all()
        await store.close()
        logger.info("Store closed")


async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    """
    Map domain errors to JSON responses: 400 validation, 404 not found, 500 store.

    Response format:
        {"error": "<message>"}
    """
    if isinstance(exc, StoreError):
        logger.error("%s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"error": "Store operation failed"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (tests); read from the environment when omitted.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Todo Backend",
        description="Todo list API with many-to-many tags and document-store persistence.",
        version="0.2.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TodoError, todo_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the store in use.
        """
        store = getattr(request.app.state, "store", None)
        return {"message": "Healthy", "backend": store.name if store else settings.persistence_backend}

    # Tag routes first: DELETE /todos/tags must win over DELETE /todos/{todo_id}
    app.include_router(tags_router.router)
    app.include_router(todos_router.router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on 0.0.0.0:8080."""
    import uvicorn

    uvicorn.run("todo_backend.main:app", host="0.0.0.0", port=8080)
