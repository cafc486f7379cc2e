"""
FastAPI application entry point.

Sets up the app, lifespan (store connect/disconnect), origin allow-list,
CORS, logging, error handlers, and includes the API routers. Every router
requires a verified identity token.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from campuspilot.api import classes, scores, tasks, transactions, users
from campuspilot.api.auth import get_current_identity, identify_request
from campuspilot.config import Settings, get_settings
from campuspilot.dependencies import get_store
from campuspilot.errors import AuthError, CampusPilotError

# Configure logging - single place for log format and level
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: runs on startup and shutdown.
    The store connects lazily unless MONGODB_CONNECT_ON_STARTUP is set, in
    which case a failed connection aborts startup.
    """
    settings = app.state.settings
    # Resolve through overrides so tests can swap in their own store
    store = app.dependency_overrides.get(get_store, get_store)()
    if settings.mongodb_connect_on_startup:
        await store.get_database()
    if not settings.firebase_project_id:
        logger.warning("FIREBASE_PROJECT_ID is not set; token audience will not be checked.")
    yield
    await store.close()


def _origin_allowed(origin: str, allowed: list) -> bool:
    return "*" in allowed or origin in allowed


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CampusPilotError)
    async def handle_app_error(request: Request, exc: CampusPilotError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        if request.url.path.startswith("/api/"):
            # Body parsing runs before route dependencies; report auth failures first
            try:
                await identify_request(request)
            except AuthError as e:
                return JSONResponse(status_code=e.status_code, content={"error": e.message})
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        logger.info("%s %s -> 400: %s", request.method, request.url.path, details)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": details})

    @app.exception_handler(PyMongoError)
    async def handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


def create_application(settings: Settings | None = None) -> FastAPI:
    """Factory for the FastAPI app. Keeps main.py clean and testable."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Users, transactions, classes, scores and tasks for CampusPilot.",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    allowed_origins = list(settings.cors_allowed_origins)

    # CORS headers for allowed origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it runs first: unlisted origins never reach CORS or routes.
    # Requests without an Origin header (server-to-server, curl) pass.
    @app.middleware("http")
    async def reject_unlisted_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and not _origin_allowed(origin, allowed_origins):
            logger.warning("Blocked request from origin %s", origin)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "Not allowed by CORS"},
            )
        return await call_next(request)

    register_error_handlers(app)

    protected = [Depends(get_current_identity)]
    app.include_router(users.router, prefix="/api/users", tags=["users"], dependencies=protected)
    app.include_router(
        transactions.router, prefix="/api/transactions", tags=["transactions"], dependencies=protected
    )
    app.include_router(classes.router, prefix="/api/classes", tags=["classes"], dependencies=protected)
    app.include_router(scores.router, prefix="/api/scores", tags=["scores"], dependencies=protected)
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"], dependencies=protected)

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("campuspilot.main:app", host=settings.host, port=settings.port)
