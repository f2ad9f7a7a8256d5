import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import UpstreamFailure
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.security import router as security_router
from routers.user import router as user_router
from routers.organization import router as organization_router
from routers.profiles import router as profiles_router
from routers.admin import router as admin_router
from routers.health import router as health_router


ROUTERS = [
    # Access resolution
    security_router,
    user_router,
    organization_router,
    # Profile administration
    profiles_router,
    # Super-admin surface
    admin_router,
    health_router,
]

# Status codes worth a warning line (auth failures and server errors)
LOGGED_HTTP_STATUSES = (401, 403, 500)


# -------------------------------------------------
# Error handling
# -------------------------------------------------
def register_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in LOGGED_HTTP_STATUSES:
            logger.warning(f"HTTP {exc.status_code} at {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Persistence faults: log, answer generically, never leak the cause
    @app.exception_handler(UpstreamFailure)
    async def handle_upstream(request: Request, exc: UpstreamFailure):
        logger.error(f"Upstream failure at {request.url.path}: {exc.operation}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Samba access control: plan features, profiles and field permissions",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()
        logger.info(f"{len(app.routes)} routes registered")

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app


# Create the global FastAPI instance
app = create_app()
