import os
from pathlib import Path
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from core.collision.catalog import EquipmentCatalog
from core.exceptions import ShopfloorError
from core.logging_config import setup_logging
from core.settings import Settings, get_settings
from services.api.exception_handlers import shopfloor_exception_handler
from services.api.layouts_store import FileLayoutStore
from services.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from services.api.routes import router as v1_router
from services.api.sessions import CollisionSessionRegistry


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"true", "1", "yes"}


def _cors_origins() -> list[str]:
    ui_origin = os.getenv("UI_ORIGIN", "http://localhost:3000")
    allowed_origins: set[str] = {
        ui_origin,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    }
    parsed = urlparse(ui_origin)
    if parsed.scheme and parsed.netloc:
        # Add both localhost and 127.0.0.1 variants
        if "localhost" in ui_origin:
            allowed_origins.add(ui_origin.replace("localhost", "127.0.0.1"))
        elif "127.0.0.1" in ui_origin:
            allowed_origins.add(ui_origin.replace("127.0.0.1", "localhost"))

    if os.getenv("ENVIRONMENT", "").lower() in {"dev", "development", "local"}:
        for port in range(3000, 3011):
            allowed_origins.update([f"http://localhost:{port}", f"http://127.0.0.1:{port}"])
    return sorted(allowed_origins)


def create_app(
    *,
    settings: Settings | None = None,
    layout_store: FileLayoutStore | None = None,
    catalog: EquipmentCatalog | None = None,
    rate_limit: bool | None = None,
) -> FastAPI:
    # Setup structured logging
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        json_format=_env_flag("JSON_LOGGING", "false"),
        log_file=Path(log_file) if log_file else None,
    )

    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Shopfloor Layout API",
        version="0.1.0",
        description="Floor-plane validation and equipment collision checks for shop layouts",
    )
    app.state.settings = settings
    app.state.layout_store = layout_store if layout_store is not None else FileLayoutStore(settings.storage.layouts_root)
    app.state.catalog = catalog if catalog is not None else EquipmentCatalog.load(settings.catalog.resolved_path)
    app.state.sessions = CollisionSessionRegistry(
        min_dimension=settings.collision.min_dimension_ft,
        max_sessions=settings.collision.max_sessions,
    )

    if rate_limit is None:
        rate_limit = _env_flag("RATE_LIMIT_ENABLED", "true")

    # Security middleware (applied first in execution order)
    if rate_limit:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "600")),
            requests_per_hour=int(os.getenv("RATE_LIMIT_PER_HOUR", "10000")),
        )

    app.add_middleware(SecurityHeadersMiddleware)

    cors_origins = _cors_origins()
    logger.info(f"CORS allowed origins: {cors_origins}")
    # CORS middleware - add LAST so it executes FIRST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.add_exception_handler(ShopfloorError, shopfloor_exception_handler)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.opt(exception=exc).error("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={
                "error": type(exc).__name__,
                "message": str(exc),
            },
        )

    app.include_router(v1_router)

    logger.info(
        "API initialised with {count} catalog item(s), epsilon={eps}",
        count=len(app.state.catalog),
        eps=settings.geometry.epsilon,
    )
    return app


app = create_app()


__all__ = ["app", "create_app"]
