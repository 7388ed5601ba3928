"""FastAPI application factory for Logo Forge."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from logo_forge.common.config import get_settings
from logo_forge.common.exceptions import LogoForgeError, status_for
from logo_forge.common.logging import setup_logging
from logo_forge.common.schemas import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from logo_forge.deps import get_db, get_gemini_client
        db = get_db()
        await db.init()
        await db.create_all()
        if not settings.gemini_api_key:
            logger.warning("LOGOFORGE_GEMINI_API_KEY not set, generation returns placeholders")
        yield
        # Shutdown
        await get_gemini_client().aclose()
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LogoForgeError)
    async def logo_forge_error_handler(request: Request, exc: LogoForgeError):
        status = status_for(exc)
        if status >= 500:
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(error=exc.message, code=exc.code).model_dump(),
        )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from logo_forge.usage.router import router as usage_router
    from logo_forge.accounts.router import router as accounts_router
    from logo_forge.generation.router import router as upscale_router
    from logo_forge.history.router import router as history_router
    from logo_forge.logos.router import router as logos_router
    from logo_forge.payments.router import router as webhook_router
    from logo_forge.payments.router import payments_router

    prefix = settings.api_prefix
    app.include_router(usage_router, prefix=prefix, tags=["generation"])
    app.include_router(upscale_router, prefix=prefix)
    app.include_router(history_router, prefix=prefix)
    app.include_router(accounts_router, prefix=prefix)
    app.include_router(logos_router, prefix=prefix)
    app.include_router(payments_router, prefix=prefix)
    app.include_router(webhook_router, prefix=prefix)

    # Generated images, when stored on disk
    from logo_forge.deps import get_image_store
    store = get_image_store()
    if store.ensure_dir():
        app.mount("/images", StaticFiles(directory=store.images_dir, check_dir=False), name="images")

    return app
