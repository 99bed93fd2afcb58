"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediadeck.api.routes import router
from mediadeck.config import Settings, get_settings
from mediadeck.errors import MediaDeckError

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )


# ---------------------------------------------------------------------------
# Error mapping: every failure is a JSON body with a single "error" key
# ---------------------------------------------------------------------------


async def _media_error_handler(request: Request, exc: MediaDeckError) -> JSONResponse:
    logger.warning("request.rejected", path=request.url.path, kind=exc.kind, error=exc.message[:300])
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation(exc)
    logger.warning("request.invalid", path=request.url.path, error=message)
    return JSONResponse(status_code=400, content={"error": message})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown routes and known routes with the wrong method look the same
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    roots = [str(r) for r in settings.root_paths]
    logger.info("app.startup", roots=roots, port=settings.port)
    if not roots:
        logger.warning("app.no_roots", hint="set ROOTS to a comma-separated list of directories")
    yield
    logger.info("app.shutdown")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="mediadeck",
        description="Browse sandboxed media roots and run ffmpeg subtitle/transcode operations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    origins = settings.origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(MediaDeckError, _media_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    app.include_router(router)

    # Static frontend, mounted last so API routes take precedence
    if settings.web_dir:
        web_dir = Path(settings.web_dir).resolve()
        if web_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(web_dir), html=True), name="web")
        else:
            logger.warning("app.web_dir_missing", web_dir=str(web_dir))

    return app


app = create_app()
