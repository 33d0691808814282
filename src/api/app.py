from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from src.payment import FapshiConfig, get_fapshi_config

from .modules import SearchModule, build_search_module

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _base_path() -> str:
    """Optional deployment subpath from API_BASE_PATH, normalized to '/x' form."""
    base_path = os.getenv("API_BASE_PATH", "").strip()
    if base_path and not base_path.startswith("/"):
        base_path = "/" + base_path
    if base_path.endswith("/") and base_path != "/":
        base_path = base_path.rstrip("/")
    return base_path


def _check_payment_config(config: FapshiConfig) -> None:
    """Fail fast on missing credentials in production; warn in the sandbox."""
    if config.is_production:
        config.validate()
        return
    missing = config.missing_settings()
    if missing:
        logger.warning(
            "Payment gateway running in sandbox without: %s", ", ".join(missing)
        )


def create_app(
    *,
    search_module: Optional[SearchModule] = None,
    payment_config: Optional[FapshiConfig] = None,
) -> FastAPI:
    """Application factory.

    Collaborators not passed in are built at startup, so importing this module
    never touches the network.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = payment_config or get_fapshi_config()
        _check_payment_config(config)
        app.state.payment_config = config
        logger.info(
            "Payment gateway environment: %s (%s)", config.environment.value, config.base_url
        )

        module = search_module or build_search_module()
        module.register(app)
        try:
            yield
        finally:
            module.close()
            app.state.search_service = None

    base_path = _base_path()

    # Built-in docs/openapi routes are replaced by JSON-based ones below
    app = FastAPI(
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        root_path=base_path,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(SearchModule.router)

    @app.get("/health", tags=["ops"], summary="Health check")
    async def health(request: Request):
        config = getattr(request.app.state, "payment_config", None)
        return {
            "status": "ok",
            "payment_environment": config.environment.value if config else None,
        }

    # Explicit OpenAPI JSON (forces application/json, avoids 406 with strict Accept)
    @app.get("/openapi.json", include_in_schema=False)
    def openapi_json():
        schema = app.openapi()
        if base_path and base_path != "/":
            # FastAPI caches app.openapi(); copy before annotating
            schema = {**schema, "servers": [{"url": base_path}]}
        return JSONResponse(schema)

    # Relative openapi_url so it works behind a reverse proxy subpath
    @app.get("/docs", include_in_schema=False)
    def swagger_ui():
        return get_swagger_ui_html(openapi_url="openapi.json", title="API Docs")

    return app


app = create_app()
