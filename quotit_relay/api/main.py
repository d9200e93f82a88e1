"""
FastAPI application - Main entry point

Run with:
  quotit-relay
or
  uvicorn quotit_relay.api.main:create_app --factory --port 3000
"""

import logging
from pathlib import Path
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from quotit_relay.api.endpoints import actws_router, relay_router
from quotit_relay.config import RelaySettings, load_settings
from quotit_relay.error_handler import ConfigurationError, register_error_handlers
from quotit_relay.integrations.clients.real_http.quotit import QuotitClient
from quotit_relay.utils.redaction import mask_secret

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[RelaySettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the relay app around one immutable RelaySettings.

    Raises:
        ConfigurationError: If either access key is missing (fail fast).
    """
    settings = settings or load_settings()
    settings.require_credentials()

    app = FastAPI(
        title="Quotit Relay",
        description="Injects server-held Quotit access keys into browser requests and forwards them upstream",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.quotit_client = QuotitClient(settings, transport=transport)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    register_error_handlers(app)

    app.include_router(relay_router)
    app.include_router(actws_router)

    @app.get("/healthz", response_class=PlainTextResponse, tags=["Health"])
    async def healthz():
        return "ok"

    # Static front-end last so it never shadows the relay routes
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found; serving API routes only", static_dir)

    logger.info(
        "Relay configured: timeout=%ss keys loaded: RA=%s, WA=%s",
        settings.upstream_timeout_seconds,
        mask_secret(settings.credentials.remote_access_key),
        mask_secret(settings.credentials.website_access_key),
    )
    return app


def run() -> None:
    """Console entry point: load settings, refuse to start without keys, serve."""
    try:
        settings = load_settings()
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        app = create_app(settings)
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Relay not started: %s", e)
        raise SystemExit(1) from e

    logger.info("Relay up on :%s", settings.port)
    # Render and similar hosts sit behind a proxy
    uvicorn.run(app, host="0.0.0.0", port=settings.port, proxy_headers=True, forwarded_allow_ips="*")


if __name__ == "__main__":
    run()
