"""Error taxonomy for the relay and the FastAPI handlers that render it."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quotit_relay.utils.redaction import redact

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised at startup when the relay cannot be configured."""


class RelayError(Exception):
    status_code = 400
    error = "RelayError"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(RelayError):
    error = "ValidationError"


class UnsupportedMethod(RelayError):
    error = "UnsupportedMethod"


class InvalidEnvironment(RelayError):
    error = "InvalidEnvironment"


class ServerMisconfiguration(RelayError):
    error = "ServerMisconfiguration"


class PayloadTooLarge(RelayError):
    status_code = 413
    error = "PayloadTooLarge"


class UpstreamUnavailable(RelayError):
    status_code = 502
    error = "UpstreamUnavailable"


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "%s %s -> %s (%s): %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.error,
        redact(exc.message),
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
