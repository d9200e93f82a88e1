"""Request-scoped helpers shared by the relay routers."""

import json
import logging
from typing import Any, Dict
from urllib.parse import parse_qsl

from fastapi import Request
from fastapi.responses import Response

from quotit_relay.config import RelaySettings
from quotit_relay.error_handler import PayloadTooLarge, ValidationError
from quotit_relay.integrations.clients.real_http.quotit import QuotitClient
from quotit_relay.integrations.contracts import UpstreamReply

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> RelaySettings:
    return request.app.state.settings


def get_quotit_client(request: Request) -> QuotitClient:
    return request.app.state.quotit_client


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Parse the inbound body as a loose mapping.

    Browsers post either JSON (Object.fromEntries(formData)) or a plain
    URL-encoded form; anything that is not an object becomes an empty mapping.
    """
    limit = request.app.state.settings.max_body_bytes
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge(f"Request body exceeds {limit} bytes")

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise PayloadTooLarge(f"Request body exceeds {limit} bytes")
        chunks.append(chunk)
    raw = b"".join(chunks)
    if not raw.strip():
        return {}

    content_type = request.headers.get("content-type", "").lower()
    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(raw.decode("utf-8", errors="replace"), keep_blank_values=True))

    try:
        data = json.loads(raw)
    except ValueError:
        if "json" in content_type:
            raise ValidationError("Request body is not valid JSON") from None
        logger.debug("Ignoring non-JSON body with content type %r", content_type)
        return {}
    return data if isinstance(data, dict) else {}


def relay_response(reply: UpstreamReply) -> Response:
    """Mirror the upstream status, body and content type."""
    if reply.content_type:
        # Copied as-is; media_type would append a charset to text/* types.
        return Response(
            content=reply.content,
            status_code=reply.status_code,
            headers={"content-type": reply.content_type},
        )
    return Response(content=reply.content, status_code=reply.status_code, media_type="text/plain")
