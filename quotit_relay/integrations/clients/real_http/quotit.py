"""
Quotit HTTP Client.

Purpose:
- The ONLY place where calls to the Quotit upstream service are made
- Sends one request per relay call (no retries) with a bounded timeout
- Returns the upstream status/body untouched; non-2xx replies are not errors here

Transport failures (timeouts, DNS, refused connections) are converted into
UpstreamUnavailable so they never surface as raw httpx errors. The timeout is a
deadline on the whole call, including a reply body that arrives slowly.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from quotit_relay.config import RelaySettings
from quotit_relay.error_handler import UpstreamUnavailable
from quotit_relay.integrations.contracts import DrugsMode, Environment, UpstreamReply
from quotit_relay.utils.redaction import redact, redact_mapping

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "application/json,text/plain,text/html,*/*"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"


class QuotitClient:
    def __init__(self, settings: RelaySettings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self.timeout_seconds = settings.upstream_timeout_seconds
        self._transport = transport

    # -- URLs --

    def base_url(self, env: Environment) -> str:
        base = self.settings.prod_base_url if env is Environment.PRODUCTION else self.settings.stg_base_url
        return base.rstrip("/")

    def lead_url(self) -> str:
        return self.settings.lead_url

    def submit_drugs_url(self) -> str:
        return f"{self.base_url(Environment.PRODUCTION)}/{DrugsMode.SUBMIT.value}"

    def save_prescriptions_url(self) -> str:
        return f"{self.submit_drugs_url()}?_method={DrugsMode.SAVE.value}&_session=rw"

    def actws_url(self, env: Environment, method: str) -> str:
        return f"{self.base_url(env)}/{method.strip('/')}"

    # -- Calls --

    async def post_form(self, url: str, form: Mapping[str, str]) -> UpstreamReply:
        logger.debug("Forwarding form to %s: %s", url, redact_mapping(dict(form)))
        return await self._post(url, headers={"Content-Type": FORM_CONTENT_TYPE}, data=dict(form))

    async def post_json(self, url: str, payload: Dict[str, Any]) -> UpstreamReply:
        logger.debug("Forwarding JSON to %s: %s", url, redact_mapping(payload))
        return await self._post(
            url,
            headers={"Content-Type": JSON_CONTENT_TYPE},
            content=json.dumps(payload).encode("utf-8"),
        )

    async def _post(self, url: str, headers: Dict[str, str], **kwargs: Any) -> UpstreamReply:
        headers = {"Accept": DEFAULT_ACCEPT, **headers}
        try:
            response = await asyncio.wait_for(self._send(url, headers, **kwargs), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error("Upstream call to %s exceeded its %ss deadline", url, self.timeout_seconds)
            raise UpstreamUnavailable(
                f"Upstream request timed out after {self.timeout_seconds:g}s: deadline exceeded"
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Upstream timeout after %ss calling %s: %s", self.timeout_seconds, url, redact(str(e)))
            raise UpstreamUnavailable(
                f"Upstream request timed out after {self.timeout_seconds:g}s: {redact(str(e)) or type(e).__name__}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Request error connecting to upstream %s: %s", url, redact(str(e)))
            raise UpstreamUnavailable(f"Upstream request failed: {redact(str(e)) or type(e).__name__}") from e

        logger.info("Upstream %s responded: status=%s", url, response.status_code)
        return UpstreamReply(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def _send(self, url: str, headers: Dict[str, str], **kwargs: Any) -> httpx.Response:
        # The body is read inside the deadline; cancellation closes the connection.
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            return await client.post(url, headers=headers, **kwargs)
