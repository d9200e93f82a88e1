"""
Browser-facing relay endpoints.

The browser never holds the Quotit access keys; these routes reshape its
payload, add the keys where needed and forward exactly one upstream call.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from quotit_relay.api.dependencies import get_quotit_client, get_settings, read_payload, relay_response
from quotit_relay.config import RelaySettings
from quotit_relay.integrations.clients.real_http.quotit import QuotitClient
from quotit_relay.integrations.contracts import DrugsMode
from quotit_relay.integrations.policy.payloads import (
    build_lead_form,
    build_save_prescriptions_form,
    build_submit_drugs_payload,
    select_drugs_mode,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/relay", tags=["Relay"])


@router.post("/logquote")
async def log_quote(
    payload: Dict[str, Any] = Depends(read_payload),
    client: QuotitClient = Depends(get_quotit_client),
):
    """Forward a lead as x-www-form-urlencoded to the Quotit lead intake."""
    form = build_lead_form(payload)
    logger.info("Relaying lead with %d field(s)", len(form))
    reply = await client.post_form(client.lead_url(), form)
    return relay_response(reply)


@router.post("/membersdrugs")
async def members_drugs(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    client: QuotitClient = Depends(get_quotit_client),
    settings: RelaySettings = Depends(get_settings),
):
    """
    Two modes, chosen by the `_method` query marker:
    - SaveMemberPrescriptions: form POST of websiteId, contactID, modelStr
    - SubmitMemberDrugs (default): JSON POST with access keys injected if missing
    """
    mode = select_drugs_mode(request.query_params)

    if mode is DrugsMode.SAVE:
        form = build_save_prescriptions_form(payload)
        logger.info("Relaying SaveMemberPrescriptions for contact %s", form["contactID"])
        reply = await client.post_form(client.save_prescriptions_url(), form)
    else:
        body = build_submit_drugs_payload(payload, settings.credentials)
        logger.info("Relaying SubmitMemberDrugs")
        reply = await client.post_json(client.submit_drugs_url(), body)

    # upstream auth errors are passed through as-is
    return relay_response(reply)


@router.get("/health")
async def relay_health():
    return {"ok": True}
