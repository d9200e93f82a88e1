"""
Generic ActWS passthrough: POST /api/actws/{env} with {"method": ..., "body": {...}}.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import ValidationError as PydanticValidationError

from quotit_relay.api.dependencies import get_quotit_client, get_settings, read_payload, relay_response
from quotit_relay.config import RelaySettings
from quotit_relay.error_handler import ValidationError
from quotit_relay.integrations.clients.real_http.quotit import QuotitClient
from quotit_relay.integrations.contracts import ActWSRequest
from quotit_relay.integrations.policy.payloads import build_actws_payload, resolve_environment, resolve_method

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/actws", tags=["ActWS"])


@router.post("/{env}")
async def actws_call(
    env: str,
    payload: Dict[str, Any] = Depends(read_payload),
    client: QuotitClient = Depends(get_quotit_client),
    settings: RelaySettings = Depends(get_settings),
):
    environment = resolve_environment(env)
    try:
        call = ActWSRequest(**payload)
    except PydanticValidationError:
        raise ValidationError('Expected a JSON object of the form {"method": str, "body": object}') from None

    method = resolve_method(call.method)
    body = build_actws_payload(method, call.body, settings.credentials)

    logger.info("Relaying ActWS %s to %s", method.value, environment.value)
    reply = await client.post_json(client.actws_url(environment, method.value), body)
    return relay_response(reply)
