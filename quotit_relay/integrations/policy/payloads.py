"""
Payload policy: reshape browser payloads into the Quotit contract.

Every check here runs before the upstream client is called, so a rejected
payload never produces an outbound request.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Mapping, Optional

from quotit_relay.config import Credentials
from quotit_relay.error_handler import (
    InvalidEnvironment,
    ServerMisconfiguration,
    UnsupportedMethod,
    ValidationError,
)
from quotit_relay.integrations.contracts import ALLOWED_METHODS, ActWSMethod, DrugsMode, Environment

REMOTE_ACCESS_KEY_FIELD = "RemoteAccessKey"
WEBSITE_ACCESS_KEY_FIELD = "WebsiteAccessKey"

WEBSITE_ID_ALIASES = ("websiteId", "websiteID", "brokerID")
CONTACT_ID_ALIASES = ("contactID", "ContactId", "contactId")
SEARCH_KEYWORD_ALIASES = ("Keyword", "keyword", "SearchText")

_DIGITS = re.compile(r"[0-9]+")
_TRUTHY = {"1", "true", "yes", "on"}


def _first_non_empty(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return default


def _is_omitted(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


# ---------------------------------------------------------------------------
# SubmitLead
# ---------------------------------------------------------------------------

def build_lead_form(payload: Mapping[str, Any]) -> Dict[str, str]:
    """Every non-null field, string-coerced, nothing added."""
    return {str(key): _to_form_value(value) for key, value in payload.items() if value is not None}


# ---------------------------------------------------------------------------
# SubmitMemberDrugs
# ---------------------------------------------------------------------------

def select_drugs_mode(query: Mapping[str, str]) -> DrugsMode:
    marker = (query.get("_method") or "").strip()
    if marker.lower() == DrugsMode.SAVE.value.lower():
        return DrugsMode.SAVE
    if (query.get("save") or "").strip().lower() in _TRUTHY:
        return DrugsMode.SAVE
    return DrugsMode.SUBMIT


def build_save_prescriptions_form(payload: Mapping[str, Any]) -> Dict[str, str]:
    website_id = str(_first_non_empty(payload, *WEBSITE_ID_ALIASES, default="")).strip()
    contact = _first_non_empty(payload, *CONTACT_ID_ALIASES, default="")
    contact_id = "" if isinstance(contact, bool) else str(contact).strip()
    model = payload.get("modelStr")
    model_str = "" if model is None else _to_form_value(model)

    if not website_id:
        raise ValidationError("websiteId is required for SaveMemberPrescriptions", details={"field": "websiteId"})
    if not _DIGITS.fullmatch(contact_id):
        raise ValidationError("contactID must be numeric for SaveMemberPrescriptions", details={"field": "contactID"})
    if not model_str.strip():
        raise ValidationError("modelStr is required", details={"field": "modelStr"})

    return {"websiteId": website_id, "contactID": contact_id, "modelStr": model_str}


def inject_credentials(payload: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    """Fill the access keys only where the caller left them out."""
    injected = dict(payload)
    if _is_omitted(injected.get(REMOTE_ACCESS_KEY_FIELD)):
        injected[REMOTE_ACCESS_KEY_FIELD] = credentials.remote_access_key
    if _is_omitted(injected.get(WEBSITE_ACCESS_KEY_FIELD)):
        injected[WEBSITE_ACCESS_KEY_FIELD] = credentials.website_access_key
    return injected


def require_credentials(payload: Mapping[str, Any]) -> None:
    if _is_omitted(payload.get(REMOTE_ACCESS_KEY_FIELD)) or _is_omitted(payload.get(WEBSITE_ACCESS_KEY_FIELD)):
        raise ServerMisconfiguration("Server is missing REMOTE_ACCESS_KEY and/or WEBSITE_ACCESS_KEY env vars")


def build_submit_drugs_payload(payload: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    injected = inject_credentials(payload, credentials)
    if _first_non_empty(injected, "ContactId", "FamilyId") is None:
        raise ValidationError("ContactId or FamilyId is required", details={"fields": ["ContactId", "FamilyId"]})
    require_credentials(injected)
    return injected


# ---------------------------------------------------------------------------
# Generic ActWS
# ---------------------------------------------------------------------------

def resolve_environment(value: Optional[str]) -> Environment:
    try:
        return Environment((value or "").strip().lower())
    except ValueError:
        raise InvalidEnvironment(
            f"Unknown environment '{value}'. Expected one of: {', '.join(e.value for e in Environment)}",
        ) from None


def resolve_method(value: Optional[str]) -> ActWSMethod:
    name = (value or "").strip()
    if not name:
        raise UnsupportedMethod("method is required")
    if name not in ALLOWED_METHODS:
        raise UnsupportedMethod(
            f"Unsupported method '{name}'",
            details={"allowed": sorted(ALLOWED_METHODS)},
        )
    return ActWSMethod(name)


def strip_undefined(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def validate_method_payload(method: ActWSMethod, payload: Mapping[str, Any]) -> None:
    if method is ActWSMethod.SEARCH_RX_DRUGS and _first_non_empty(payload, *SEARCH_KEYWORD_ALIASES) is None:
        raise ValidationError("Keyword is required for SearchRxDrugs", details={"field": "Keyword"})


def build_actws_payload(method: ActWSMethod, payload: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    injected = inject_credentials(strip_undefined(payload), credentials)
    require_credentials(injected)
    validate_method_payload(method, injected)
    return injected
