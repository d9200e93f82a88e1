"""
Helpers that keep upstream credentials out of diagnostics.
"""

import re
from typing import Any, Dict, Optional

# Access keys are GUID-like: runs of hex digits and dashes
_SECRET_RUN = re.compile(r"[A-F0-9-]{8,}", re.IGNORECASE)

MASK = "****"

CREDENTIAL_FIELDS = ("RemoteAccessKey", "WebsiteAccessKey")


def redact(text: Optional[str]) -> Optional[str]:
    """Mask every hexadecimal-looking run of 8+ characters."""
    if not text:
        return text
    return _SECRET_RUN.sub(MASK, text)


def mask_secret(value: Optional[str]) -> str:
    """Render a configured secret for startup logs: only whether it is set."""
    return MASK if value else "<missing>"


def redact_mapping(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow copy of an outbound payload safe for debug logging."""
    safe: Dict[str, Any] = {}
    for key, value in payload.items():
        if key in CREDENTIAL_FIELDS:
            safe[key] = mask_secret(value)
        elif isinstance(value, str):
            safe[key] = redact(value)
        else:
            safe[key] = value
    return safe
