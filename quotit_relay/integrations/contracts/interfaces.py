from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Environment(str, Enum):
    STAGING = "stg"
    PRODUCTION = "prod"


class DrugsMode(str, Enum):
    """How /relay/membersdrugs forwards a request."""

    SAVE = "SaveMemberPrescriptions"     # form POST with websiteId/contactID/modelStr
    SUBMIT = "SubmitMemberDrugs"         # JSON POST with injected access keys


class ActWSMethod(str, Enum):
    """Upstream actions the generic ActWS endpoint may invoke."""

    GET_FAMILY = "GetFamily"
    GET_MEMBER_DRUGS = "GetMemberDrugs"
    SUBMIT_MEMBER_DRUGS = "SubmitMemberDrugs"
    SEARCH_RX_DRUGS = "SearchRxDrugs"


ALLOWED_METHODS = frozenset(m.value for m in ActWSMethod)


# ---------------------------------------------------------------------------
# Transient request/response values
# ---------------------------------------------------------------------------

class ActWSRequest(BaseModel):
    method: Optional[str] = None
    body: Dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class UpstreamReply:
    status_code: int
    content: bytes
    content_type: Optional[str] = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")
