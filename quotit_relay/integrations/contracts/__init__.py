"""
Contracts shared by the relay endpoints, payload policy and upstream client.
"""

from .interfaces import (
    ALLOWED_METHODS,
    ActWSMethod,
    ActWSRequest,
    DrugsMode,
    Environment,
    UpstreamReply,
)

__all__ = [
    "ALLOWED_METHODS",
    "ActWSMethod",
    "ActWSRequest",
    "DrugsMode",
    "Environment",
    "UpstreamReply",
]
