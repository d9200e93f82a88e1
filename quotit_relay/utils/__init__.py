"""
Utility modules for the relay
"""
from .redaction import mask_secret, redact, redact_mapping

__all__ = [
    'mask_secret',
    'redact',
    'redact_mapping',
]
