"""
Real HTTP integration clients.

These clients communicate with the Quotit upstream service via HTTP:
- lead intake (logquote)
- ActWS ACA v2 actions (SubmitMemberDrugs, GetFamily, ...)
"""

from .quotit import QuotitClient

__all__ = ["QuotitClient"]
