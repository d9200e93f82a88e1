"""
Quotit relay.

Sits between the browser quoting front end and the Quotit upstream service:
injects the server-held access keys, reshapes payloads and mirrors replies.
"""

__version__ = "1.0.0"
