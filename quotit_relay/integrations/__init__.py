"""
Integrations layer.
This package contains all code used to communicate with the Quotit upstream service.

Key rule:
- Endpoints MUST NOT call the upstream directly.
- Payloads are shaped by integrations/policy and sent by integrations/clients/real_http.
"""
