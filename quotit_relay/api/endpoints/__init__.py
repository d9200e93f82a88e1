from quotit_relay.api.endpoints.actws import router as actws_router
from quotit_relay.api.endpoints.relay import router as relay_router

__all__ = ["actws_router", "relay_router"]
