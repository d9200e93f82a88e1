"""Pytest fixtures for the relay app and its upstream."""

import pytest
from httpx import ASGITransport, AsyncClient

from quotit_relay.api.main import create_app
from quotit_relay.config import QUOTIT_LEAD_URL, QUOTIT_PROD_BASE_URL, QUOTIT_STG_BASE_URL, Credentials, RelaySettings

REMOTE_KEY = "1A2B3C4D-5E6F-7A8B-9C0D-1E2F3A4B5C6D"
WEBSITE_KEY = "FFEEDDCC-BBAA-9988-7766-554433221100"

LEAD_URL = QUOTIT_LEAD_URL
SUBMIT_DRUGS_URL = f"{QUOTIT_PROD_BASE_URL}/SubmitMemberDrugs"
SUBMIT_DRUGS_HOST = "www.quotit.net"
SUBMIT_DRUGS_PATH = "/quotit/apps/Common/ActWS/ACA/v2/SubmitMemberDrugs"
STG_BASE_URL = QUOTIT_STG_BASE_URL
PROD_BASE_URL = QUOTIT_PROD_BASE_URL


@pytest.fixture
def settings(tmp_path):
    return RelaySettings(
        credentials=Credentials(remote_access_key=REMOTE_KEY, website_access_key=WEBSITE_KEY),
        static_dir=str(tmp_path / "no-public"),
    )


@pytest.fixture
async def client(settings):
    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://relay.test") as ac:
        yield ac
