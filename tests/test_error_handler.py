from quotit_relay.error_handler import (
    InvalidEnvironment,
    ServerMisconfiguration,
    UnsupportedMethod,
    UpstreamUnavailable,
    ValidationError,
)
from quotit_relay.utils.redaction import mask_secret, redact, redact_mapping


def test_error_kinds_and_statuses():
    assert ValidationError("x").status_code == 400
    assert UnsupportedMethod("x").status_code == 400
    assert InvalidEnvironment("x").status_code == 400
    assert ServerMisconfiguration("x").status_code == 400
    assert UpstreamUnavailable("x").status_code == 502


def test_to_dict_includes_details_only_when_present():
    assert ValidationError("bad").to_dict() == {"error": "ValidationError", "message": "bad"}
    out = UnsupportedMethod("nope", details={"allowed": ["GetFamily"]}).to_dict()
    assert out["details"] == {"allowed": ["GetFamily"]}


def test_redact_masks_hex_runs():
    assert redact("key=1A2B3C4D-5E6F-7A8B done") == "key=**** done"
    assert redact("short abc123") == "short abc123"
    assert redact("") == ""
    assert redact(None) is None


def test_redact_mapping_masks_credential_fields():
    out = redact_mapping({"RemoteAccessKey": "plain-text-key", "WebsiteAccessKey": "", "Note": "id DEADBEEF99", "n": 3})
    assert out == {"RemoteAccessKey": "****", "WebsiteAccessKey": "<missing>", "Note": "id ****", "n": 3}


def test_mask_secret():
    assert mask_secret("anything") == "****"
    assert mask_secret("") == "<missing>"
