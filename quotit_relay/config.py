"""
Relay configuration loader.

Secrets and runtime options come from the environment (a local .env file is
honoured via python-dotenv). Non-secret upstream options may also be kept in
a YAML file pointed to by RELAY_CONFIG_PATH; environment variables win.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quotit_relay.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

QUOTIT_PROD_BASE_URL = "https://www.quotit.net/quotit/apps/Common/ActWS/ACA/v2"
QUOTIT_STG_BASE_URL = "https://staging.quotit.net/quotit/apps/Common/ActWS/ACA/v2"
QUOTIT_LEAD_URL = "https://www.quotit.net/quotit/apps/epro/logquote/logquote"

# env var -> settings field, for everything that is not a credential
_ENV_FIELDS = {
    "PORT": "port",
    "UPSTREAM_TIMEOUT_SECONDS": "upstream_timeout_seconds",
    "QUOTIT_PROD_BASE_URL": "prod_base_url",
    "QUOTIT_STG_BASE_URL": "stg_base_url",
    "QUOTIT_LEAD_URL": "lead_url",
    "STATIC_DIR": "static_dir",
    "MAX_BODY_BYTES": "max_body_bytes",
    "LOG_LEVEL": "log_level",
}


class Credentials(BaseModel):
    """Access Key pair required by the upstream service. Never log these."""

    model_config = ConfigDict(frozen=True)

    remote_access_key: str = ""
    website_access_key: str = ""

    def missing(self) -> List[str]:
        names = []
        if not self.remote_access_key:
            names.append("REMOTE_ACCESS_KEY")
        if not self.website_access_key:
            names.append("WEBSITE_ACCESS_KEY")
        return names

    def __repr__(self) -> str:
        ra = "set" if self.remote_access_key else "missing"
        wa = "set" if self.website_access_key else "missing"
        return f"Credentials(remote_access_key={ra}, website_access_key={wa})"

    __str__ = __repr__


class RelaySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials: Credentials = Field(default_factory=Credentials)
    port: int = Field(default=3000, ge=1, le=65535)
    upstream_timeout_seconds: float = Field(default=30.0, gt=0, le=300)
    prod_base_url: str = QUOTIT_PROD_BASE_URL
    stg_base_url: str = QUOTIT_STG_BASE_URL
    lead_url: str = QUOTIT_LEAD_URL
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir: str = "public"
    max_body_bytes: int = Field(default=1024 * 1024, ge=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    def require_credentials(self) -> None:
        """Refuse to run without both secrets; names the variables, never the values."""
        missing = self.credentials.missing()
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}. "
                "The relay will not start without upstream credentials."
            )


def _load_yaml_options(config_path: Optional[Path]) -> Dict[str, Any]:
    if config_path is None:
        return {}
    if not config_path.exists():
        raise ConfigurationError(f"Relay config file not found: {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Relay config file must contain a mapping: {config_path}")
    # secrets are only ever read from the environment
    data.pop("credentials", None)
    return data


def load_settings(env: Optional[Mapping[str, str]] = None, config_path: Optional[Path] = None) -> RelaySettings:
    """
    Build the process-wide RelaySettings.

    Args:
        env: Mapping to read variables from. Defaults to os.environ after
            loading a .env file.
        config_path: Optional YAML file with non-secret options. Defaults to
            RELAY_CONFIG_PATH when set.

    Raises:
        ConfigurationError: If a value fails validation or the YAML file is missing.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    if config_path is None and env.get("RELAY_CONFIG_PATH"):
        config_path = Path(env["RELAY_CONFIG_PATH"])

    options = _load_yaml_options(config_path)
    for env_name, field_name in _ENV_FIELDS.items():
        value = (env.get(env_name) or "").strip()
        if value:
            options[field_name] = value

    if options.get("log_level"):
        options["log_level"] = str(options["log_level"]).upper()

    origins = (env.get("CORS_ALLOW_ORIGINS") or "").strip()
    if origins:
        options["cors_allow_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    options["credentials"] = Credentials(
        remote_access_key=(env.get("REMOTE_ACCESS_KEY") or "").strip(),
        website_access_key=(env.get("WEBSITE_ACCESS_KEY") or "").strip(),
    )

    try:
        return RelaySettings(**options)
    except ValidationError as e:
        # pydantic echoes input values; only report the offending field names
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        logger.error("Invalid relay configuration for: %s", ", ".join(fields))
        raise ConfigurationError(f"Invalid relay configuration for: {', '.join(fields)}") from None
