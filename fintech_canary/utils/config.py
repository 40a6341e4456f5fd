import os
from typing import Any

import toml
from pydantic import BaseModel, Field

PAGERDUTY_API_URL = "PAGERDUTY_API_URL"
DEFAULT_PAGERDUTY_URL = "https://api.pagerduty.com"
DEFAULT_TIMEOUT = 30
DEFAULT_PAGE_SIZE = 10

_config: dict[str, Any] = {}


class ConfigNotFound(Exception):
    pass


class PagerDutySettings(BaseModel):
    """PagerDuty section of the canary config."""

    url: str = DEFAULT_PAGERDUTY_URL
    timeout: int = Field(DEFAULT_TIMEOUT, gt=0)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=100)


def get_config() -> dict[str, Any]:
    return _config


def init(config: dict[str, Any]) -> dict[str, Any]:
    global _config  # noqa: PLW0603
    _config = config
    return _config


def init_from_toml(configfile: str) -> dict[str, Any]:
    try:
        return init(toml.load(configfile))
    except FileNotFoundError:
        raise ConfigNotFound(f"config file not found: {configfile}") from None


def pagerduty_settings() -> PagerDutySettings:
    """PagerDuty settings: defaults, overridden by the config file's
    [pagerduty] table, overridden by PAGERDUTY_API_URL."""
    section = dict(get_config().get("pagerduty", {}))
    if url := os.environ.get(PAGERDUTY_API_URL):
        section["url"] = url
    return PagerDutySettings(**section)
