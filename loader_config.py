"""Configuration lookup for contact loaders.

Priority:
  1. organization.features[key] → per-organization override
  2. Process environment (a local .env file is loaded on import)

Usage:
    from loader_config import get_config, api_key
    key = api_key(organization)
"""
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

# Environment variable names
API_KEY = "ACTION_NETWORK_API_KEY"
DOMAIN = "ACTION_NETWORK_API_DOMAIN"
BASE_URL = "ACTION_NETWORK_API_BASE_URL"
CACHE_TTL = "ACTION_NETWORK_ACTION_HANDLER_CACHE_TTL"
REQUESTS_PER_WINDOW = "ACTION_NETWORK_REQUESTS_PER_WINDOW"
RATE_WINDOW_SECONDS = "ACTION_NETWORK_RATE_WINDOW_SECONDS"
HTTP_TIMEOUT_SECONDS = "ACTION_NETWORK_HTTP_TIMEOUT_SECONDS"

DEFAULTS = {
    DOMAIN: "https://actionnetwork.org",
    BASE_URL: "/api/v2",
    CACHE_TTL: 1800,
    REQUESTS_PER_WINDOW: 4,
    RATE_WINDOW_SECONDS: 1.1,
    HTTP_TIMEOUT_SECONDS: 30,
}


def _features(organization: Any) -> dict:
    if organization is None:
        return {}
    features = getattr(organization, "features", None)
    if features is None and isinstance(organization, dict):
        features = organization.get("features")
    return features if isinstance(features, dict) else {}


def get_config(key: str, organization: Any = None) -> Optional[Any]:
    """Return the organization override for key, else the env value, else None."""
    features = _features(organization)
    if features.get(key) not in (None, ""):
        return features[key]
    value = os.environ.get(key)
    if value in (None, ""):
        return None
    return value


def has_config(key: str, organization: Any = None) -> bool:
    return get_config(key, organization) is not None


def _positive_number(key: str, organization: Any, cast) -> Any:
    raw = get_config(key, organization)
    if raw is None:
        return DEFAULTS[key]
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric %s=%r, using default %s", key, raw, DEFAULTS[key])
        return DEFAULTS[key]
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using default %s", key, raw, DEFAULTS[key])
        return DEFAULTS[key]
    return value


def api_key(organization: Any = None) -> Optional[str]:
    return get_config(API_KEY, organization)


def api_root(organization: Any = None) -> str:
    """Return <domain><basePath>, e.g. https://actionnetwork.org/api/v2."""
    domain = get_config(DOMAIN, organization) or DEFAULTS[DOMAIN]
    base = get_config(BASE_URL, organization) or DEFAULTS[BASE_URL]
    return f"{domain}{base}"


def cache_ttl(organization: Any = None) -> int:
    return _positive_number(CACHE_TTL, organization, int)


def requests_per_window(organization: Any = None) -> int:
    return _positive_number(REQUESTS_PER_WINDOW, organization, int)


def rate_window_seconds(organization: Any = None) -> float:
    return _positive_number(RATE_WINDOW_SECONDS, organization, float)


def http_timeout_seconds(organization: Any = None) -> float:
    return _positive_number(HTTP_TIMEOUT_SECONDS, organization, float)
