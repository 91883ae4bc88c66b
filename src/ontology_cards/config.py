"""Configuration constants for ontology-cards."""

import locale
import os

from loguru import logger

# Base URL of the ontology API. Overridden by ONTOLOGY_CARDS_API_URL.
DEFAULT_API_BASE_URL: str = "http://localhost:8000/api"
API_BASE_URL_ENV: str = "ONTOLOGY_CARDS_API_URL"

# Seconds before an API request is abandoned. Overridden by ONTOLOGY_CARDS_TIMEOUT.
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 30.0
REQUEST_TIMEOUT_ENV: str = "ONTOLOGY_CARDS_TIMEOUT"

# Sentinel for "no filter" on category and root class.
ALL: str = "all"

# Maximum number of search suggestions offered while typing.
SUGGESTION_LIMIT: int = 8


def resolve_api_base_url() -> str:
    """Return the API base URL, without a trailing slash."""
    url = os.environ.get(API_BASE_URL_ENV) or DEFAULT_API_BASE_URL
    return url.rstrip("/")


def resolve_request_timeout() -> float:
    """Return the request timeout in seconds."""
    raw = os.environ.get(REQUEST_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        msg = f"{REQUEST_TIMEOUT_ENV} must be a number of seconds, got {raw!r}"
        raise ValueError(msg) from None
    if timeout <= 0:
        msg = f"{REQUEST_TIMEOUT_ENV} must be positive, got {raw!r}"
        raise ValueError(msg)
    return timeout


def configure_collation() -> None:
    """Adopt LC_COLLATE from the environment so name sorting follows the user's locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Locale unavailable, names sort by code point: {}", e)
