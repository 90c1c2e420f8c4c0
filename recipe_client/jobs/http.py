"""HTTP client construction.

Each workflow gets its own httpx.AsyncClient so concurrent uploads never
share a connection context.
"""

import logging

import httpx

from recipe_client.config import ClientSettings

logger = logging.getLogger(__name__)

JSON_ACCEPT = "application/json"


def create_http_client(settings: ClientSettings, **kwargs) -> httpx.AsyncClient:
    """Create an AsyncClient bound to the configured base URL.

    Extra keyword arguments are passed to httpx (e.g. ``transport`` in tests).
    """
    client = httpx.AsyncClient(
        base_url=settings.base_url,
        headers={"Accept": JSON_ACCEPT},
        timeout=httpx.Timeout(settings.request_timeout),
        **kwargs,
    )
    logger.debug(f"Opened HTTP client for {settings.base_url}")
    return client
