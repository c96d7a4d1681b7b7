"""Retrieval of exposition text over HTTP."""
import logging
from typing import Dict, Optional

import requests

from prom2json.config import FetchConfig
from prom2json.errors import FetchError

logger = logging.getLogger(__name__)


def fetch_text(
    url: str,
    timeout_s: float = 10.0,
    verify_tls: bool = True,
    headers: Optional[Dict[str, str]] = None
) -> str:
    """GET a metrics endpoint and return its body as text."""
    try:
        response = requests.get(url, timeout=timeout_s, verify=verify_tls, headers=headers or {})
        response.raise_for_status()
    except requests.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        raise FetchError(url, str(e), status_code=status_code) from e
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e

    logger.debug(f"Fetched {len(response.text)} bytes from {url}")
    return response.text


def fetch_configured(config: FetchConfig, url: Optional[str] = None) -> str:
    """Fetch ``url``, or the configured URL when none is given."""
    target = url or config.url
    if not target:
        raise FetchError("<unset>", "no URL given and fetch.url is not configured")

    return fetch_text(
        target,
        timeout_s=config.timeout_s,
        verify_tls=config.verify_tls,
        headers=config.headers
    )
