"""
Cluster probe over raw HTTP (no Python ES client).
Challenge: Decide quickly whether an engine is listening before running integration work.
"""

import logging

import httpx

logger = logging.getLogger(__name__)


def cluster_available(
    url: str,
    timeout: float = 2.0,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> bool:
    """True when GET {url}/ answers 200 with an Elasticsearch banner (cluster_name or version)."""
    base = url.rstrip("/")
    try:
        with httpx.Client(timeout=timeout, verify=verify, transport=transport) as client:
            r = client.get(f"{base}/")
    except httpx.HTTPError as e:
        logger.warning("Elasticsearch not reachable at %s: %s", base, e)
        return False
    if r.status_code != 200:
        logger.warning("Elasticsearch at %s answered %s", base, r.status_code)
        return False
    try:
        banner = r.json()
    except ValueError:
        logger.warning("Elasticsearch at %s returned a non-JSON banner", base)
        return False
    return isinstance(banner, dict) and ("cluster_name" in banner or "version" in banner)
