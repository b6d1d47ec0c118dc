"""
Shared JSON-over-HTTP GET for the registry clients.

Uses only Python stdlib (urllib.request). Every failure mode (HTTP status,
network error, timeout, undecodable body) is raised as SourceError so that
callers can record it against the package that triggered it.
"""
import json
import logging
import socket
import urllib.error
import urllib.request

from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig
from npm_footprint.errors import PackageNotFoundError, SourceError

logger = logging.getLogger(__name__)


def get_json(
    url: str,
    source: str,
    package: str,
    config: FootprintConfig = DEFAULT_CONFIG,
) -> dict:
    """GET *url* and decode the JSON body.

    Args:
        url: Full URL to fetch.
        source: Data source label used in log lines and errors.
        package: Package the request is for.
        config: Supplies the User-Agent header and timeout.

    Returns:
        Parsed JSON dict.

    Raises:
        PackageNotFoundError: HTTP 404.
        SourceError: Any other HTTP, network or decode failure.
    """
    req = urllib.request.Request(
        url,
        headers={
            "Accept": "application/json",
            "User-Agent": config.user_agent,
        },
    )
    try:
        with urllib.request.urlopen(req, timeout=config.request_timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as exc:
        if exc.code == 404:
            logger.debug("%s: package not found — %s", source, url)
            raise PackageNotFoundError(source, package, "not found", status=404) from exc
        if exc.code == 429:
            logger.warning("%s: rate limited (429) — %s", source, url)
        else:
            logger.warning("%s HTTP %d error: %s", source, exc.code, url)
        raise SourceError(source, package, f"HTTP {exc.code}", status=exc.code) from exc
    except urllib.error.URLError as exc:
        logger.warning("%s network error: %s — %s", source, exc.reason, url)
        raise SourceError(source, package, f"network error: {exc.reason}") from exc
    except (socket.timeout, TimeoutError) as exc:
        logger.warning("%s timeout after %.0fs — %s", source, config.request_timeout, url)
        raise SourceError(source, package, "timed out") from exc

    try:
        data = json.loads(body)
    except ValueError as exc:
        logger.warning("%s returned invalid JSON — %s", source, url)
        raise SourceError(source, package, "invalid JSON response") from exc

    if not isinstance(data, dict):
        raise SourceError(source, package, "unexpected JSON payload")
    return data
