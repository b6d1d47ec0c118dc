"""
Bundlephobia Client — Transferred size of an npm package version.

    GET https://bundlephobia.com/api/size?package={name}@{version}

The reported ``size`` is the minified bundle in bytes; ``gzip`` is the
compressed size when available. Uses only Python stdlib (urllib.request).
"""
import logging
import urllib.parse
from dataclasses import dataclass, field
from typing import Optional

from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig
from npm_footprint.errors import SourceError
from npm_footprint.ingestion.registry_http import get_json

logger = logging.getLogger(__name__)

SOURCE = "bundlephobia"


@dataclass
class PackageSize:
    """Bundle size of one package version as reported by bundlephobia."""

    name: str
    version: str
    size: int
    gzip: Optional[int] = None
    dependency_count: int = 0
    raw: dict = field(default_factory=dict)

    @property
    def size_kb(self) -> float:
        return self.size / 1000

    def to_dict(self) -> dict:
        """The response body as returned by bundlephobia."""
        return dict(self.raw) if self.raw else {
            "name": self.name,
            "version": self.version,
            "size": self.size,
            "gzip": self.gzip,
            "dependencyCount": self.dependency_count,
        }


def size_url(
    package_name: str,
    version: str = "latest",
    config: FootprintConfig = DEFAULT_CONFIG,
) -> str:
    query = urllib.parse.urlencode({"package": f"{package_name}@{version}"}, safe="@/^~")
    return f"{config.bundlephobia_base}/size?{query}"


def get_package_size(
    package_name: str,
    version: str = "latest",
    config: FootprintConfig = DEFAULT_CONFIG,
) -> PackageSize:
    """Fetch bundle size for ``package_name@version``.

    *version* may be an exact version, a dist-tag or a semver range as found
    in package.json; bundlephobia resolves it.

    Raises:
        SourceError: Lookup failed or the response lacks 'size'.
    """
    spec = f"{package_name}@{version}"
    data = get_json(size_url(package_name, version, config), SOURCE, spec, config)

    size = data.get("size")
    if size is None:
        # bundlephobia reports build failures as {"error": {...}} with HTTP 200.
        detail = data.get("error")
        message = detail.get("message") if isinstance(detail, dict) else None
        logger.warning("bundlephobia: no size for %s (%s)", spec, message or "no detail")
        raise SourceError(SOURCE, spec, message or "'size' missing in response")

    return PackageSize(
        name=data.get("name", package_name),
        version=data.get("version", version),
        size=int(size),
        gzip=data.get("gzip"),
        dependency_count=int(data.get("dependencyCount") or 0),
        raw=data,
    )
