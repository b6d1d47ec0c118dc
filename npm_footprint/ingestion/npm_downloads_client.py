"""
npm Downloads Client — Registry download statistics for npm packages.

Fetches the download count of a package over an explicit date range from the
npm registry downloads API:

    GET https://api.npmjs.org/downloads/point/{start}:{end}/{package}

Uses only Python stdlib (urllib.request).
"""
import logging
import urllib.parse
from dataclasses import asdict, dataclass

from npm_footprint.config import DEFAULT_CONFIG, FootprintConfig
from npm_footprint.errors import SourceError
from npm_footprint.ingestion.registry_http import get_json
from npm_footprint.timespan import Timespan

logger = logging.getLogger(__name__)

SOURCE = "npm"


@dataclass
class NpmDownloadStat:
    """Download count of one package over a date range."""

    package: str
    downloads: int
    start: str
    end: str

    def to_dict(self) -> dict:
        return asdict(self)


def downloads_url(
    package_name: str,
    timespan: Timespan,
    config: FootprintConfig = DEFAULT_CONFIG,
) -> str:
    """Build the point-range URL for *package_name*.

    Scoped names (e.g. @babel/core) are percent-encoded as a whole, so the
    '@' becomes '%40' and the '/' becomes '%2F'.
    """
    encoded_name = urllib.parse.quote(package_name, safe="")
    return f"{config.npm_downloads_base}/point/{timespan.npm_range}/{encoded_name}"


def get_npm_downloads(
    package_name: str,
    timespan: Timespan,
    config: FootprintConfig = DEFAULT_CONFIG,
) -> NpmDownloadStat:
    """Fetch the download count for a single npm package.

    Args:
        package_name: npm package name, including scope if applicable.
        timespan: Inclusive date range to count downloads over.
        config: Endpoint, timeout and User-Agent settings.

    Returns:
        NpmDownloadStat for the range reported back by the registry.

    Raises:
        SourceError: Lookup failed or the response lacks 'downloads'.
    """
    data = get_json(downloads_url(package_name, timespan, config), SOURCE, package_name, config)

    downloads = data.get("downloads")
    if downloads is None:
        logger.warning("npm: 'downloads' key missing in response for %s", package_name)
        raise SourceError(SOURCE, package_name, "'downloads' missing in response")

    return NpmDownloadStat(
        package=data.get("package", package_name),
        downloads=int(downloads),
        start=data.get("start", timespan.start),
        end=data.get("end", timespan.end),
    )

