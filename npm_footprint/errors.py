"""
npm_footprint/errors.py — Exception hierarchy.

Data-source failures are per-package and never abort a batch: the
orchestrator catches SourceError and records its message on the item.
Configuration and manifest errors are fatal for the CLI run.
"""

from typing import Optional


class FootprintError(Exception):
    """Base class for all npm_footprint errors."""


class ConfigurationError(FootprintError):
    """Grid-intensity / contribution tables are inconsistent."""


class ManifestError(FootprintError):
    """package.json is missing, unreadable or malformed."""


class SourceError(FootprintError):
    """A registry lookup failed for a single package.

    Attributes:
        source:  Short name of the data source ("npm", "bundlephobia").
        package: Package identifier the lookup was for.
        status:  HTTP status code, or None for network / decode failures.
    """

    def __init__(
        self,
        source: str,
        package: str,
        message: str,
        status: Optional[int] = None,
    ) -> None:
        self.source = source
        self.package = package
        self.status = status
        super().__init__(f"{source}: {message} ({package})")


class PackageNotFoundError(SourceError):
    """The data source answered 404 for the package."""
