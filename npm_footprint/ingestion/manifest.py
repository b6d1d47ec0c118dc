"""
Package lists for a footprint run.

Two inputs are supported: a comma-separated ``--npm`` flag
(``react,@babel/core@7.24.0``) and the ``dependencies`` block of a
repository's package.json (semver ranges passed through untouched).
"""
import json
import logging
import os
from dataclasses import dataclass

from npm_footprint.errors import ManifestError

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "latest"


@dataclass(frozen=True)
class PackageSpec:
    """A package name and the version (or range / dist-tag) to size."""

    name: str
    version: str = DEFAULT_VERSION


def parse_package_spec(text: str) -> PackageSpec:
    """Split ``name[@version]``; a leading '@' marks a scope, not a version."""
    text = text.strip()
    at = text.rfind("@")
    if at > 0:
        name, version = text[:at], text[at + 1:]
        return PackageSpec(name=name, version=version or DEFAULT_VERSION)
    return PackageSpec(name=text)


def parse_npm_list(value: str) -> list[PackageSpec]:
    """Parse the ``--npm`` flag. Blank entries are dropped."""
    if not value:
        return []
    return [parse_package_spec(item) for item in value.split(",") if item.strip()]


def read_package_json_dependencies(repo_path: str) -> list[PackageSpec]:
    """Read runtime dependencies from ``{repo_path}/package.json``.

    Returns:
        One PackageSpec per entry of ``dependencies``, in file order.
        A manifest without a ``dependencies`` block yields an empty list.

    Raises:
        ManifestError: File missing, unreadable, not JSON, or malformed.
    """
    manifest_path = os.path.join(os.path.abspath(repo_path), "package.json")
    try:
        with open(manifest_path, "r", encoding="utf-8") as fh:
            manifest = json.load(fh)
    except FileNotFoundError:
        raise ManifestError(f"package.json not found: {manifest_path}") from None
    except json.JSONDecodeError as exc:
        raise ManifestError(f"invalid JSON in {manifest_path}: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"cannot read {manifest_path}: {exc}") from exc

    if not isinstance(manifest, dict):
        raise ManifestError(f"{manifest_path} does not contain a JSON object")

    dependencies = manifest.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise ManifestError(f"'dependencies' in {manifest_path} is not an object")

    specs = [PackageSpec(name=name, version=str(version)) for name, version in dependencies.items()]
    logger.info("Loaded %d dependencies from %s", len(specs), manifest_path)
    return specs
