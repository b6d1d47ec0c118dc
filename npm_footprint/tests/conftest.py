"""
npm_footprint/tests/conftest.py — Shared pytest fixtures.

Fixtures:
    timespan          — fixed September 2026 window.
    fake_urlopen      — replaces urllib.request.urlopen with a URL → response table.
    make_stat         — NpmDownloadStat factory.
    make_size         — PackageSize factory.
    package_json_repo — temporary repository with a package.json.
"""

import io
import json
import urllib.error
import urllib.request

import pytest

from npm_footprint.ingestion.bundlephobia_client import PackageSize
from npm_footprint.ingestion.npm_downloads_client import NpmDownloadStat
from npm_footprint.timespan import Timespan


# ── Pytest configuration hooks ────────────────────────────────────────────────

def pytest_configure(config):
    """Register the integration marker."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that call real external APIs (deselected by default, "
        "pass --run-integration or -m integration to enable)",
    )


def pytest_addoption(parser):
    """Add --run-integration CLI flag to enable integration tests."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that call real external APIs.",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration or -m integration is given."""
    markexpr = config.getoption("-m", default="")
    if "integration" in markexpr:
        return
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test -- pass --run-integration or -m integration to run"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def timespan() -> Timespan:
    return Timespan(start="2026-09-01", end="2026-09-30")


class FakeRegistry:
    """Callable stand-in for urllib.request.urlopen.

    ``routes`` maps a URL substring to either a JSON-serialisable body, an
    HTTP status code (int → HTTPError), or an exception instance to raise.
    Every requested URL and its headers are recorded in ``requests``.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def __call__(self, req, timeout=None):
        url = req.full_url
        self.requests.append((url, dict(req.header_items()), timeout))
        for fragment, outcome in self.routes.items():
            if fragment in url:
                if isinstance(outcome, BaseException):
                    raise outcome
                if isinstance(outcome, int):
                    raise urllib.error.HTTPError(url, outcome, "error", {}, None)
                if isinstance(outcome, bytes):
                    return io.BytesIO(outcome)
                return io.BytesIO(json.dumps(outcome).encode("utf-8"))
        raise urllib.error.HTTPError(url, 404, "Not Found", {}, None)


@pytest.fixture
def fake_urlopen(monkeypatch) -> FakeRegistry:
    registry = FakeRegistry()
    monkeypatch.setattr(urllib.request, "urlopen", registry)
    return registry


@pytest.fixture
def make_stat():
    def _make(package: str, downloads: int, start="2026-09-01", end="2026-09-30"):
        return NpmDownloadStat(package=package, downloads=downloads, start=start, end=end)
    return _make


@pytest.fixture
def make_size():
    def _make(name: str, size: int, version: str = "1.0.0"):
        return PackageSize(
            name=name,
            version=version,
            size=size,
            gzip=size // 3,
            raw={"name": name, "version": version, "size": size, "gzip": size // 3},
        )
    return _make


@pytest.fixture
def package_json_repo(tmp_path):
    manifest = {
        "name": "demo-app",
        "version": "0.0.1",
        "dependencies": {
            "react": "^18.2.0",
            "@babel/core": "7.24.0",
            "lodash": "latest",
        },
        "devDependencies": {"jest": "^29.0.0"},
    }
    (tmp_path / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    return tmp_path
