"""Pytest configuration and shared fixtures."""

import json
from typing import Optional

import pytest

from golden_store.errors import NotFoundError, RetrievalError
from golden_store.models.golden import GoldenRecordSet, PageRecord
from golden_store.models.test_case import (
    ScreenshotImageFile,
    UploadableTestCase,
    UploadedFile,
    UserAgent,
)
from golden_store.sources.arg_source import DiffBaseArgs


# ============================================================================
# Collaborator fakes
# ============================================================================


class InMemoryRevisionSource:
    """RevisionSource backed by a dict of (path, revision) -> bytes."""

    def __init__(self, files: Optional[dict] = None, fetch_error: Optional[Exception] = None):
        self.files = files or {}
        self.fetch_error = fetch_error
        self.fetch_calls = 0
        self.requests: list[tuple[str, str]] = []

    async def ensure_baseline_history(self) -> None:
        self.fetch_calls += 1
        if self.fetch_error is not None:
            raise self.fetch_error

    async def get_file_at_revision(self, path: str, revision: str) -> bytes:
        self.requests.append((path, revision))
        if (path, revision) not in self.files:
            raise NotFoundError(f"{path} not found at revision {revision}")
        return self.files[(path, revision)]


@pytest.fixture
def make_revision_source():
    """Factory for in-memory revision sources."""
    return InMemoryRevisionSource


@pytest.fixture
def failing_revision_source() -> InMemoryRevisionSource:
    return InMemoryRevisionSource(fetch_error=RetrievalError("could not resolve host"))


@pytest.fixture
def diff_base_args() -> DiffBaseArgs:
    return DiffBaseArgs(diff_base="origin/master")


# ============================================================================
# Golden data fixtures
# ============================================================================


@pytest.fixture
def record_set() -> GoldenRecordSet:
    """A two-page record set with an empty-variant page."""
    return GoldenRecordSet(
        pages={
            "spec/button/classes/baseline.html": PageRecord(
                public_url="https://storage.example.com/spec/button/classes/baseline.html",
                screenshots={
                    "desktop_windows_chrome@latest": "https://storage.example.com/button/chrome.png",
                    "desktop_windows_firefox@latest": "https://storage.example.com/button/firefox.png",
                },
            ),
            "spec/card/classes/empty.html": PageRecord(
                public_url="https://storage.example.com/spec/card/classes/empty.html",
            ),
        },
    )


@pytest.fixture
def baseline_json(record_set: GoldenRecordSet) -> bytes:
    data = record_set.to_json_data()
    data["diffReportUrl"] = "https://storage.example.com/report/old.html"
    return json.dumps(data).encode("utf-8")


def _test_case(page_key: str, public_url: str, variants: list[tuple[str, str]]) -> UploadableTestCase:
    return UploadableTestCase(
        html_file=UploadedFile(destination_relative_file_path=page_key, public_url=public_url),
        screenshot_image_files=[
            ScreenshotImageFile(
                destination_relative_file_path=f"{page_key}.{alias}.png",
                public_url=url,
                user_agent=UserAgent(alias=alias),
            )
            for alias, url in variants
        ],
    )


@pytest.fixture
def make_test_case():
    """Factory for uploadable test cases."""
    return _test_case


@pytest.fixture
def uploadable_test_cases() -> list[UploadableTestCase]:
    return [
        _test_case(
            "spec/button/classes/baseline.html",
            "https://storage.example.com/spec/button/classes/baseline.html",
            [
                ("desktop_windows_chrome@latest", "https://storage.example.com/button/chrome.png"),
                ("desktop_windows_firefox@latest", "https://storage.example.com/button/firefox.png"),
            ],
        ),
        _test_case(
            "spec/card/classes/empty.html",
            "https://storage.example.com/spec/card/classes/empty.html",
            [],
        ),
    ]
