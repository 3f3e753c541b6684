"""Golden store — reads and writes the `golden.json` file of expected screenshots."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Iterable

from golden_store.errors import ParseError, WriteError
from golden_store.models.golden import GoldenRecordSet, PageRecord
from golden_store.models.test_case import TestCaseResult
from golden_store.sources.revision_source import ArgSource, RevisionSource

logger = logging.getLogger(__name__)

INDENT = "  "


def _encode(node: Any, level: int) -> str:
    if not isinstance(node, dict):
        return json.dumps(node, ensure_ascii=False)
    # Empty objects still close on their own line, matching existing golden files
    indent = "\n" + INDENT * level
    members = [
        f"{indent}{INDENT}{json.dumps(key, ensure_ascii=False)}: {_encode(node[key], level + 1)}"
        for key in sorted(node)
    ]
    return "{" + ",".join(members) + indent + "}"


def serialize_golden(record_set: GoldenRecordSet) -> str:
    """Render a record set in its canonical on-disk form.

    Keys are sorted at every level with two-space indentation and a single
    trailing newline, so identical content always yields identical bytes.
    """
    return _encode(record_set.to_json_data(), 0) + "\n"


def parse_golden_json(content: str | bytes) -> GoldenRecordSet:
    """Parse golden file text (or raw UTF-8 bytes) into a record set."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Golden file is not valid UTF-8: {e}") from e
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Golden file is not valid JSON: {e}") from e
    return GoldenRecordSet.from_json_data(data)


class GoldenStore:
    """Owns one golden record set across build, load, and persist."""

    def __init__(self, record_set: GoldenRecordSet):
        self.record_set = record_set

    @property
    def json_data(self) -> dict[str, Any]:
        """The flat mapping as it would be written, for callers merging sets."""
        return self.record_set.to_json_data()

    def to_json(self) -> str:
        return serialize_golden(self.record_set)

    @classmethod
    def from_test_cases(cls, test_cases: Iterable[TestCaseResult]) -> "GoldenStore":
        """Build a record set with one page per test case.

        A later test case with the same page key replaces the earlier one.
        """
        pages: dict[str, PageRecord] = {}
        for test_case in test_cases:
            page_key = test_case.page_key
            if page_key in pages:
                logger.debug("Duplicate page key %s, keeping the later test case", page_key)
            pages[page_key] = PageRecord(
                public_url=test_case.public_url,
                screenshots={alias: url for alias, url in test_case.variants},
            )
        return cls(GoldenRecordSet(pages=pages))

    @classmethod
    async def from_baseline(
        cls,
        file_path: str,
        revision_source: RevisionSource,
        arg_source: ArgSource,
    ) -> "GoldenStore":
        """Load the golden file as committed at the diff base revision."""
        await revision_source.ensure_baseline_history()
        revision = arg_source.diff_base
        logger.info("Reading %s at %s", file_path, revision)
        content = await revision_source.get_file_at_revision(file_path, revision)
        record_set = parse_golden_json(content)
        logger.debug("Loaded %d pages from baseline %s", len(record_set.pages), revision)
        return cls(record_set)

    async def write_to_disk(self, file_path: str | Path, diff_report_url: str) -> None:
        """Attach the diff report URL and replace the golden file at ``file_path``."""
        self.record_set.diff_report_url = diff_report_url
        content = self.to_json()
        await asyncio.to_thread(_write_atomic, Path(file_path), content)
        logger.info('DONE updating "%s"!', file_path)


def _write_atomic(path: Path, content: str) -> None:
    """Write through a sibling temp file so a failure never truncates ``path``."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="\n",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        # NamedTemporaryFile creates 0600 files
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(f"Failed to write {path}: {e}") from e
