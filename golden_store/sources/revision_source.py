"""Capabilities the golden store needs from its surroundings."""

from __future__ import annotations

from typing import Protocol


class RevisionSource(Protocol):
    """Reads files as they existed at a historical revision of the baseline."""

    async def ensure_baseline_history(self) -> None:
        """Make the baseline branch's history locally queryable. Idempotent."""
        ...

    async def get_file_at_revision(self, path: str, revision: str) -> bytes:
        """Return the content of ``path`` at ``revision``.

        Raises NotFoundError when the file does not exist at that revision.
        """
        ...


class ArgSource(Protocol):
    """Exposes the diff base chosen by whoever invoked the tool."""

    @property
    def diff_base(self) -> str: ...
