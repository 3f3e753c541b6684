"""Diff base resolution for the command line."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from golden_store.models.config import GoldenConfig

logger = logging.getLogger(__name__)


class DiffBaseArgs(BaseModel):
    """Read-only holder for the diff base resolved at startup."""

    model_config = ConfigDict(frozen=True)

    diff_base: str = Field(min_length=1)

    @field_validator("diff_base")
    @classmethod
    def reject_option_like(cls, v: str) -> str:
        if v.startswith("-"):
            raise ValueError(f"Diff base must be a revision, not an option: {v!r}")
        return v

    @classmethod
    def resolve(cls, value: Optional[str], config: GoldenConfig) -> "DiffBaseArgs":
        """Pick the diff base from the CLI value, the config, or the baseline branch.

        The bare baseline branch name is qualified with the remote so it points
        at the history fetched by ``ensure_baseline_history``.
        """
        diff_base = (value or config.diff_base or "").strip()
        if not diff_base or diff_base == config.baseline_branch:
            diff_base = f"{config.remote}/{config.baseline_branch}"
        logger.debug("Resolved diff base: %s", diff_base)
        return cls(diff_base=diff_base)
