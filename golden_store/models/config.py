"""Configuration model for golden file maintenance."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class GoldenConfig(BaseModel):
    # Golden file location, relative to the repository root
    golden_file_path: str = "test/screenshot/golden.json"

    # Baseline repository
    repo_dir: str = "."
    remote: str = "origin"
    baseline_branch: str = "master"
    diff_base: str = ""  # empty: "<remote>/<baseline_branch>"
    fetch_depth: int = Field(default=50, ge=1)
    git_executable: str = "git"

    @classmethod
    def load(cls, path: str | Path) -> "GoldenConfig":
        """Read a config written by ``save``."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        return cls.model_validate_json(path.read_text(encoding="utf-8"))

    def save(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")

