"""Git-backed access to baseline revisions of the golden file."""

from __future__ import annotations

import asyncio
import logging
from pathlib import PureWindowsPath

from golden_store.errors import NotFoundError, RetrievalError
from golden_store.models.config import GoldenConfig

logger = logging.getLogger(__name__)

# Fragments of `git show` stderr meaning the path or revision is absent
NOT_FOUND_MARKERS = (
    "does not exist",
    "exists on disk, but not in",
    "invalid object name",
    "bad revision",
    "unknown revision",
)


class GitRepo:
    """Runs git commands against a local clone of the baseline repository."""

    def __init__(
        self,
        repo_dir: str = ".",
        remote: str = "origin",
        baseline_branch: str = "master",
        fetch_depth: int = 50,
        git_executable: str = "git",
    ):
        self.repo_dir = repo_dir
        self.remote = remote
        self.baseline_branch = baseline_branch
        self.fetch_depth = fetch_depth
        self.git_executable = git_executable
        self._history_fetched = False

    @classmethod
    def from_config(cls, config: GoldenConfig) -> "GitRepo":
        return cls(
            repo_dir=config.repo_dir,
            remote=config.remote,
            baseline_branch=config.baseline_branch,
            fetch_depth=config.fetch_depth,
            git_executable=config.git_executable,
        )

    async def _run(self, *args: str) -> tuple[int, bytes, str]:
        """Run git and return (exit code, stdout, stderr)."""
        logger.debug("Running: %s %s", self.git_executable, " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_executable,
                *args,
                cwd=self.repo_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RetrievalError(f"Could not run {self.git_executable}: {e}") from e
        stdout, stderr = await proc.communicate()
        return proc.returncode, stdout, stderr.decode("utf-8", errors="replace").strip()

    async def ensure_baseline_history(self) -> None:
        """Shallow-fetch the baseline branch so its revisions can be read."""
        if self._history_fetched:
            return
        logger.info("Fetching %s/%s (depth %d)", self.remote, self.baseline_branch, self.fetch_depth)
        code, _, stderr = await self._run(
            "fetch", f"--depth={self.fetch_depth}", "--end-of-options", self.remote, self.baseline_branch,
        )
        if code != 0:
            raise RetrievalError(
                f"git fetch {self.remote} {self.baseline_branch} failed ({code}): {stderr}"
            )
        self._history_fetched = True

    async def get_file_at_revision(self, path: str, revision: str) -> bytes:
        """Return the bytes of ``path`` as committed at ``revision``."""
        object_path = _to_object_path(path)
        code, stdout, stderr = await self._run("show", "--end-of-options", f"{revision}:{object_path}")
        if code == 0:
            return stdout
        if any(marker in stderr.lower() for marker in NOT_FOUND_MARKERS):
            raise NotFoundError(f"{object_path} not found at revision {revision}: {stderr}")
        raise RetrievalError(f"git show {revision}:{object_path} failed ({code}): {stderr}")


def _to_object_path(path: str) -> str:
    """Normalise a repo-relative path to the forward-slash form git expects."""
    return PureWindowsPath(path).as_posix()
