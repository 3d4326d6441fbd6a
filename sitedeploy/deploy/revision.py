from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class RevisionProvider(Protocol):
    def revision(self) -> str | None: ...


class GitRevisionProvider:
    """Current commit hash from `git rev-parse HEAD`."""

    def __init__(self, cwd: str | Path = "."):
        self.cwd = Path(cwd)

    def revision(self) -> str | None:
        try:
            out = subprocess.check_output(
                ["git", "rev-parse", "HEAD"],
                cwd=str(self.cwd),
                text=True,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.debug("git rev-parse failed: %s", exc)
            return None
        return out.strip() or None


__all__ = ["RevisionProvider", "GitRevisionProvider"]
