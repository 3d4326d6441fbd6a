from __future__ import annotations

import logging
import shutil
from pathlib import Path

from sitedeploy.core.errors import ConfigError, FilesystemError

logger = logging.getLogger(__name__)


class SiteRepo:
    """Helper for the local content tree and the build output directory."""

    def __init__(self, content_dir: str | Path, build_dir: str | Path):
        self.content_dir = Path(content_dir)
        self.build_dir = Path(build_dir)

    def collect_content(self) -> list[Path]:
        return collect_files(self.content_dir)

    def content_destination_source(self, path: Path) -> Path:
        """Path of a content file starting at the content directory's own name."""
        return path.relative_to(self.content_dir.parent)

    def built_path(self, destination: Path) -> Path:
        return self.build_dir / destination


def reset_directory(path: str | Path) -> None:
    """Drop and recreate `path` as an empty directory."""
    path = Path(path)
    logger.info("cleaning '%s'", path)
    try:
        if path.is_dir():
            logger.debug("removing build dir '%s'", path)
            shutil.rmtree(path)
        logger.debug("creating build dir '%s'", path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"could not clean '{path}': {exc}") from exc


def collect_files(root: str | Path) -> list[Path]:
    """Recursively list every regular file under `root`, depth-first."""
    root = Path(root)
    logger.info("reading directory '%s'", root)
    if not root.is_dir():
        raise ConfigError(f"'{root}' does not exist, or is not a directory")
    return _walk(root)


def _walk(directory: Path) -> list[Path]:
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise FilesystemError(f"could not read directory '{directory}': {exc}") from exc

    files: list[Path] = []
    for child in children:
        if child.is_file():
            files.append(child)
        elif child.is_dir():
            files.extend(_walk(child))
    return files


__all__ = ["SiteRepo", "collect_files", "reset_directory"]
