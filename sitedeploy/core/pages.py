from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

import yaml

from sitedeploy.core.errors import ConfigError


@dataclass(frozen=True)
class RemotePage:
    url: str

    def as_identifier(self) -> str:
        return self.url


@dataclass(frozen=True)
class LocalPage:
    path: Path

    def as_identifier(self) -> str:
        return str(self.path)


PageSource = Union[RemotePage, LocalPage]


@dataclass(frozen=True)
class ExternalPage:
    """A page rendered from outside the content tree.

    `local_path` is where the rendered page lands, relative to the build directory.
    """

    source: PageSource
    local_path: Path


def load_external_pages(path: str | Path) -> list[ExternalPage]:
    """Read a YAML list of `{remote|local, local_path}` entries."""
    file_path = Path(path)
    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"could not read external pages from '{file_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in '{file_path}': {exc}") from exc

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"'{file_path}' must contain a list of external pages")

    pages: list[ExternalPage] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigError(f"external page #{index} in '{file_path}' is not a mapping")
        local_path = entry.get("local_path")
        if not local_path:
            raise ConfigError(f"external page #{index} in '{file_path}' has no local_path")
        if Path(local_path).is_absolute() or ".." in Path(local_path).parts:
            raise ConfigError(
                f"external page #{index} in '{file_path}': local_path must stay inside the build directory"
            )
        remote, local = entry.get("remote"), entry.get("local")
        if bool(remote) == bool(local):
            raise ConfigError(
                f"external page #{index} in '{file_path}' needs exactly one of 'remote' or 'local'"
            )
        if remote and urlparse(str(remote)).scheme not in {"http", "https"}:
            raise ConfigError(
                f"external page #{index} in '{file_path}': remote must be an http(s) URL, got '{remote}'"
            )
        source: PageSource = RemotePage(str(remote)) if remote else LocalPage(Path(local))
        pages.append(ExternalPage(source=source, local_path=Path(local_path)))
    return pages


__all__ = [
    "RemotePage",
    "LocalPage",
    "PageSource",
    "ExternalPage",
    "load_external_pages",
]
