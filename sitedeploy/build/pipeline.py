from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sitedeploy.build.manifest import SiteManifest
from sitedeploy.build.render import Renderer
from sitedeploy.build.sources import PageSourceResolver
from sitedeploy.core.config import SiteConfig
from sitedeploy.core.errors import ConfigError, FilesystemError, RenderError
from sitedeploy.core.pages import ExternalPage
from sitedeploy.core.paths import map_destination
from sitedeploy.site_repo import SiteRepo

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
PAGE_EXTENSION = "html"
EXTERNAL_PAGE_CLASSES = "devlog"


class BuildPipeline:
    """Clean the build directory, render every page and copy every asset.

    The manifest is saved only once everything has been produced; any failure
    leaves the previously persisted manifest untouched.
    """

    def __init__(
        self,
        config: SiteConfig,
        manifest: SiteManifest,
        renderer: Renderer,
        resolver: PageSourceResolver | None = None,
    ):
        self.config = config
        self.manifest = manifest
        self.renderer = renderer
        self.resolver = resolver or PageSourceResolver(timeout_s=config.fetch_timeout_s)
        self.repo = SiteRepo(config.content_directory, manifest.build_directory)

    def build(self, external_pages: Iterable[ExternalPage] = ()) -> SiteManifest:
        self.manifest.clean()

        external_count = 0
        for page in external_pages:
            logger.debug("processing external page: %s", page)
            self.build_external(page)
            external_count += 1

        files = self.repo.collect_content()
        markdown_files = [f for f in files if f.suffix == MARKDOWN_SUFFIX]
        other_files = [f for f in files if f.suffix != MARKDOWN_SUFFIX]

        for path in markdown_files:
            self.build_markdown(path)
        for path in other_files:
            self.copy_asset(path)

        self.manifest.save()
        logger.info(
            "built %s file(s) into '%s' (%s page(s), %s asset(s), %s external)",
            len(self.manifest.files),
            self.manifest.build_directory,
            len(markdown_files),
            len(other_files),
            external_count,
        )
        return self.manifest

    def build_external(self, page: ExternalPage) -> None:
        origin = page.source.as_identifier()
        if page.local_path.is_absolute() or ".." in page.local_path.parts:
            raise ConfigError(
                f"external page '{origin}' would be written outside the build directory: '{page.local_path}'"
            )
        built_filepath = self.repo.built_path(page.local_path)
        resolved = self.resolver.resolve(page.source)

        logger.debug("rendering %s to %s", origin, built_filepath)
        rendered = self._render(resolved.content, origin, EXTERNAL_PAGE_CLASSES)
        _write_text(built_filepath, rendered)
        self.manifest.record(
            origin=origin,
            origin_modified=resolved.origin_modified,
            built_filepath=built_filepath,
            destination=page.local_path,
        )

    def build_markdown(self, path: Path) -> None:
        destination = map_destination(
            self.repo.content_destination_source(path), PAGE_EXTENSION
        )
        built_filepath = self.repo.built_path(destination)
        origin = str(path)
        logger.debug("rendering %s to %s", origin, built_filepath)

        origin_modified = _modified_at(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FilesystemError(f"could not read '{path}': {exc}") from exc
        rendered = self._render(content, origin, "")
        _write_text(built_filepath, rendered)
        self.manifest.record(
            origin=origin,
            origin_modified=origin_modified,
            built_filepath=built_filepath,
            destination=destination,
        )

    def copy_asset(self, path: Path) -> None:
        destination = map_destination(self.repo.content_destination_source(path))
        built_filepath = self.repo.built_path(destination)
        origin = str(path)
        logger.debug("copying %s to %s", origin, built_filepath)

        origin_modified = _modified_at(path)
        try:
            built_filepath.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, built_filepath)
        except OSError as exc:
            raise FilesystemError(
                f"could not copy '{path}' to '{built_filepath}': {exc}"
            ) from exc
        self.manifest.record(
            origin=origin,
            origin_modified=origin_modified,
            built_filepath=built_filepath,
            destination=destination,
        )

    def _render(self, content: str, origin: str, extra_classes: str) -> str:
        try:
            return self.renderer.render(content, self.manifest.environment, extra_classes)
        except RenderError:
            logger.error("could not render '%s'", origin)
            raise
        except Exception as exc:
            raise RenderError(f"could not render '{origin}': {exc}") from exc


def _modified_at(path: Path) -> datetime:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError as exc:
        raise FilesystemError(f"could not stat '{path}': {exc}") from exc


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"could not write '{path}': {exc}") from exc


__all__ = ["BuildPipeline", "MARKDOWN_SUFFIX", "PAGE_EXTENSION"]
