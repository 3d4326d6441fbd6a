from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

import yaml

from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import ConfigError, FilesystemError, ManifestError
from sitedeploy.site_repo import reset_directory

logger = logging.getLogger(__name__)


@dataclass
class ManifestFile:
    """One produced artifact and where it came from."""

    origin: str
    origin_modified: datetime
    built_filepath: Path
    destination: Path

    def to_dict(self) -> dict[str, str]:
        return {
            "origin": self.origin,
            "origin_modified": self.origin_modified.isoformat(),
            "built_filepath": str(self.built_filepath),
            "destination": self.destination.as_posix(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManifestFile:
        origin_modified = data["origin_modified"]
        if not isinstance(origin_modified, datetime):
            origin_modified = datetime.fromisoformat(str(origin_modified))
        if origin_modified.tzinfo is None:
            raise ValueError(f"origin_modified has no UTC offset: {origin_modified}")
        return cls(
            origin=str(data["origin"]),
            origin_modified=origin_modified,
            built_filepath=Path(data["built_filepath"]),
            destination=Path(data["destination"]),
        )


@dataclass
class SiteManifest:
    """Persisted record of every artifact produced by the last build.

    Serialized to `<manifest_dir>/<environment>.yaml`.
    """

    environment: Environment
    build_directory: Path
    files: dict[str, ManifestFile] = field(default_factory=dict)
    manifest_dir: Path = Path(".")

    @property
    def path(self) -> Path:
        return manifest_path(self.manifest_dir, self.environment)

    @classmethod
    def load_or_create(
        cls,
        environment: Environment,
        build_directory: str | Path,
        manifest_dir: str | Path = ".",
    ) -> SiteManifest:
        path = manifest_path(Path(manifest_dir), environment)
        if not path.exists():
            return cls(
                environment=environment,
                build_directory=Path(build_directory),
                manifest_dir=Path(manifest_dir),
            )

        logger.info("reading site manifest from %s", path)
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ManifestError(f"could not read manifest '{path}': {exc}") from exc
        except yaml.YAMLError as exc:
            raise ManifestError(f"manifest '{path}' is not valid YAML: {exc}") from exc
        try:
            manifest = cls.from_dict(raw, manifest_dir=Path(manifest_dir))
        except (ConfigError, KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ManifestError(f"manifest '{path}' is malformed: {exc}") from exc

        if manifest.environment is not environment:
            raise ManifestError(
                f"manifest '{path}' belongs to environment '{manifest.environment}'"
            )
        if manifest.build_directory != Path(build_directory):
            logger.warning(
                "manifest '%s' uses build directory '%s', ignoring '%s'",
                path,
                manifest.build_directory,
                build_directory,
            )
        return manifest

    def clean(self) -> None:
        """Delete and recreate the build directory, forgetting every recorded file."""
        reset_directory(self.build_directory)
        self.files = {}

    def record(
        self,
        origin: str,
        origin_modified: datetime,
        built_filepath: Path,
        destination: Path,
    ) -> ManifestFile:
        entry = ManifestFile(
            origin=origin,
            origin_modified=origin_modified,
            built_filepath=built_filepath,
            destination=destination,
        )
        self.files[origin] = entry
        return entry

    def entries(self) -> Iterator[ManifestFile]:
        """Recorded files in origin order."""
        for origin in sorted(self.files):
            yield self.files[origin]

    def save(self) -> Path:
        path = self.path
        payload = yaml.safe_dump(self.to_dict(), sort_keys=True, allow_unicode=True)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise FilesystemError(f"could not save manifest '{path}': {exc}") from exc
        logger.info("build manifest saved to '%s'", path)
        return path

    def to_dict(self) -> dict[str, Any]:
        return {
            "environment": self.environment.value,
            "build_directory": str(self.build_directory),
            "files": {origin: entry.to_dict() for origin, entry in self.files.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], manifest_dir: Path = Path(".")) -> SiteManifest:
        files = {
            origin: ManifestFile.from_dict(entry)
            for origin, entry in (data.get("files") or {}).items()
        }
        return cls(
            environment=Environment.parse(data["environment"]),
            build_directory=Path(data["build_directory"]),
            files=files,
            manifest_dir=manifest_dir,
        )


def manifest_path(manifest_dir: Path, environment: Environment) -> Path:
    return manifest_dir / f"{environment.value}.yaml"


__all__ = ["ManifestFile", "SiteManifest", "manifest_path"]
