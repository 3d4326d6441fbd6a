from __future__ import annotations

from pathlib import Path, PurePath


def map_destination(source_path: str | PurePath, new_extension: str | None = None) -> Path:
    """Re-root `source_path` by dropping its leading component.

    `map_destination("parent/child/file.ext", "xyz") == Path("child/file.xyz")`.
    A path without a parent component is only given the new extension. For an
    absolute path the leading component is the root itself, so the result is
    always relative.
    """
    path = Path(source_path)
    parts = path.parts
    if len(parts) > 1 or path.anchor:
        path = Path(*parts[1:])
    if new_extension is not None:
        path = path.with_suffix("." + new_extension.lstrip("."))
    return path


def default_upload_key(path: str | PurePath) -> str:
    """Key used by `upload` when none is given: `uploads/<filename>` without whitespace."""
    filename = Path(path).name
    return "uploads/" + "".join(filename.replace(" ", "_").split())


__all__ = ["map_destination", "default_upload_key"]
