from __future__ import annotations


class SiteDeployError(RuntimeError):
    pass


class ConfigError(SiteDeployError):
    """Missing or invalid configuration for the selected environment."""


class FilesystemError(SiteDeployError):
    pass


class FetchError(SiteDeployError):
    """An external page could not be retrieved."""


class RenderError(SiteDeployError):
    pass


class UploadError(SiteDeployError):
    pass


class InvalidationError(SiteDeployError):
    pass


class ManifestError(SiteDeployError):
    """A persisted manifest exists but cannot be read back."""


__all__ = [
    "SiteDeployError",
    "ConfigError",
    "FilesystemError",
    "FetchError",
    "RenderError",
    "UploadError",
    "InvalidationError",
    "ManifestError",
]
