from sitedeploy.core.config import SiteConfig, load_site_config
from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import (
    ConfigError,
    FetchError,
    FilesystemError,
    InvalidationError,
    ManifestError,
    RenderError,
    SiteDeployError,
    UploadError,
)
from sitedeploy.core.pages import (
    ExternalPage,
    LocalPage,
    PageSource,
    RemotePage,
    load_external_pages,
)
from sitedeploy.core.paths import default_upload_key, map_destination

__all__ = [
    "SiteConfig",
    "load_site_config",
    "Environment",
    "SiteDeployError",
    "ConfigError",
    "FilesystemError",
    "FetchError",
    "RenderError",
    "UploadError",
    "InvalidationError",
    "ManifestError",
    "ExternalPage",
    "LocalPage",
    "RemotePage",
    "PageSource",
    "load_external_pages",
    "map_destination",
    "default_upload_key",
]
