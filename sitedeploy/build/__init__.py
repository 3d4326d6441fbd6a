from sitedeploy.build.manifest import ManifestFile, SiteManifest
from sitedeploy.build.pipeline import BuildPipeline
from sitedeploy.build.render import MarkdownRenderer, Renderer
from sitedeploy.build.sources import (
    PageFetcher,
    PageSourceResolver,
    ResolvedPage,
    UrllibPageFetcher,
)

__all__ = [
    "ManifestFile",
    "SiteManifest",
    "BuildPipeline",
    "MarkdownRenderer",
    "Renderer",
    "PageFetcher",
    "PageSourceResolver",
    "ResolvedPage",
    "UrllibPageFetcher",
]
