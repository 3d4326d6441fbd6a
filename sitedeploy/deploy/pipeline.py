from __future__ import annotations

import logging
import mimetypes
import uuid
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable

from sitedeploy.build.manifest import ManifestFile, SiteManifest
from sitedeploy.build.pipeline import BuildPipeline
from sitedeploy.build.render import Renderer
from sitedeploy.build.sources import PageSourceResolver
from sitedeploy.core.config import SiteConfig
from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import ConfigError, FilesystemError
from sitedeploy.core.pages import ExternalPage
from sitedeploy.deploy.revision import GitRevisionProvider, RevisionProvider
from sitedeploy.deploy.storage import Cdn, CloudFrontCdn, ObjectStore, S3ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
CALLER_REFERENCE_PREFIX = "xtask"


def guess_content_type(path: str | Path) -> str:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or DEFAULT_CONTENT_TYPE


def invalidation_paths(entries: Iterable[ManifestFile]) -> list[str]:
    return ["/" + entry.destination.as_posix() for entry in entries]


class DeployPipeline:
    """Build the site, upload every artifact, then invalidate the CDN once.

    Uploads happen in manifest order. The first failed upload aborts the deploy
    and the invalidation is never requested; objects already uploaded stay in
    the bucket.
    """

    def __init__(
        self,
        config: SiteConfig,
        manifest: SiteManifest,
        renderer: Renderer | None = None,
        *,
        store: ObjectStore | None = None,
        cdn: Cdn | None = None,
        revisions: RevisionProvider | None = None,
        resolver: PageSourceResolver | None = None,
    ):
        self.config = config
        self.manifest = manifest
        self.renderer = renderer
        self.store = store or S3ObjectStore(
            region=config.aws_region, timeout_s=config.aws_timeout_s
        )
        self.cdn = cdn or CloudFrontCdn(
            region=config.aws_region, timeout_s=config.aws_timeout_s
        )
        self.revisions = revisions or GitRevisionProvider()
        self.resolver = resolver

    @property
    def environment(self) -> Environment:
        return self.manifest.environment

    def require_bucket(self) -> str:
        bucket = self.config.bucket(self.environment)
        if not bucket:
            raise ConfigError(
                f"no s3 bucket configured for environment '{self.environment}'"
            )
        return bucket

    def require_distribution(self) -> str:
        distribution = self.config.cdn_distribution(self.environment)
        if not distribution:
            raise ConfigError(
                f"no cloudfront distribution configured for environment '{self.environment}'"
            )
        return distribution

    def deploy(self, external_pages: Iterable[ExternalPage] = ()) -> str | None:
        bucket = self.require_bucket()
        distribution = self.require_distribution()
        if self.renderer is None:
            raise ConfigError("deploy needs a renderer to build the site")
        logger.info(
            "deploying with configuration: root url=%s, s3 bucket=%s, cloudfront distribution=%s",
            self.config.root_url(self.environment),
            bucket,
            distribution,
        )

        BuildPipeline(
            self.config, self.manifest, self.renderer, resolver=self.resolver
        ).build(external_pages)

        entries = list(self.manifest.entries())
        self.upload_entries(bucket, entries)

        logger.info("done uploading to s3, invalidating the cloudfront cache")
        paths = invalidation_paths(entries)
        logger.debug("paths: %s", paths)
        return self.cdn.invalidate(distribution, paths, self.caller_reference())

    def upload(self, path: str | Path, key: str) -> str:
        """Upload one file under `key` and return its public URL."""
        bucket = self.require_bucket()
        self._put(bucket, Path(path), key)
        url = f"{self.config.root_url(self.environment).rstrip('/')}/{key}"
        logger.info("uploaded: %s", url)
        return url

    def upload_entries(self, bucket: str, entries: list[ManifestFile]) -> None:
        workers = max(1, self.config.upload_concurrency)
        if workers == 1:
            for entry in entries:
                self._put(bucket, entry.built_filepath, entry.destination.as_posix())
            return

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(
                    self._put, bucket, entry.built_filepath, entry.destination.as_posix()
                )
                for entry in entries
            ]
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in futures:
                if future.done() and not future.cancelled():
                    exc = future.exception()
                    if exc:
                        raise exc

    def caller_reference(self) -> str:
        revision = self.revisions.revision()
        if not revision:
            revision = uuid.uuid4().hex
            logger.warning(
                "no source revision available, using build token %s", revision
            )
        return f"{CALLER_REFERENCE_PREFIX}-{revision}"

    def _put(self, bucket: str, path: Path, key: str) -> None:
        content_type = guess_content_type(path)
        try:
            body = path.read_bytes()
        except OSError as exc:
            raise FilesystemError(f"could not read '{path}' for upload: {exc}") from exc
        logger.info("uploading '%s' '%s' as %s", bucket, key, content_type)
        self.store.put(bucket, key, content_type, body)


__all__ = [
    "DeployPipeline",
    "guess_content_type",
    "invalidation_paths",
    "DEFAULT_CONTENT_TYPE",
]
