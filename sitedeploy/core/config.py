from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import ConfigError


@dataclass
class SiteConfig:
    """Statically configurable parts of the site, keyed by environment."""

    root_urls: dict[Environment, str] = field(default_factory=dict)
    s3_buckets: dict[Environment, str] = field(default_factory=dict)
    cloudfront_distributions: dict[Environment, str] = field(default_factory=dict)
    content_directory: Path = Path("content")
    manifest_directory: Path = Path(".")
    external_pages_file: Path | None = None
    template_path: Path | None = None
    aws_region: str = "us-west-1"
    fetch_timeout_s: float = 30.0
    aws_timeout_s: float = 60.0
    upload_concurrency: int = 1

    def root_url(self, environment: Environment) -> str:
        return self.root_urls.get(environment, "")

    def bucket(self, environment: Environment) -> str | None:
        if environment is Environment.LOCAL:
            return None
        return self.s3_buckets.get(environment) or None

    def cdn_distribution(self, environment: Environment) -> str | None:
        if environment is Environment.LOCAL:
            return None
        return self.cloudfront_distributions.get(environment) or None


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from exc


def load_site_config() -> SiteConfig:
    root_urls = {Environment.LOCAL: os.getenv("SITE_ROOT_URL_LOCAL", "http://localhost:8000")}
    s3_buckets: dict[Environment, str] = {}
    distributions: dict[Environment, str] = {}
    for environment in (Environment.STAGING, Environment.PRODUCTION):
        suffix = environment.value.upper()
        root_urls[environment] = os.getenv(f"SITE_ROOT_URL_{suffix}", "")
        bucket = os.getenv(f"SITE_S3_BUCKET_{suffix}")
        if bucket:
            s3_buckets[environment] = bucket
        distribution = os.getenv(f"SITE_CLOUDFRONT_DISTRIBUTION_{suffix}")
        if distribution:
            distributions[environment] = distribution

    upload_concurrency = _env_number("SITE_UPLOAD_CONCURRENCY", "1", int)
    if upload_concurrency < 1:
        raise ConfigError("SITE_UPLOAD_CONCURRENCY must be at least 1")

    return SiteConfig(
        root_urls=root_urls,
        s3_buckets=s3_buckets,
        cloudfront_distributions=distributions,
        content_directory=Path(os.getenv("SITE_CONTENT_DIR", "content")),
        manifest_directory=Path(os.getenv("SITE_MANIFEST_DIR", ".")),
        external_pages_file=_env_path("SITE_EXTERNAL_PAGES"),
        template_path=_env_path("SITE_TEMPLATE"),
        aws_region=os.getenv("SITE_AWS_REGION", "us-west-1"),
        fetch_timeout_s=_env_number("SITE_FETCH_TIMEOUT_S", "30", float),
        aws_timeout_s=_env_number("SITE_AWS_TIMEOUT_S", "60", float),
        upload_concurrency=upload_concurrency,
    )


__all__ = ["SiteConfig", "load_site_config"]
