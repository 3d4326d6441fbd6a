from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Sequence

from sitedeploy.build.manifest import SiteManifest
from sitedeploy.build.pipeline import BuildPipeline
from sitedeploy.build.render import MarkdownRenderer, Renderer
from sitedeploy.build.sources import PageSourceResolver
from sitedeploy.core.config import SiteConfig, load_site_config
from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import SiteDeployError
from sitedeploy.core.pages import ExternalPage, load_external_pages
from sitedeploy.core.paths import default_upload_key
from sitedeploy.deploy.pipeline import DeployPipeline
from sitedeploy.deploy.revision import RevisionProvider
from sitedeploy.deploy.storage import Cdn, ObjectStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xtask", description="Build and deploy the static site."
    )
    parser.add_argument(
        "-e",
        "--environment",
        choices=[e.value for e in Environment],
        default=Environment.LOCAL.value,
        help="The deployment environment (default: local)",
    )
    parser.add_argument(
        "-b",
        "--build-directory",
        default="site",
        help="The local build directory (default: site)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("deploy", help="Build the site and deploy it")
    subparsers.add_parser(
        "build", help="Build the site into the build directory"
    )
    subparsers.add_parser("clean", help="Clean the local build directory")
    p_upload = subparsers.add_parser("upload", help="Upload one asset")
    p_upload.add_argument("path", type=Path, help="Local path to the asset")
    p_upload.add_argument(
        "key",
        nargs="?",
        help="Object key; defaults to uploads/<filename>",
    )
    return parser


def run(
    config: SiteConfig,
    external_pages: Iterable[ExternalPage] = (),
    renderer: Renderer | None = None,
    argv: Sequence[str] | None = None,
    *,
    store: ObjectStore | None = None,
    cdn: Cdn | None = None,
    revisions: RevisionProvider | None = None,
    resolver: PageSourceResolver | None = None,
) -> int:
    """Parse `argv` and run one command. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    environment = Environment.parse(args.environment)

    try:
        manifest = SiteManifest.load_or_create(
            environment, args.build_directory, config.manifest_directory
        )
        if args.command == "clean":
            manifest.clean()
        elif args.command == "upload":
            key = args.key or default_upload_key(args.path)
            DeployPipeline(
                config, manifest, store=store, cdn=cdn, revisions=revisions
            ).upload(args.path, key)
        elif args.command == "build":
            BuildPipeline(
                config, manifest, renderer or MarkdownRenderer(config), resolver=resolver
            ).build(external_pages)
        elif args.command == "deploy":
            pipeline = DeployPipeline(
                config,
                manifest,
                store=store,
                cdn=cdn,
                revisions=revisions,
                resolver=resolver,
            )
            # Reject unconfigured environments before the renderer loads templates.
            pipeline.require_bucket()
            pipeline.require_distribution()
            pipeline.renderer = renderer or MarkdownRenderer(config)
            pipeline.deploy(external_pages)
            logger.info("deployed %s file(s)", len(manifest.files))
    except SiteDeployError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = load_site_config()
        external_pages = (
            load_external_pages(config.external_pages_file)
            if config.external_pages_file
            else []
        )
    except SiteDeployError as exc:
        logger.error("invalid configuration: %s", exc)
        return 1
    return run(config, external_pages, argv=argv)


__all__ = ["build_parser", "run", "main"]
