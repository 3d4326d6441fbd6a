from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from sitedeploy.build.manifest import SiteManifest, manifest_path
from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import ManifestError


def _manifest(tmp_path, environment=Environment.STAGING) -> SiteManifest:
    return SiteManifest.load_or_create(
        environment, tmp_path / "site", manifest_dir=tmp_path / "manifests"
    )


def test_load_or_create_returns_empty_manifest_when_missing(tmp_path):
    manifest = _manifest(tmp_path)
    assert manifest.environment is Environment.STAGING
    assert manifest.build_directory == tmp_path / "site"
    assert manifest.files == {}


def test_save_and_reload_round_trip(tmp_path):
    manifest = _manifest(tmp_path)
    modified = datetime(2024, 3, 1, 8, 30, 15, 123456, tzinfo=timezone(timedelta(hours=-7)))
    manifest.record(
        origin="content/index.md",
        origin_modified=modified,
        built_filepath=tmp_path / "site" / "index.html",
        destination=Path("index.html"),
    )
    manifest.record(
        origin="https://example.com/devlog.md",
        origin_modified=datetime(2024, 1, 1, tzinfo=timezone.utc),
        built_filepath=tmp_path / "site" / "devlog" / "index.html",
        destination=Path("devlog/index.html"),
    )
    saved = manifest.save()
    assert saved == manifest_path(tmp_path / "manifests", Environment.STAGING)
    assert saved.name == "staging.yaml"

    reloaded = _manifest(tmp_path)
    assert reloaded == manifest
    assert reloaded.files["content/index.md"].origin_modified == modified


def test_record_overwrites_same_origin(tmp_path):
    manifest = _manifest(tmp_path)
    now = datetime.now(timezone.utc)
    manifest.record("a.md", now, tmp_path / "site/a.html", Path("a.html"))
    manifest.record("a.md", now, tmp_path / "site/b.html", Path("b.html"))
    assert list(manifest.files) == ["a.md"]
    assert manifest.files["a.md"].destination == Path("b.html")


def test_entries_iterate_in_origin_order(tmp_path):
    manifest = _manifest(tmp_path)
    now = datetime.now(timezone.utc)
    for origin in ["content/z.md", "content/a.md", "https://x/y"]:
        manifest.record(origin, now, tmp_path / "site" / "f", Path("f"))
    assert [e.origin for e in manifest.entries()] == [
        "content/a.md",
        "content/z.md",
        "https://x/y",
    ]


def test_clean_twice_leaves_everything_empty(tmp_path):
    manifest = _manifest(tmp_path)
    (tmp_path / "site" / "old").mkdir(parents=True)
    (tmp_path / "site" / "old" / "page.html").write_text("old", encoding="utf-8")
    manifest.record("x", datetime.now(timezone.utc), tmp_path / "site/x", Path("x"))

    for _ in range(2):
        manifest.clean()
        assert manifest.files == {}
        assert (tmp_path / "site").is_dir()
        assert list((tmp_path / "site").iterdir()) == []


def test_corrupt_manifest_is_fatal(tmp_path):
    path = manifest_path(tmp_path / "manifests", Environment.STAGING)
    path.parent.mkdir(parents=True)
    path.write_text("environment: [unterminated\n", encoding="utf-8")
    with pytest.raises(ManifestError):
        _manifest(tmp_path)


def test_manifest_with_missing_fields_is_fatal(tmp_path):
    path = manifest_path(tmp_path / "manifests", Environment.STAGING)
    path.parent.mkdir(parents=True)
    path.write_text("environment: staging\nfiles: {}\n", encoding="utf-8")
    with pytest.raises(ManifestError, match="malformed"):
        _manifest(tmp_path)


def test_persisted_build_directory_wins(tmp_path, caplog):
    manifest = _manifest(tmp_path)
    manifest.save()
    reloaded = SiteManifest.load_or_create(
        Environment.STAGING, tmp_path / "elsewhere", manifest_dir=tmp_path / "manifests"
    )
    assert reloaded.build_directory == tmp_path / "site"
    assert "ignoring" in caplog.text
