import pytest

from sitedeploy.core.errors import ConfigError
from sitedeploy.site_repo import SiteRepo, collect_files, reset_directory


def test_collect_files_lists_directory_contents_before_returning(content_tree):
    files = [p.relative_to(content_tree).as_posix() for p in collect_files(content_tree)]
    # sorted per directory, depth-first
    assert files == ["blog/first.md", "blog/logo.png", "index.md", "style.css"]


def test_collect_files_rejects_missing_directory(tmp_path):
    with pytest.raises(ConfigError):
        collect_files(tmp_path / "missing")


def test_collect_files_rejects_plain_file(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigError):
        collect_files(target)


def test_reset_directory_is_idempotent(tmp_path):
    build = tmp_path / "site"
    (build / "nested").mkdir(parents=True)
    (build / "nested" / "stale.html").write_text("stale", encoding="utf-8")

    reset_directory(build)
    assert build.is_dir() and not any(build.iterdir())
    reset_directory(build)
    assert build.is_dir() and not any(build.iterdir())


def test_content_destination_source_starts_at_content_dir_name(content_tree, tmp_path):
    repo = SiteRepo(content_tree, tmp_path / "site")
    source = repo.content_destination_source(content_tree / "blog" / "first.md")
    assert source.as_posix() == "content/blog/first.md"
    assert repo.built_path(source) == tmp_path / "site" / "content/blog/first.md"
