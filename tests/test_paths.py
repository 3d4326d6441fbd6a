from pathlib import Path

from sitedeploy.core.paths import default_upload_key, map_destination


def test_map_destination_strips_parent_and_replaces_extension():
    assert map_destination("parent/child/file.ext", "xyz") == Path("child/file.xyz")


def test_map_destination_keeps_extension_without_new_one():
    assert map_destination(Path("content/img/logo.png")) == Path("img/logo.png")


def test_map_destination_without_parent_only_rewrites_extension():
    assert map_destination("index.md") == Path("index.md")
    assert map_destination("index.md", "html") == Path("index.html")


def test_map_destination_is_always_relative():
    result = map_destination(Path("/content/page.md"), "html")
    assert not result.is_absolute()
    assert result == Path("content/page.html")


def test_default_upload_key_replaces_spaces():
    assert default_upload_key(Path("/tmp/My File.png")) == "uploads/My_File.png"
    assert default_upload_key("a  b\tc.txt") == "uploads/a__bc.txt"
