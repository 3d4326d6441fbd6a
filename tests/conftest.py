import os
import sys
from pathlib import Path

os.environ.setdefault("PYTEST_DISABLE_PLUGIN_AUTOLOAD", "1")

import pytest

# Ensure project root is importable
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sitedeploy.core import Environment, SiteConfig, UploadError  # noqa: E402


class FakeRenderer:
    """Wraps content in a marker so tests can see what was rendered and how."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.calls: list[tuple[str, Environment, str]] = []

    def render(self, content: str, environment: Environment, extra_classes: str) -> str:
        self.calls.append((content, environment, extra_classes))
        if self.fail_on is not None and self.fail_on in content:
            raise ValueError(f"cannot render {self.fail_on!r}")
        return f"<main class='{extra_classes}'>{content}</main>"


class RecordingStore:
    def __init__(self, fail_on_key: str | None = None):
        self.fail_on_key = fail_on_key
        self.puts: list[tuple[str, str, str, bytes]] = []

    def put(self, bucket: str, key: str, content_type: str, body: bytes) -> None:
        if key == self.fail_on_key:
            raise UploadError(f"s3 upload of '{bucket}/{key}' failed: boom")
        self.puts.append((bucket, key, content_type, body))


class RecordingCdn:
    def __init__(self):
        self.calls: list[tuple[str, list[str], str]] = []

    def invalidate(self, distribution_id, paths, reference):
        self.calls.append((distribution_id, list(paths), reference))
        return "I123"


class FixedRevision:
    def __init__(self, value: str | None = "abc123"):
        self.value = value

    def revision(self):
        return self.value


@pytest.fixture
def site_config(tmp_path) -> SiteConfig:
    return SiteConfig(
        root_urls={
            Environment.LOCAL: "http://localhost:8000",
            Environment.STAGING: "https://staging.example.com",
            Environment.PRODUCTION: "https://example.com",
        },
        s3_buckets={
            Environment.STAGING: "staging-bucket",
            Environment.PRODUCTION: "prod-bucket",
        },
        cloudfront_distributions={
            Environment.STAGING: "EDSTAGING",
            Environment.PRODUCTION: "EDPROD",
        },
        content_directory=tmp_path / "content",
        manifest_directory=tmp_path / "manifests",
    )


@pytest.fixture
def content_tree(tmp_path) -> Path:
    content = tmp_path / "content"
    (content / "blog").mkdir(parents=True)
    (content / "index.md").write_text("# Home", encoding="utf-8")
    (content / "blog" / "first.md").write_text("First post", encoding="utf-8")
    (content / "style.css").write_text("body { color: red; }", encoding="utf-8")
    (content / "blog" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return content


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def cdn() -> RecordingCdn:
    return RecordingCdn()
