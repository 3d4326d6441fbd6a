from __future__ import annotations

import http.client
import logging
import urllib.request
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Mapping, Protocol

from sitedeploy.core.errors import FetchError
from sitedeploy.core.pages import LocalPage, PageSource, RemotePage

logger = logging.getLogger(__name__)

USER_AGENT = "sitedeploy/1.0"


@dataclass(frozen=True)
class ResolvedPage:
    content: str
    origin_modified: datetime


class PageFetcher(Protocol):
    def get(self, url: str, timeout_s: float) -> bytes: ...

    def head(self, url: str, timeout_s: float) -> Mapping[str, str]: ...


class UrllibPageFetcher:
    def get(self, url: str, timeout_s: float) -> bytes:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            return resp.read()

    def head(self, url: str, timeout_s: float) -> Mapping[str, str]:
        req = urllib.request.Request(
            url, headers={"User-Agent": USER_AGENT}, method="HEAD"
        )
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            return {key.lower(): value for key, value in resp.headers.items()}


def parse_http_date(headers: Mapping[str, str]) -> datetime:
    """Timestamp from a `Date` header, or the current time if it is unusable."""
    value = None
    for key, header in headers.items():
        if key.lower() == "date":
            value = header.strip()
            break
    if value is None:
        logger.warning("headers did not contain 'date'")
        return datetime.now(timezone.utc)

    logger.debug("date: %s", value)
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError) as exc:
        logger.warning("could not parse date '%s': %s", value, exc)
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class PageSourceResolver:
    """Retrieve external page content together with its origin modified time."""

    def __init__(self, fetcher: PageFetcher | None = None, timeout_s: float = 30.0):
        self.fetcher = fetcher or UrllibPageFetcher()
        self.timeout_s = timeout_s

    def resolve(self, source: PageSource) -> ResolvedPage:
        if isinstance(source, RemotePage):
            return self._resolve_remote(source.url)
        if isinstance(source, LocalPage):
            return self._resolve_local(source.path)
        raise TypeError(f"unknown page source: {source!r}")

    def _resolve_remote(self, url: str) -> ResolvedPage:
        logger.info("fetching '%s'", url)
        try:
            body = self.fetcher.get(url, self.timeout_s)
            headers = self.fetcher.head(url, self.timeout_s)
        except (OSError, ValueError, http.client.HTTPException) as exc:
            raise FetchError(f"could not fetch '{url}': {exc}") from exc
        return ResolvedPage(
            content=_decode(body, url), origin_modified=parse_http_date(headers)
        )

    def _resolve_local(self, path: Path) -> ResolvedPage:
        try:
            origin_modified = datetime.fromtimestamp(
                path.stat().st_mtime, tz=timezone.utc
            )
            body = path.read_bytes()
        except OSError as exc:
            raise FetchError(f"could not read '{path}': {exc}") from exc
        return ResolvedPage(content=_decode(body, str(path)), origin_modified=origin_modified)


def _decode(body: bytes, origin: str) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FetchError(f"'{origin}' is not valid UTF-8: {exc}") from exc


__all__ = [
    "PageFetcher",
    "PageSourceResolver",
    "ResolvedPage",
    "UrllibPageFetcher",
    "parse_http_date",
]
