from __future__ import annotations

import logging
import threading
from typing import Any, Protocol, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from sitedeploy.core.errors import InvalidationError, UploadError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    def put(self, bucket: str, key: str, content_type: str, body: bytes) -> None: ...


class Cdn(Protocol):
    def invalidate(
        self, distribution_id: str, paths: Sequence[str], reference: str
    ) -> str | None: ...


def _client_config(timeout_s: float) -> Config:
    return Config(
        connect_timeout=timeout_s,
        read_timeout=timeout_s,
        retries={"total_max_attempts": 1},
    )


class _LazyClient:
    """One boto3 client per store, built on first use from a private session.

    The default boto3 session is not thread-safe, so each store owns a session
    and client creation happens under a lock.
    """

    def __init__(self, service: str, region: str, timeout_s: float):
        self.service = service
        self.region = region
        self.timeout_s = timeout_s
        self._client: Any = None
        self._lock = threading.Lock()

    def get(self) -> Any:
        with self._lock:
            if self._client is None:
                session = boto3.session.Session()
                self._client = session.client(
                    self.service,
                    region_name=self.region,
                    config=_client_config(self.timeout_s),
                )
            return self._client


class S3ObjectStore:
    """Upload objects with boto3 through a client owned by this store."""

    def __init__(self, region: str = "us-west-1", timeout_s: float = 60.0):
        self.region = region
        self.timeout_s = timeout_s
        self._client = _LazyClient("s3", region, timeout_s)

    @property
    def client(self) -> Any:
        return self._client.get()

    def put(self, bucket: str, key: str, content_type: str, body: bytes) -> None:
        try:
            self.client.put_object(
                Bucket=bucket, Key=key, ContentType=content_type, Body=body
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(f"s3 upload of '{bucket}/{key}' failed: {exc}") from exc


class CloudFrontCdn:
    def __init__(self, region: str = "us-west-1", timeout_s: float = 60.0):
        self.region = region
        self.timeout_s = timeout_s
        self._client = _LazyClient("cloudfront", region, timeout_s)

    @property
    def client(self) -> Any:
        return self._client.get()

    def invalidate(
        self, distribution_id: str, paths: Sequence[str], reference: str
    ) -> str | None:
        items = list(paths)
        try:
            response = self.client.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    "Paths": {"Quantity": len(items), "Items": items},
                    "CallerReference": reference,
                },
            )
        except (BotoCoreError, ClientError) as exc:
            raise InvalidationError(
                f"cloudfront invalidation of '{distribution_id}' failed: {exc}"
            ) from exc
        invalidation = response.get("Invalidation") or {}
        logger.info(
            "created invalidation: %s (%s)",
            invalidation.get("Id"),
            invalidation.get("Status"),
        )
        return invalidation.get("Id")


__all__ = ["ObjectStore", "Cdn", "S3ObjectStore", "CloudFrontCdn"]
