from sitedeploy.deploy.pipeline import (
    DEFAULT_CONTENT_TYPE,
    DeployPipeline,
    guess_content_type,
    invalidation_paths,
)
from sitedeploy.deploy.revision import GitRevisionProvider, RevisionProvider
from sitedeploy.deploy.storage import Cdn, CloudFrontCdn, ObjectStore, S3ObjectStore

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "DeployPipeline",
    "guess_content_type",
    "invalidation_paths",
    "GitRevisionProvider",
    "RevisionProvider",
    "Cdn",
    "CloudFrontCdn",
    "ObjectStore",
    "S3ObjectStore",
]
