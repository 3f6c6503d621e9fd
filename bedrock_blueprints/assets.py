from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from aws_cdk import aws_s3 as s3, aws_s3_deployment as s3deploy
from constructs import Construct

from .action_group import AgentActionGroup

logger = logging.getLogger(__name__)

ASSET_BUCKET_ID = "AgentBlueprintAssets"


@dataclass(frozen=True)
class SchemaLocation:
    bucket_name: str
    object_key: str
    object_arn: str
    deployment: Any = None


def actions_require_artifacts(action_groups: Iterable[AgentActionGroup] | None) -> bool:
    """True if any action group ships its schema as a file to upload."""
    return any(action.requires_artifacts for action in (action_groups or []))


def setup_asset_bucket(scope: Construct) -> s3.Bucket:
    # Encryption, public access block and TLS-only are fixed for schema assets.
    bucket = s3.Bucket(
        scope,
        ASSET_BUCKET_ID,
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        enforce_ssl=True,
    )
    logger.info("Provisioned asset bucket %s for action group schemas", bucket.node.path)
    return bucket


def write_files_to_dir(directory: str | Path, files: Mapping[str, bytes]) -> list[Path]:
    root = Path(directory).resolve()
    written: list[Path] = []
    for name, body in files.items():
        target = (root / name).resolve()
        if root not in target.parents:
            raise ValueError(f"asset file name escapes staging dir: {name!r}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(bytes(body))
        written.append(target)
    return written


class ArtifactPublisher:
    """Stages named buffers locally and deploys them into the asset bucket."""

    def __init__(self, scope: Construct, bucket: s3.IBucket) -> None:
        self._scope = scope
        self._bucket = bucket

    @property
    def bucket(self) -> s3.IBucket:
        return self._bucket

    def publish(self, files: Mapping[str, bytes], prefix: str) -> SchemaLocation:
        if not files:
            raise ValueError("publish requires at least one file")
        prefix = prefix.strip("/")
        first_name = next(iter(files))

        # The asset is staged into the cloud assembly when the deployment is
        # declared, so the staging dir can go as soon as the construct exists.
        with tempfile.TemporaryDirectory(prefix="cdk-") as staging_dir:
            write_files_to_dir(staging_dir, files)
            deployment = s3deploy.BucketDeployment(
                self._scope,
                f"AssetDeployment-{prefix}",
                sources=[s3deploy.Source.asset(staging_dir)],
                destination_bucket=self._bucket,
                destination_key_prefix=prefix,
            )

        object_key = f"{prefix}/{first_name}" if prefix else first_name
        deployed_bucket = deployment.deployed_bucket
        logger.debug("Published %d file(s) to key prefix %r", len(files), prefix)
        return SchemaLocation(
            bucket_name=deployed_bucket.bucket_name,
            object_key=object_key,
            object_arn=deployed_bucket.arn_for_objects(object_key),
            deployment=deployment,
        )
