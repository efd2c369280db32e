#!/usr/bin/env python3
"""Publish a built static site to the website bucket and invalidate CloudFront.

Uses only the permissions granted to the stack's deployment user:
object put/get/delete/list on the bucket and CreateInvalidation on the
distribution. That user cannot read stack outputs, so CI passes --bucket
and --distribution-id explicitly; operators may omit them.

Usage:
  uv run python scripts/deploy_site.py dist/
  uv run python scripts/deploy_site.py dist/ --prune --bucket B --distribution-id E123
"""

import argparse
import logging
import mimetypes
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import boto3  # type: ignore[import-not-found]
from botocore.exceptions import BotoCoreError, ClientError

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from stack_outputs import (  # noqa: E402
  DEFAULT_REGION,
  DEFAULT_STACK_NAME,
  get_stack_outputs,
)

logger = logging.getLogger(__name__)

# Log prefixes written by S3 and CloudFront; never pruned
RESERVED_PREFIXES = ("access-logs/", "cloudfront-logs/")

HTML_CACHE_CONTROL = "no-cache"
ASSET_CACHE_CONTROL = "public, max-age=31536000, immutable"

DELETE_BATCH_SIZE = 1000


@dataclass
class DeployResult:
  """Summary of a deployment."""

  uploaded: list[str] = field(default_factory=list)
  deleted: list[str] = field(default_factory=list)
  invalidation_id: str | None = None


def content_type_for(path: Path) -> str:
  content_type, _ = mimetypes.guess_type(path.name)
  return content_type or "application/octet-stream"


def cache_control_for(key: str) -> str:
  """HTML revalidates on every request; other assets are cached for a year."""
  if key.endswith((".html", ".htm")):
    return HTML_CACHE_CONTROL
  return ASSET_CACHE_CONTROL


def collect_site_files(build_dir: Path) -> dict[str, Path]:
  """Map object keys to local files under the build directory."""
  if not build_dir.is_dir():
    raise FileNotFoundError(f"Build directory not found: {build_dir}")

  return {
    path.relative_to(build_dir).as_posix(): path
    for path in sorted(build_dir.rglob("*"))
    if path.is_file()
  }


def list_site_keys(s3_client: Any, bucket: str) -> set[str]:
  """List object keys in the bucket, excluding log prefixes."""
  keys: set[str] = set()
  kwargs: dict[str, Any] = {"Bucket": bucket}

  while True:
    response = s3_client.list_objects_v2(**kwargs)
    for obj in response.get("Contents", []):
      if not obj["Key"].startswith(RESERVED_PREFIXES):
        keys.add(obj["Key"])

    if not response.get("IsTruncated"):
      return keys
    kwargs["ContinuationToken"] = response["NextContinuationToken"]


def delete_keys(s3_client: Any, bucket: str, keys: list[str]) -> None:
  for start in range(0, len(keys), DELETE_BATCH_SIZE):
    batch = keys[start : start + DELETE_BATCH_SIZE]
    s3_client.delete_objects(
      Bucket=bucket,
      Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
    )


def create_invalidation(
  cloudfront_client: Any,
  distribution_id: str,
  paths: list[str] | None = None,
) -> str:
  """Invalidate cached paths and return the invalidation ID."""
  paths = paths or ["/*"]
  response = cloudfront_client.create_invalidation(
    DistributionId=distribution_id,
    InvalidationBatch={
      "Paths": {"Quantity": len(paths), "Items": paths},
      "CallerReference": str(time.time()),
    },
  )
  return str(response["Invalidation"]["Id"])


def deploy_site(
  build_dir: Path,
  bucket: str,
  distribution_id: str,
  *,
  s3_client: Any,
  cloudfront_client: Any,
  prune: bool = False,
) -> DeployResult:
  """Upload a build directory, optionally prune stale objects, and invalidate."""
  files = collect_site_files(build_dir)
  if not files:
    raise ValueError(f"Build directory is empty: {build_dir}")

  result = DeployResult()

  for key, path in files.items():
    s3_client.put_object(
      Bucket=bucket,
      Key=key,
      Body=path.read_bytes(),
      ContentType=content_type_for(path),
      CacheControl=cache_control_for(key),
    )
    logger.info("Uploaded s3://%s/%s", bucket, key)
    result.uploaded.append(key)

  if prune:
    stale = sorted(list_site_keys(s3_client, bucket) - files.keys())
    if stale:
      delete_keys(s3_client, bucket, stale)
      logger.info("Deleted %d stale objects", len(stale))
    result.deleted = stale

  result.invalidation_id = create_invalidation(cloudfront_client, distribution_id)
  logger.info("Created invalidation %s", result.invalidation_id)

  return result


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(
    description="Upload a built static site and invalidate the CloudFront cache"
  )
  parser.add_argument("build_dir", type=Path, help="Directory with the built site")
  parser.add_argument("--bucket", help="Website bucket (default: from stack outputs)")
  parser.add_argument(
    "--distribution-id",
    help="CloudFront distribution ID (default: from stack outputs)",
  )
  parser.add_argument(
    "--stack-name",
    default=DEFAULT_STACK_NAME,
    help=f"CDK stack name (default: {DEFAULT_STACK_NAME})",
  )
  parser.add_argument(
    "--region",
    default=DEFAULT_REGION,
    help=f"AWS region (default: {DEFAULT_REGION})",
  )
  parser.add_argument(
    "--prune",
    action="store_true",
    help="Delete objects that are not part of the build",
  )

  args = parser.parse_args()
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

  try:
    bucket = args.bucket
    distribution_id = args.distribution_id
    if not bucket or not distribution_id:
      outputs = get_stack_outputs(args.stack_name, args.region)
      bucket = bucket or outputs["WebsiteBucketName"]
      distribution_id = distribution_id or outputs["CloudFrontDistributionId"]

    result = deploy_site(
      args.build_dir,
      bucket,
      distribution_id,
      s3_client=boto3.client("s3", region_name=args.region),
      cloudfront_client=boto3.client("cloudfront"),
      prune=args.prune,
    )
  except (BotoCoreError, ClientError, LookupError, OSError, ValueError) as e:
    print(f"Deployment failed: {e}", file=sys.stderr)
    sys.exit(1)

  print(
    f"Deployed {len(result.uploaded)} files, deleted {len(result.deleted)}, "
    f"invalidation {result.invalidation_id}"
  )


if __name__ == "__main__":
  main()
