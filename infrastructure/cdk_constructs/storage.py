"""Private S3 bucket holding the static website content."""

from aws_cdk import Duration, RemovalPolicy, Stack
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct


class StorageBucket(Construct):
  """S3 bucket served only through CloudFront.

  Public access is fully blocked; old object versions expire after 30 days
  and server access logs land in the bucket's own ``access-logs/`` prefix.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_name: str,
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = s3.Bucket(
      self,
      "WebsiteBucket",
      bucket_name=f"{domain_name}-website",
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      versioned=True,
      lifecycle_rules=[
        s3.LifecycleRule(
          id="DeleteOldVersions",
          enabled=True,
          noncurrent_version_expiration=Duration.days(30),
        )
      ],
      server_access_logs_prefix="access-logs/",
      removal_policy=removal_policy,
      auto_delete_objects=removal_policy == RemovalPolicy.DESTROY,
    )

  def allow_distribution_read(self, distribution: cloudfront.IDistribution) -> None:
    """Let exactly this distribution read objects through its origin access control."""
    account = Stack.of(self).account
    self.bucket.add_to_resource_policy(
      iam.PolicyStatement(
        sid="AllowCloudFrontServicePrincipal",
        effect=iam.Effect.ALLOW,
        principals=[iam.ServicePrincipal("cloudfront.amazonaws.com")],
        actions=["s3:GetObject"],
        resources=[self.bucket.arn_for_objects("*")],
        conditions={
          "StringEquals": {
            "AWS:SourceArn": (
              f"arn:aws:cloudfront::{account}:distribution/"
              f"{distribution.distribution_id}"
            ),
          }
        },
      )
    )
