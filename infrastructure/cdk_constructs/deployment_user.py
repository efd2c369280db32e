"""IAM user used by the CI pipeline to publish site content."""

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

CONTENT_ACTIONS = [
  "s3:PutObject",
  "s3:PutObjectAcl",
  "s3:GetObject",
  "s3:DeleteObject",
  "s3:ListBucket",
]


class DeploymentUser(Construct):
  """IAM user limited to one bucket and one distribution.

  The user can upload, read, list and delete site objects and invalidate the
  distribution's cache. Access keys are created out-of-band and stored as CI
  secrets.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    distribution: cloudfront.IDistribution,
    domain_name: str,
  ) -> None:
    super().__init__(scope, id)

    self.user = iam.User(
      self,
      "DeploymentUser",
      user_name=f"{domain_name}-deployment-user",
    )

    self.policy = iam.Policy(
      self,
      "DeploymentPolicy",
      statements=[
        iam.PolicyStatement(
          effect=iam.Effect.ALLOW,
          actions=CONTENT_ACTIONS,
          resources=[bucket.bucket_arn, bucket.arn_for_objects("*")],
        ),
        iam.PolicyStatement(
          effect=iam.Effect.ALLOW,
          actions=["cloudfront:CreateInvalidation"],
          resources=[distribution.distribution_arn],
        ),
      ],
    )

    self.user.attach_inline_policy(self.policy)
