"""Main composite construct for complete static website infrastructure."""

from aws_cdk import RemovalPolicy
from constructs import Construct

from .certificate import DnsValidatedCertificate
from .deployment_user import DeploymentUser
from .distribution import CloudFrontDistribution
from .dns import DnsRecords
from .security_headers import SecurityHeadersPolicy
from .storage import StorageBucket


class StaticSiteConstruct(Construct):
  """Complete static website infrastructure.

  Creates:
  - Private S3 bucket for static content
  - Route 53 hosted zone (or a reference to an existing one)
  - ACM certificate for the apex and www names (DNS validated)
  - Security headers response policy
  - CloudFront distribution reading the bucket via origin access control
  - Route 53 alias records pointing at the distribution
  - IAM deployment user for the CI pipeline
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_name: str,
    hosted_zone_id: str | None = None,
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
  ) -> None:
    super().__init__(scope, id)

    self.domain_name = domain_name

    self.storage = StorageBucket(
      self,
      "Storage",
      domain_name=domain_name,
      removal_policy=removal_policy,
    )

    # DNS Hosted Zone (create or import)
    self.dns = DnsRecords(
      self,
      "Dns",
      domain_name=domain_name,
      existing_hosted_zone_id=hosted_zone_id,
    )

    self.certificate = DnsValidatedCertificate(
      self,
      "Certificate",
      domain_name=domain_name,
      hosted_zone=self.dns.hosted_zone,
    )

    self.security_headers = SecurityHeadersPolicy(self, "SecurityHeaders")

    self.distribution = CloudFrontDistribution(
      self,
      "Distribution",
      bucket=self.storage.bucket,
      certificate=self.certificate.certificate,
      response_headers_policy=self.security_headers.policy,
      domain_name=domain_name,
    )

    self.storage.allow_distribution_read(self.distribution.distribution)

    # DNS Records pointing to CloudFront
    self.dns.create_cloudfront_records(self.distribution.distribution)

    self.deployment_user = DeploymentUser(
      self,
      "Deployment",
      bucket=self.storage.bucket,
      distribution=self.distribution.distribution,
      domain_name=domain_name,
    )
