"""Route 53 DNS constructs."""

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_route53 as route53
from aws_cdk import aws_route53_targets as targets
from constructs import Construct


class DnsRecords(Construct):
  """Route 53 hosted zone and the alias records for the site."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_name: str,
    existing_hosted_zone_id: str | None = None,
  ) -> None:
    super().__init__(scope, id)

    self.domain_name = domain_name
    self.created_zone = not existing_hosted_zone_id

    self.hosted_zone: route53.IHostedZone
    if existing_hosted_zone_id:
      # Zone name is needed to qualify the record names
      self.hosted_zone = route53.HostedZone.from_hosted_zone_attributes(
        self,
        "HostedZone",
        hosted_zone_id=existing_hosted_zone_id,
        zone_name=domain_name,
      )
    else:
      self.hosted_zone = route53.HostedZone(
        self,
        "HostedZone",
        zone_name=domain_name,
      )

  @property
  def name_servers(self) -> list[str] | None:
    """Name servers of a newly created zone; None for a referenced zone."""
    if not self.created_zone:
      return None
    return self.hosted_zone.hosted_zone_name_servers

  def create_cloudfront_records(self, distribution: cloudfront.IDistribution) -> None:
    """Create A and AAAA records for the apex and www names.

    The distribution has IPv6 enabled, so AAAA aliases let IPv6 clients
    reach it directly.
    """
    target = route53.RecordTarget.from_alias(targets.CloudFrontTarget(distribution))
    www_name = f"www.{self.domain_name}"

    route53.ARecord(
      self,
      "ARecord",
      zone=self.hosted_zone,
      record_name=self.domain_name,
      target=target,
    )

    route53.AaaaRecord(
      self,
      "AaaaRecord",
      zone=self.hosted_zone,
      record_name=self.domain_name,
      target=target,
    )

    route53.ARecord(
      self,
      "WwwARecord",
      zone=self.hosted_zone,
      record_name=www_name,
      target=target,
    )

    route53.AaaaRecord(
      self,
      "WwwAaaaRecord",
      zone=self.hosted_zone,
      record_name=www_name,
      target=target,
    )
