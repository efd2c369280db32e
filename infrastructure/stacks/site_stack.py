"""CDK stack for the static website."""

from typing import Any

import aws_cdk as cdk
from constructs import Construct

from infrastructure.cdk_constructs import StaticSiteConstruct
from infrastructure.config import SiteConfig


class StaticSiteStack(cdk.Stack):
  """Stack for the static website and its deployment user."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    site_config: SiteConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.site = StaticSiteConstruct(
      self,
      "Site",
      domain_name=site_config.domain_name,
      hosted_zone_id=site_config.hosted_zone_id,
    )

    cdk.Tags.of(self).add("Project", "static-site")
    cdk.Tags.of(self).add("Domain", site_config.domain_name)

    # Outputs live on the stack so their keys stay stable for the scripts
    bucket = self.site.storage.bucket
    distribution = self.site.distribution.distribution

    cdk.CfnOutput(
      self,
      "WebsiteBucketName",
      value=bucket.bucket_name,
      description="Name of the S3 bucket for website content",
    )
    cdk.CfnOutput(
      self,
      "CloudFrontDistributionId",
      value=distribution.distribution_id,
      description="CloudFront Distribution ID",
    )
    cdk.CfnOutput(
      self,
      "CloudFrontDistributionDomainName",
      value=distribution.distribution_domain_name,
      description="CloudFront Distribution Domain Name",
    )
    cdk.CfnOutput(
      self,
      "DeploymentUserName",
      value=self.site.deployment_user.user.user_name,
      description="Name of the deployment user for GitHub Actions",
    )
    cdk.CfnOutput(
      self,
      "WebsiteUrl",
      value=site_config.website_url,
      description="Website URL",
    )

    name_servers = self.site.dns.name_servers
    if name_servers is not None:
      cdk.CfnOutput(
        self,
        "NameServers",
        value=cdk.Fn.join(", ", name_servers),
        description="Name servers for the hosted zone (configure these in domain registrar)",
      )
