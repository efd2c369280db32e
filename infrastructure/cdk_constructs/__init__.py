"""CDK constructs for static website infrastructure."""

from .certificate import DnsValidatedCertificate
from .deployment_user import DeploymentUser
from .distribution import CloudFrontDistribution
from .dns import DnsRecords
from .security_headers import SecurityHeadersPolicy
from .static_site import StaticSiteConstruct
from .storage import StorageBucket

__all__ = [
  "CloudFrontDistribution",
  "DeploymentUser",
  "DnsRecords",
  "DnsValidatedCertificate",
  "SecurityHeadersPolicy",
  "StaticSiteConstruct",
  "StorageBucket",
]
