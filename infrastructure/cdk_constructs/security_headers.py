"""CloudFront response headers policy with security headers."""

from aws_cdk import Duration
from aws_cdk import aws_cloudfront as cloudfront
from constructs import Construct

CUSTOM_HEADERS = {
  "X-Content-Type-Options": "nosniff",
  "X-Frame-Options": "DENY",
  "X-XSS-Protection": "1; mode=block",
  "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


class SecurityHeadersPolicy(Construct):
  """Response headers policy attached to the distribution's default behavior."""

  def __init__(self, scope: Construct, id: str) -> None:
    super().__init__(scope, id)

    self.policy = cloudfront.ResponseHeadersPolicy(
      self,
      "SecurityHeadersPolicy",
      comment="Security headers for static website",
      security_headers_behavior=cloudfront.ResponseSecurityHeadersBehavior(
        strict_transport_security=cloudfront.ResponseHeadersStrictTransportSecurity(
          access_control_max_age=Duration.days(365),
          include_subdomains=True,
          preload=True,
          override=True,
        ),
        content_type_options=cloudfront.ResponseHeadersContentTypeOptions(
          override=True,
        ),
        frame_options=cloudfront.ResponseHeadersFrameOptions(
          frame_option=cloudfront.HeadersFrameOption.DENY,
          override=True,
        ),
        referrer_policy=cloudfront.ResponseHeadersReferrerPolicy(
          referrer_policy=cloudfront.HeadersReferrerPolicy.STRICT_ORIGIN_WHEN_CROSS_ORIGIN,
          override=True,
        ),
      ),
      custom_headers_behavior=cloudfront.ResponseCustomHeadersBehavior(
        custom_headers=[
          cloudfront.ResponseCustomHeader(header=header, value=value, override=True)
          for header, value in CUSTOM_HEADERS.items()
        ],
      ),
    )
