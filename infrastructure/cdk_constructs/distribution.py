"""CloudFront distribution for static website."""

from aws_cdk import Duration
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct


class CloudFrontDistribution(Construct):
  """CloudFront distribution reading a private S3 bucket via origin access control."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    certificate: acm.ICertificate,
    response_headers_policy: cloudfront.IResponseHeadersPolicy,
    domain_name: str,
  ) -> None:
    super().__init__(scope, id)

    self.origin_access_control = cloudfront.S3OriginAccessControl(
      self,
      "OriginAccessControl",
      description=f"OAC for {domain_name}",
    )

    # Client-side routing: unknown paths fall back to the index page
    error_responses = [
      cloudfront.ErrorResponse(
        http_status=status,
        response_http_status=404,
        response_page_path="/index.html",
        ttl=Duration.minutes(5),
      )
      for status in (404, 403)
    ]

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=cloudfront.BehaviorOptions(
        origin=origins.S3BucketOrigin.with_origin_access_control(
          bucket,
          origin_access_control=self.origin_access_control,
        ),
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD_OPTIONS,
        compress=True,
        cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
        response_headers_policy=response_headers_policy,
      ),
      domain_names=[domain_name, f"www.{domain_name}"],
      certificate=certificate,
      price_class=cloudfront.PriceClass.PRICE_CLASS_100,
      default_root_object="index.html",
      error_responses=error_responses,
      enable_logging=True,
      log_bucket=bucket,
      log_file_prefix="cloudfront-logs/",
      log_includes_cookies=False,
      minimum_protocol_version=cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021,
      comment=f"CloudFront distribution for {domain_name}",
    )
