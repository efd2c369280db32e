"""Tests for the StaticSiteStack and its constructs."""

import json
from typing import Any

import pytest
from aws_cdk import App, Environment, Stack
from aws_cdk.assertions import Match, Template

from infrastructure.cdk_constructs import SecurityHeadersPolicy
from infrastructure.config import SiteConfig
from infrastructure.stacks import StaticSiteStack

CACHING_OPTIMIZED_POLICY_ID = "658327ea-f89d-4fab-a63d-7e88639e58f6"


def _synth(domain_name: str = "example.com", hosted_zone_id: str | None = None) -> Template:
  app = App()
  stack = StaticSiteStack(
    app,
    "TestStack",
    site_config=SiteConfig(domain_name=domain_name, hosted_zone_id=hosted_zone_id),
    env=Environment(region="us-east-1"),
  )
  return Template.from_stack(stack)


def _only_logical_id(template: Template, resource_type: str) -> str:
  resources = template.find_resources(resource_type)
  assert len(resources) == 1
  return next(iter(resources))


def _statements(resource: dict[str, Any]) -> list[dict[str, Any]]:
  return resource["Properties"]["PolicyDocument"]["Statement"]


class TestStaticSiteStack:
  """Test the stack with a newly created hosted zone."""

  @pytest.fixture
  def template(self) -> Template:
    """Create a template with default options."""
    return _synth()

  def test_creates_private_versioned_bucket(self, template: Template) -> None:
    """Verify S3 bucket blocks public access and keeps versions."""
    template.has_resource_properties(
      "AWS::S3::Bucket",
      {
        "BucketName": "example.com-website",
        "PublicAccessBlockConfiguration": {
          "BlockPublicAcls": True,
          "BlockPublicPolicy": True,
          "IgnorePublicAcls": True,
          "RestrictPublicBuckets": True,
        },
        "VersioningConfiguration": {"Status": "Enabled"},
        "LoggingConfiguration": {"LogFilePrefix": "access-logs/"},
      },
    )

  def test_expires_old_versions(self, template: Template) -> None:
    """Verify noncurrent versions expire after 30 days."""
    template.has_resource_properties(
      "AWS::S3::Bucket",
      {
        "LifecycleConfiguration": {
          "Rules": Match.array_with(
            [
              Match.object_like(
                {
                  "Id": "DeleteOldVersions",
                  "Status": "Enabled",
                  "NoncurrentVersionExpiration": {"NoncurrentDays": 30},
                }
              )
            ]
          ),
        },
      },
    )

  def test_bucket_is_destroyed_with_stack(self, template: Template) -> None:
    """Verify the bucket and its objects are removed on teardown."""
    template.has_resource("AWS::S3::Bucket", {"DeletionPolicy": "Delete"})
    template.resource_count_is("Custom::S3AutoDeleteObjects", 1)

  def test_creates_origin_access_control(self, template: Template) -> None:
    """Verify the origin access control signs S3 requests."""
    template.has_resource_properties(
      "AWS::CloudFront::OriginAccessControl",
      {
        "OriginAccessControlConfig": {
          "Description": "OAC for example.com",
          "OriginAccessControlOriginType": "s3",
          "SigningBehavior": "always",
          "SigningProtocol": "sigv4",
        },
      },
    )

  def test_creates_certificate_with_dns_validation(self, template: Template) -> None:
    """Verify certificate covers apex and www and uses DNS validation."""
    template.has_resource_properties(
      "AWS::CertificateManager::Certificate",
      {
        "DomainName": "example.com",
        "SubjectAlternativeNames": ["www.example.com"],
        "ValidationMethod": "DNS",
      },
    )

  def test_creates_route53_hosted_zone(self, template: Template) -> None:
    """Verify a hosted zone is created when no zone ID is given."""
    template.resource_count_is("AWS::Route53::HostedZone", 1)
    template.has_resource_properties(
      "AWS::Route53::HostedZone",
      {"Name": "example.com."},
    )

  def test_creates_cloudfront_distribution(self, template: Template) -> None:
    """Verify CloudFront distribution settings."""
    template.has_resource_properties(
      "AWS::CloudFront::Distribution",
      {
        "DistributionConfig": {
          "Aliases": ["example.com", "www.example.com"],
          "Comment": "CloudFront distribution for example.com",
          "DefaultRootObject": "index.html",
          "PriceClass": "PriceClass_100",
          "ViewerCertificate": Match.object_like(
            {
              "MinimumProtocolVersion": "TLSv1.2_2021",
              "SslSupportMethod": "sni-only",
            }
          ),
          "DefaultCacheBehavior": Match.object_like(
            {
              "ViewerProtocolPolicy": "redirect-to-https",
              "AllowedMethods": ["GET", "HEAD", "OPTIONS"],
              "Compress": True,
              "CachePolicyId": CACHING_OPTIMIZED_POLICY_ID,
            }
          ),
          "Logging": Match.object_like(
            {
              "Prefix": "cloudfront-logs/",
              "IncludeCookies": False,
            }
          ),
        },
      },
    )

  def test_maps_403_and_404_to_index(self, template: Template) -> None:
    """Verify both error codes fall back to the index page with a 404."""
    template.has_resource_properties(
      "AWS::CloudFront::Distribution",
      {
        "DistributionConfig": {
          "CustomErrorResponses": [
            {
              "ErrorCode": 404,
              "ResponseCode": 404,
              "ResponsePagePath": "/index.html",
              "ErrorCachingMinTTL": 300,
            },
            {
              "ErrorCode": 403,
              "ResponseCode": 404,
              "ResponsePagePath": "/index.html",
              "ErrorCachingMinTTL": 300,
            },
          ],
        },
      },
    )

  def test_attaches_security_headers_policy(self, template: Template) -> None:
    """Verify the default behavior uses the security headers policy."""
    policy_id = _only_logical_id(template, "AWS::CloudFront::ResponseHeadersPolicy")
    template.has_resource_properties(
      "AWS::CloudFront::Distribution",
      {
        "DistributionConfig": {
          "DefaultCacheBehavior": Match.object_like(
            {"ResponseHeadersPolicyId": {"Ref": policy_id}}
          ),
        },
      },
    )

  def test_bucket_policy_scoped_to_own_distribution(self, template: Template) -> None:
    """Verify every SourceArn condition refers to this stack's distribution."""
    distribution_id = _only_logical_id(template, "AWS::CloudFront::Distribution")

    source_arns = [
      statement["Condition"]["StringEquals"]["AWS:SourceArn"]
      for policy in template.find_resources("AWS::S3::BucketPolicy").values()
      for statement in _statements(policy)
      if "AWS:SourceArn" in statement.get("Condition", {}).get("StringEquals", {})
    ]

    assert source_arns
    for source_arn in source_arns:
      assert {"Ref": distribution_id} in source_arn["Fn::Join"][1]

  def test_bucket_policy_allows_cloudfront_get(self, template: Template) -> None:
    """Verify the explicit CloudFront service principal grant."""
    template.has_resource_properties(
      "AWS::S3::BucketPolicy",
      {
        "PolicyDocument": {
          "Statement": Match.array_with(
            [
              Match.object_like(
                {
                  "Sid": "AllowCloudFrontServicePrincipal",
                  "Action": "s3:GetObject",
                  "Effect": "Allow",
                  "Principal": {"Service": "cloudfront.amazonaws.com"},
                }
              )
            ]
          ),
        },
      },
    )

  def test_dns_records_alias_same_distribution(self, template: Template) -> None:
    """Verify apex and www records both point at the distribution."""
    distribution_id = _only_logical_id(template, "AWS::CloudFront::Distribution")
    records = template.find_resources("AWS::Route53::RecordSet")

    alias_records = {
      (record["Properties"]["Name"], record["Properties"]["Type"]): record["Properties"][
        "AliasTarget"
      ]["DNSName"]
      for record in records.values()
      if "AliasTarget" in record["Properties"]
    }

    assert set(alias_records) == {
      ("example.com.", "A"),
      ("example.com.", "AAAA"),
      ("www.example.com.", "A"),
      ("www.example.com.", "AAAA"),
    }
    for dns_name in alias_records.values():
      assert dns_name == {"Fn::GetAtt": [distribution_id, "DomainName"]}

  def test_creates_deployment_user(self, template: Template) -> None:
    """Verify the CI deployment user."""
    template.has_resource_properties(
      "AWS::IAM::User",
      {"UserName": "example.com-deployment-user"},
    )

  def test_deployment_policy_scoped_to_site_resources(self, template: Template) -> None:
    """Verify the deployment policy names only this bucket and distribution."""
    bucket_id = _only_logical_id(template, "AWS::S3::Bucket")
    distribution_id = _only_logical_id(template, "AWS::CloudFront::Distribution")
    user_id = _only_logical_id(template, "AWS::IAM::User")

    policies = [
      policy
      for policy in template.find_resources("AWS::IAM::Policy").values()
      if {"Ref": user_id} in policy["Properties"].get("Users", [])
    ]
    assert len(policies) == 1
    statements = _statements(policies[0])
    assert len(statements) == 2

    s3_statement, cloudfront_statement = statements
    assert sorted(s3_statement["Action"]) == [
      "s3:DeleteObject",
      "s3:GetObject",
      "s3:ListBucket",
      "s3:PutObject",
      "s3:PutObjectAcl",
    ]
    assert s3_statement["Resource"] == [
      {"Fn::GetAtt": [bucket_id, "Arn"]},
      {"Fn::Join": ["", [{"Fn::GetAtt": [bucket_id, "Arn"]}, "/*"]]},
    ]

    assert cloudfront_statement["Action"] == "cloudfront:CreateInvalidation"
    assert f'{{"Ref": "{distribution_id}"}}' in json.dumps(cloudfront_statement["Resource"])

    for statement in statements:
      resources = statement["Resource"]
      resources = resources if isinstance(resources, list) else [resources]
      assert "*" not in resources

  def test_outputs(self, template: Template) -> None:
    """Verify the operator-facing outputs."""
    outputs = template.find_outputs("*")
    assert set(outputs) == {
      "WebsiteBucketName",
      "CloudFrontDistributionId",
      "CloudFrontDistributionDomainName",
      "DeploymentUserName",
      "WebsiteUrl",
      "NameServers",
    }
    template.has_output("WebsiteUrl", {"Value": "https://example.com"})

  def test_name_servers_output_joins_zone_name_servers(self, template: Template) -> None:
    """Verify name servers come from the created zone."""
    zone_id = _only_logical_id(template, "AWS::Route53::HostedZone")
    value = template.find_outputs("NameServers")["NameServers"]["Value"]
    assert "Fn::Join" in value
    assert f'"Fn::GetAtt": ["{zone_id}", "NameServers"]' in json.dumps(value)

  def test_tags_resources_with_domain(self, template: Template) -> None:
    """Verify stack tags reach the resources."""
    template.has_resource_properties(
      "AWS::S3::Bucket",
      {"Tags": Match.array_with([{"Key": "Domain", "Value": "example.com"}])},
    )


class TestStaticSiteWithExistingZone:
  """Test the stack when an existing hosted zone ID is supplied."""

  @pytest.fixture
  def template(self) -> Template:
    """Create a template referencing an existing zone."""
    return _synth(hosted_zone_id="Z0123456789ABCDEFGHIJ")

  def test_no_hosted_zone_created(self, template: Template) -> None:
    """Verify no hosted zone is declared."""
    template.resource_count_is("AWS::Route53::HostedZone", 0)

  def test_records_use_existing_zone(self, template: Template) -> None:
    """Verify alias records target the referenced zone."""
    records = template.find_resources("AWS::Route53::RecordSet")
    assert records
    for record in records.values():
      assert record["Properties"]["HostedZoneId"] == "Z0123456789ABCDEFGHIJ"

  def test_certificate_validates_against_existing_zone(self, template: Template) -> None:
    """Verify DNS validation uses the referenced zone."""
    template.has_resource_properties(
      "AWS::CertificateManager::Certificate",
      {
        "DomainValidationOptions": Match.array_with(
          [
            {
              "DomainName": "example.com",
              "HostedZoneId": "Z0123456789ABCDEFGHIJ",
            }
          ]
        ),
      },
    )

  def test_name_servers_output_omitted(self, template: Template) -> None:
    """Verify name servers are only reported for a created zone."""
    assert template.find_outputs("NameServers") == {}
    assert "WebsiteBucketName" in template.find_outputs("*")


class TestSecurityHeadersPolicy:
  """Test the response headers policy on its own."""

  @pytest.fixture
  def template(self, stack: Stack) -> Template:
    SecurityHeadersPolicy(stack, "Headers")
    return Template.from_stack(stack)

  def test_security_headers(self, template: Template) -> None:
    """Verify HSTS, content type, frame and referrer settings."""
    template.has_resource_properties(
      "AWS::CloudFront::ResponseHeadersPolicy",
      {
        "ResponseHeadersPolicyConfig": {
          "Comment": "Security headers for static website",
          "SecurityHeadersConfig": {
            "StrictTransportSecurity": {
              "AccessControlMaxAgeSec": 31536000,
              "IncludeSubdomains": True,
              "Preload": True,
              "Override": True,
            },
            "ContentTypeOptions": {"Override": True},
            "FrameOptions": {"FrameOption": "DENY", "Override": True},
            "ReferrerPolicy": {
              "ReferrerPolicy": "strict-origin-when-cross-origin",
              "Override": True,
            },
          },
        },
      },
    )

  def test_custom_headers(self, template: Template) -> None:
    """Verify the four custom headers are injected."""
    template.has_resource_properties(
      "AWS::CloudFront::ResponseHeadersPolicy",
      {
        "ResponseHeadersPolicyConfig": {
          "CustomHeadersConfig": {
            "Items": [
              {"Header": "X-Content-Type-Options", "Value": "nosniff", "Override": True},
              {"Header": "X-Frame-Options", "Value": "DENY", "Override": True},
              {"Header": "X-XSS-Protection", "Value": "1; mode=block", "Override": True},
              {
                "Header": "Permissions-Policy",
                "Value": "geolocation=(), microphone=(), camera=()",
                "Override": True,
              },
            ],
          },
        },
      },
    )


class TestStaticSiteResourceCounts:
  """Test resource counts for the full stack."""

  def test_resource_count(self) -> None:
    """Verify expected number of key resources."""
    template = _synth(domain_name="count-test.com")

    template.resource_count_is("AWS::S3::Bucket", 1)
    template.resource_count_is("AWS::CloudFront::OriginAccessControl", 1)
    template.resource_count_is("AWS::CloudFront::Distribution", 1)
    template.resource_count_is("AWS::CloudFront::ResponseHeadersPolicy", 1)
    template.resource_count_is("AWS::CertificateManager::Certificate", 1)
    template.resource_count_is("AWS::Route53::HostedZone", 1)
    template.resource_count_is("AWS::Route53::RecordSet", 4)
    template.resource_count_is("AWS::IAM::User", 1)
