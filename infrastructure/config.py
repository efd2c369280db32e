"""Configuration loader for the static site deployment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from constructs import Node

# ACM certificates attached to CloudFront must be issued in us-east-1
CERTIFICATE_REGION = "us-east-1"


class ConfigError(ValueError):
  """Raised when a site configuration file is malformed."""


class MissingDomainNameError(ConfigError):
  """Raised when no domain name was supplied for synthesis."""

  def __init__(self) -> None:
    super().__init__(
      "domainName context variable is required. "
      "Use: cdk deploy -c domainName=example.com"
    )


def _clean(value: Any) -> str | None:
  """Normalize an optional string setting; blank values count as absent."""
  if value is None:
    return None
  value = str(value).strip()
  return value or None


def _read_site_settings(path: Path | str) -> dict[str, Any]:
  """Read the ``site`` mapping of a YAML file merged over its ``defaults``."""
  with open(path) as f:
    data = yaml.safe_load(f) or {}

  if not isinstance(data, dict):
    raise ConfigError(f"{path}: top level must be a mapping")

  # Keys present with no value load as None
  defaults = data.get("defaults") or {}
  site = data.get("site") or {}
  for name, section in (("defaults", defaults), ("site", site)):
    if not isinstance(section, dict):
      raise ConfigError(f"{path}: '{name}' must be a mapping")

  return {**defaults, **site}


@dataclass
class SiteConfig:
  """Configuration for the static site."""

  domain_name: str
  hosted_zone_id: str | None = None
  account: str | None = None
  region: str = CERTIFICATE_REGION

  @classmethod
  def from_yaml(cls, path: Path | str) -> "SiteConfig":
    """Load the site configuration from a YAML file.

    The file holds a ``site`` mapping, optionally merged over ``defaults``:

      defaults:
        hosted_zone_id: Z1234567890
      site:
        domain_name: example.com
    """
    merged = _read_site_settings(path)

    domain_name = _clean(merged.get("domain_name"))
    if domain_name is None:
      raise MissingDomainNameError()

    return cls(
      domain_name=domain_name,
      hosted_zone_id=_clean(merged.get("hosted_zone_id")),
    )

  @classmethod
  def from_context(
    cls,
    node: Node,
    environ: Mapping[str, str] | None = None,
  ) -> "SiteConfig":
    """Resolve the site configuration from CDK context values.

    ``-c config=site.yaml`` loads a file first; ``-c domainName=...`` and
    ``-c hostedZoneId=...`` override whatever the file provides.
    """
    environ = os.environ if environ is None else environ

    domain_name: str | None = None
    hosted_zone_id: str | None = None

    config_path = _clean(node.try_get_context("config"))
    if config_path:
      settings = _read_site_settings(Path(config_path))
      domain_name = _clean(settings.get("domain_name"))
      hosted_zone_id = _clean(settings.get("hosted_zone_id"))

    domain_name = _clean(node.try_get_context("domainName")) or domain_name
    hosted_zone_id = _clean(node.try_get_context("hostedZoneId")) or hosted_zone_id

    if domain_name is None:
      raise MissingDomainNameError()

    return cls(
      domain_name=domain_name,
      hosted_zone_id=hosted_zone_id,
      account=_clean(environ.get("CDK_DEFAULT_ACCOUNT")),
    )

  @property
  def website_url(self) -> str:
    return f"https://{self.domain_name}"
