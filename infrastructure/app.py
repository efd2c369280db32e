#!/usr/bin/env python3
"""CDK application entry point for static website infrastructure."""

import logging
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk  # noqa: E402

from infrastructure.config import SiteConfig  # noqa: E402
from infrastructure.stacks.site_stack import StaticSiteStack  # noqa: E402

logger = logging.getLogger(__name__)

STACK_NAME = "PortfolioStack"


def build_app(app: cdk.App | None = None) -> cdk.App:
  """Declare the site stack on a CDK app.

  Raises MissingDomainNameError before any stack is declared when the
  ``domainName`` context value is absent.
  """
  app = app or cdk.App()

  site_config = SiteConfig.from_context(app.node)
  logger.info(
    "Synthesizing %s for %s (%s)",
    STACK_NAME,
    site_config.domain_name,
    f"hosted zone {site_config.hosted_zone_id}"
    if site_config.hosted_zone_id
    else "new hosted zone",
  )

  StaticSiteStack(
    app,
    STACK_NAME,
    site_config=site_config,
    env=cdk.Environment(
      account=site_config.account,
      region=site_config.region,
    ),
    cross_region_references=True,
    description=f"Static website infrastructure for {site_config.domain_name}",
  )

  return app


def main() -> None:
  """Create the CDK app and synthesize it."""
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

  app = build_app()
  app.synth()


if __name__ == "__main__":
  main()
