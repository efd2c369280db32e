#!/usr/bin/env python3
"""Print the CloudFormation outputs of the site stack."""

import argparse
import json
import sys
from typing import Any

import boto3  # type: ignore[import-not-found]
from botocore.exceptions import BotoCoreError, ClientError

DEFAULT_STACK_NAME = "PortfolioStack"
DEFAULT_REGION = "us-east-1"


def get_stack_outputs(
  stack_name: str = DEFAULT_STACK_NAME,
  region: str = DEFAULT_REGION,
  cloudformation_client: Any | None = None,
) -> dict[str, str]:
  """Retrieve stack outputs from CloudFormation.

  Args:
    stack_name: The CDK stack name (e.g., 'PortfolioStack')
    region: AWS region
    cloudformation_client: Optional pre-built client (used by tests)

  Returns:
    Dictionary mapping output keys (e.g. WebsiteBucketName) to values
  """
  cloudformation = cloudformation_client or boto3.client(
    "cloudformation", region_name=region
  )

  response = cloudformation.describe_stacks(StackName=stack_name)
  stacks = response.get("Stacks", [])
  if not stacks:
    raise LookupError(f"Stack {stack_name} not found")

  return {
    output["OutputKey"]: output["OutputValue"]
    for output in stacks[0].get("Outputs", [])
  }


def format_outputs(outputs: dict[str, str], output_format: str = "env") -> str:
  """Render outputs as env lines, shell exports or JSON."""
  if output_format == "json":
    return json.dumps(outputs, indent=2)
  if output_format == "export":
    return "\n".join(f"export {key}={value}" for key, value in outputs.items())
  return "\n".join(f"{key}={value}" for key, value in outputs.items())


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(
    description="Print the outputs of the static site stack"
  )
  parser.add_argument(
    "--stack-name",
    default=DEFAULT_STACK_NAME,
    help=f"CDK stack name (default: {DEFAULT_STACK_NAME})",
  )
  parser.add_argument(
    "--region",
    default=DEFAULT_REGION,
    help=f"AWS region (default: {DEFAULT_REGION})",
  )
  parser.add_argument(
    "--format",
    choices=["env", "json", "export"],
    default="env",
    help="Output format (default: env)",
  )

  args = parser.parse_args()

  try:
    outputs = get_stack_outputs(args.stack_name, args.region)
  except (BotoCoreError, ClientError, LookupError) as e:
    print(f"Error retrieving stack outputs: {e}", file=sys.stderr)
    sys.exit(1)

  print(format_outputs(outputs, args.format))


if __name__ == "__main__":
  main()
