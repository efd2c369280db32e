#!/usr/bin/env python3
"""Validate .github/dependabot.yml and print a summary of its entries."""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.dependency_policy import (  # noqa: E402
  DEFAULT_PATH,
  DependencyPolicy,
  DependencyPolicyError,
)


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(description="Validate the Dependabot configuration")
  parser.add_argument(
    "path",
    nargs="?",
    type=Path,
    default=DEFAULT_PATH,
    help="Path to dependabot.yml (default: .github/dependabot.yml)",
  )
  args = parser.parse_args()

  try:
    policy = DependencyPolicy.from_yaml(args.path)
  except (OSError, DependencyPolicyError) as e:
    print(f"✗ Invalid Dependabot configuration: {e}", file=sys.stderr)
    sys.exit(1)

  for entry in policy.updates:
    prefix = entry.commit_message.prefix if entry.commit_message else "-"
    print(
      f"✓ {entry.package_ecosystem:<16} {entry.directory:<16} "
      f"{entry.interval:<8} max {entry.open_pull_requests_limit:<3} prefix {prefix}"
    )


if __name__ == "__main__":
  main()
