"""Loader and validator for the Dependabot update policy."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_PATH = Path(__file__).parent.parent / ".github" / "dependabot.yml"

SCHEDULE_INTERVALS = {"daily", "weekly", "monthly", "quarterly", "semiannually", "yearly"}


class DependencyPolicyError(ValueError):
  """Raised when the Dependabot configuration is invalid."""


def _mapping(value: Any, what: str) -> dict[str, Any]:
  """Return a YAML mapping; an absent or empty value is an empty mapping."""
  if value is None:
    return {}
  if not isinstance(value, dict):
    raise DependencyPolicyError(f"{what} must be a mapping, got {value!r}")
  return value


def _string_list(value: Any, what: str) -> list[str]:
  if value is None:
    return []
  if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
    raise DependencyPolicyError(f"{what} must be a list of names")
  return list(value)


@dataclass
class CommitMessage:
  """Commit message convention for update pull requests."""

  prefix: str
  include: str | None = None


@dataclass
class UpdateEntry:
  """One monitored package ecosystem and directory."""

  package_ecosystem: str
  directory: str
  interval: str
  open_pull_requests_limit: int = 5
  reviewers: list[str] = field(default_factory=list)
  assignees: list[str] = field(default_factory=list)
  commit_message: CommitMessage | None = None

  @property
  def key(self) -> tuple[str, str]:
    return (self.package_ecosystem, self.directory)

  @classmethod
  def from_dict(cls, data: Any) -> "UpdateEntry":
    """Build an entry from one item of the ``updates`` list."""
    if not isinstance(data, dict):
      raise DependencyPolicyError(f"Update entry must be a mapping, got {data!r}")

    ecosystem = data.get("package-ecosystem")
    directory = data.get("directory")
    if not ecosystem or not directory:
      raise DependencyPolicyError(
        "Each update entry needs a package-ecosystem and a directory"
      )

    schedule = _mapping(data.get("schedule"), f"{ecosystem} {directory}: schedule")
    interval = schedule.get("interval")
    if not isinstance(interval, str) or interval not in SCHEDULE_INTERVALS:
      raise DependencyPolicyError(
        f"{ecosystem} {directory}: unknown schedule interval {interval!r}"
      )

    # bool is an int subclass; `true` is not a limit
    limit = data.get("open-pull-requests-limit", 5)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
      raise DependencyPolicyError(
        f"{ecosystem} {directory}: open-pull-requests-limit must be a positive integer"
      )

    commit_message = None
    if "commit-message" in data:
      commit_data = _mapping(
        data["commit-message"], f"{ecosystem} {directory}: commit-message"
      )
      prefix = commit_data.get("prefix")
      if not isinstance(prefix, str) or not prefix:
        raise DependencyPolicyError(
          f"{ecosystem} {directory}: commit-message needs a prefix"
        )
      commit_message = CommitMessage(prefix=prefix, include=commit_data.get("include"))

    # Copy lists so YAML anchors/aliases cannot couple two entries
    return cls(
      package_ecosystem=ecosystem,
      directory=directory,
      interval=interval,
      open_pull_requests_limit=limit,
      reviewers=_string_list(data.get("reviewers"), f"{ecosystem} {directory}: reviewers"),
      assignees=_string_list(data.get("assignees"), f"{ecosystem} {directory}: assignees"),
      commit_message=commit_message,
    )


@dataclass
class DependencyPolicy:
  """All Dependabot update entries for the repository."""

  version: int = 2
  updates: list[UpdateEntry] = field(default_factory=list)

  @classmethod
  def from_yaml(cls, path: Path | str = DEFAULT_PATH) -> "DependencyPolicy":
    """Load and validate a Dependabot configuration file."""
    with open(path) as f:
      try:
        data = yaml.safe_load(f)
      except yaml.YAMLError as e:
        raise DependencyPolicyError(f"Invalid YAML in {path}: {e}") from e

    data = _mapping(data, "Dependabot configuration")

    version = data.get("version")
    if version != 2:
      raise DependencyPolicyError(f"Unsupported Dependabot version: {version!r}")

    items = data.get("updates") or []
    if not isinstance(items, list):
      raise DependencyPolicyError("updates must be a list")
    updates = [UpdateEntry.from_dict(item) for item in items]

    seen: set[tuple[str, str]] = set()
    for entry in updates:
      if entry.key in seen:
        raise DependencyPolicyError(
          f"Duplicate update entry for {entry.package_ecosystem} in {entry.directory}"
        )
      seen.add(entry.key)

    return cls(version=version, updates=updates)

  def entry(self, package_ecosystem: str, directory: str) -> UpdateEntry:
    """Return the entry for an ecosystem and directory."""
    for update in self.updates:
      if update.key == (package_ecosystem, directory):
        return update
    raise KeyError(f"No update entry for {package_ecosystem} in {directory}")
