"""Branch protection data models."""

from dataclasses import dataclass, field

from branchguard.exceptions import MutationError
from branchguard.types.branches import Branch


@dataclass(frozen=True)
class BranchProtectionRule:
    """A branch protection rule as returned by the API."""

    id: str
    pattern: str
    allows_deletions: bool | None = None

    @classmethod
    def from_node(cls, node: dict) -> "BranchProtectionRule":
        return cls(
            id=node["id"],
            pattern=node["pattern"],
            allows_deletions=node.get("allowsDeletions"),
        )


@dataclass
class CleanupReport:
    """Outcome of a batch branch deletion."""

    rule_id: str
    deleted: list[Branch] = field(default_factory=list)
    failed: list[tuple[Branch, MutationError]] = field(default_factory=list)
    restored: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed
