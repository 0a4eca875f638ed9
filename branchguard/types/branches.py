"""Branch-related data models."""

from dataclasses import dataclass

HEADS_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class Branch:
    """A ref under ``refs/heads/``."""

    id: str  # opaque node id, only valid while the ref exists
    name: str  # short name, e.g. "release/1.0"

    @classmethod
    def from_node(cls, node: dict) -> "Branch":
        """
        Build a Branch from a GraphQL ``Ref`` node.

        GitHub splits the qualified name between ``prefix`` and ``name``
        according to the ``refPrefix`` argument, so both are joined before
        the heads namespace is stripped.
        """
        qualified = (node.get("prefix") or "") + node["name"]
        if qualified.startswith(HEADS_PREFIX):
            qualified = qualified[len(HEADS_PREFIX):]
        return cls(id=node["id"], name=qualified)
