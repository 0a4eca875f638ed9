"""
branchguard main client.

Provides the branch and branch-protection operations for one GitHub
repository.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from branchguard import operations
from branchguard.config import RepositoryConfig
from branchguard.exceptions import (
    GraphQLError,
    MutationError,
    NotFoundError,
    QueryError,
    TransportError,
)
from branchguard.logging import get_logger, log_graphql_operation
from branchguard.operations import Operation
from branchguard.transport import GraphQLTransport, RetryConfig
from branchguard.types.branches import HEADS_PREFIX, Branch
from branchguard.types.protection import BranchProtectionRule

logger = get_logger()

# GitHub refuses `first` values above 100
MAX_PAGE_SIZE = 100
DEFAULT_RULE_PAGE_SIZE = 10


class RepositoryBranchClient:
    """
    Client for branch lifecycle operations on one repository.

    Holds the repository coordinates and a transport; no other state is
    kept between calls.

    Example:
        ```python
        from branchguard import RepositoryBranchClient, RepositoryConfig

        config = RepositoryConfig.from_env()
        with RepositoryBranchClient.from_config(config) as client:
            rule_id = client.get_branch_protection_rule_id("release/")
            with client.deletions_allowed(rule_id):
                for branch in client.get_branches("release/", 5):
                    client.delete_branch(branch.id)
        ```
    """

    def __init__(
        self,
        owner: str,
        repository: str,
        transport: GraphQLTransport,
        rule_page_size: int = DEFAULT_RULE_PAGE_SIZE,
    ) -> None:
        """
        Initialize the client.

        Args:
            owner: Organization or user that owns the repository
            repository: Repository name
            transport: Anything with an ``execute(operation, variables)`` method
            rule_page_size: Branch protection rules fetched per request
        """
        if not 1 <= rule_page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"rule_page_size must be between 1 and {MAX_PAGE_SIZE}")
        self._owner = owner
        self._repository = repository
        self._transport = transport
        self._rule_page_size = rule_page_size

    @classmethod
    def from_config(
        cls,
        config: RepositoryConfig,
        retry_config: RetryConfig | None = None,
    ) -> "RepositoryBranchClient":
        """Create a client with an HTTPS transport built from ``config``."""
        transport = GraphQLTransport(
            url=config.api_url,
            token=config.token,
            timeout=config.timeout,
            retry_config=retry_config,
        )
        return cls(config.owner, config.repository, transport)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repository(self) -> str:
        return self._repository

    @property
    def transport(self) -> GraphQLTransport:
        """Get the underlying transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "RepositoryBranchClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def get_branches(self, prefix: str, limit: int) -> list[Branch]:
        """
        List branches whose name starts with ``prefix``.

        Args:
            prefix: Branch name prefix below ``refs/heads/`` (e.g. "release/")
            limit: Maximum number of branches to return

        Returns:
            Up to ``limit`` branches in the order GitHub returns them

        Raises:
            ValueError: If limit is not positive
            QueryError: If the query fails
        """
        if limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit}")

        variables = {
            "owner": self._owner,
            "repo": self._repository,
            "prefix": HEADS_PREFIX + prefix,
        }
        branches: list[Branch] = []
        for node in self._paginate(
            operations.GET_BRANCHES,
            variables,
            lambda repo: repo["refs"],
            page_size=lambda: min(limit - len(branches), MAX_PAGE_SIZE),
        ):
            branches.append(Branch.from_node(node))
            if len(branches) >= limit:
                break
        return branches

    def delete_branch(self, ref_id: str) -> str:
        """
        Delete a ref.

        The ref's protection rule must allow deletions, see
        ``deletions_allowed``. Deleting is not idempotent: a second call
        with the same id fails because the ref no longer exists.

        Args:
            ref_id: Node id of the ref, e.g. ``Branch.id``

        Returns:
            Status message naming the deleted ref

        Raises:
            MutationError: If the ref cannot be deleted
        """
        self._mutate(operations.DELETE_REF, {"input": {"refId": ref_id}})
        logger.info("Deleted ref %s in %s/%s", ref_id, self._owner, self._repository)
        return f"Ref {ref_id} deleted"

    # ------------------------------------------------------------------
    # Branch protection rules
    # ------------------------------------------------------------------

    def list_branch_protection_rules(self) -> Iterator[BranchProtectionRule]:
        """
        Iterate over every branch protection rule of the repository.

        Pages are requested lazily, so stopping early saves requests.

        Raises:
            QueryError: If a page cannot be fetched
        """
        variables = {"owner": self._owner, "repo": self._repository}
        for node in self._paginate(
            operations.GET_BRANCH_PROTECTION_RULES,
            variables,
            lambda repo: repo["branchProtectionRules"],
            page_size=lambda: self._rule_page_size,
        ):
            yield BranchProtectionRule.from_node(node)

    def get_branch_protection_rule(self, prefix: str) -> BranchProtectionRule:
        """
        Find the first rule whose pattern starts with ``prefix``.

        Rules are scanned in the order GitHub returns them; the first match
        wins even if a later rule is more specific. Matching is a plain
        string prefix test, not glob matching.

        Raises:
            NotFoundError: If no rule matches
            QueryError: If the query fails
        """
        for rule in self.list_branch_protection_rules():
            if rule.pattern.startswith(prefix):
                return rule

        raise NotFoundError(
            f"could not find branch protection rule with prefix {prefix!r} in "
            f"{self._owner}/{self._repository}, check the repository's branch protection settings"
        )

    def get_branch_protection_rule_id(self, prefix: str) -> str:
        """
        Resolve a pattern prefix to a branch protection rule id.

        Args:
            prefix: Prefix the rule's pattern must start with (e.g. "release/")

        Returns:
            The matching rule's node id

        Raises:
            NotFoundError: If no rule matches
            QueryError: If the query fails
        """
        return self.get_branch_protection_rule(prefix).id

    def get_branch_protection_rule_by_id(self, rule_id: str) -> BranchProtectionRule:
        """
        Fetch one branch protection rule by node id.

        Raises:
            NotFoundError: If the id does not name a branch protection rule
            QueryError: If the query fails
        """
        try:
            data = self._query(operations.GET_BRANCH_PROTECTION_RULE, {"id": rule_id})
        except QueryError as e:
            # GitHub answers an unknown node id with a NOT_FOUND error entry
            if isinstance(e.cause, GraphQLError) and e.cause.code == "NOT_FOUND":
                raise NotFoundError(f"no branch protection rule with id {rule_id!r}") from e
            raise
        node = data.get("node")
        if not node or node.get("__typename") != "BranchProtectionRule":
            raise NotFoundError(f"no branch protection rule with id {rule_id!r}")
        return BranchProtectionRule.from_node(node)

    def allow_delete_protected_branch(self, rule_id: str, allow: bool) -> str:
        """
        Set the ``allowsDeletions`` flag of a branch protection rule.

        Only that flag is sent; every other setting of the rule is left as
        it is. Setting the same value twice is harmless.

        Args:
            rule_id: Node id from ``get_branch_protection_rule_id``
            allow: True permits deleting matching branches, False forbids it

        Returns:
            Status message with the value GitHub reports after the update

        Raises:
            MutationError: If the rule cannot be updated
        """
        data = self._mutate(
            operations.UPDATE_BRANCH_PROTECTION_RULE,
            {"input": {"branchProtectionRuleId": rule_id, "allowsDeletions": allow}},
        )
        try:
            reported = data["updateBranchProtectionRule"]["branchProtectionRule"]["allowsDeletions"]
        except (KeyError, TypeError) as e:
            raise MutationError(
                operations.UPDATE_BRANCH_PROTECTION_RULE.name,
                f"response has no branchProtectionRule.allowsDeletions ({e!r})",
            ) from e

        logger.info("Branch protection rule %s now has allowsDeletions=%s", rule_id, reported)
        return f"protection rule updated, allows deletions is now: {str(reported).lower()}"

    @contextmanager
    def deletions_allowed(self, rule_id: str) -> Iterator[BranchProtectionRule]:
        """
        Temporarily allow deleting branches covered by a rule.

        Deletions are enabled on entry when the rule forbids them and
        forbidden again on exit, whether the block completes or raises. A
        rule that already allowed deletions is not touched.

        Yields:
            The rule as it was before entering

        Raises:
            NotFoundError: If ``rule_id`` is not a branch protection rule
            QueryError: If the rule cannot be read
            MutationError: If the flag cannot be changed or restored
        """
        rule = self.get_branch_protection_rule_by_id(rule_id)
        changed = not rule.allows_deletions
        if changed:
            self.allow_delete_protected_branch(rule_id, True)
        try:
            yield rule
        finally:
            if changed:
                self.allow_delete_protected_branch(rule_id, False)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _query(self, operation: Operation, variables: dict[str, Any]) -> dict[str, Any]:
        log_graphql_operation(operation.name, f"{self._owner}/{self._repository}", variables)
        try:
            return self._transport.execute(operation, variables)
        except TransportError as e:
            raise QueryError(operation.name, e) from e

    def _mutate(self, operation: Operation, variables: dict[str, Any]) -> dict[str, Any]:
        log_graphql_operation(operation.name, f"{self._owner}/{self._repository}", variables)
        try:
            return self._transport.execute(operation, variables)
        except TransportError as e:
            raise MutationError(operation.name, e) from e

    def _paginate(
        self,
        operation: Operation,
        variables: dict[str, Any],
        connection: Callable[[dict[str, Any]], dict[str, Any]],
        page_size: Callable[[], int],
    ) -> Iterator[dict[str, Any]]:
        """
        Yield nodes of a repository connection, following ``endCursor``.

        ``page_size`` is evaluated before each request so callers can
        shrink the last page.
        """
        after = None
        while True:
            data = self._query(operation, {**variables, "first": page_size(), "after": after})
            repo = data.get("repository")
            if repo is None:
                raise QueryError(
                    operation.name,
                    f"repository {self._owner}/{self._repository} not found",
                )
            try:
                conn = connection(repo)
                nodes = conn["nodes"]
                page_info = conn["pageInfo"]
            except (KeyError, TypeError) as e:
                raise QueryError(operation.name, f"unexpected response shape ({e!r})") from e

            yield from (node for node in nodes if node)

            if not page_info.get("hasNextPage"):
                return
            cursor = page_info.get("endCursor")
            if not cursor or cursor == after:
                raise QueryError(operation.name, "pagination cursor missing")
            after = cursor
