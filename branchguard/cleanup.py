"""Batch deletion of protected branches."""

from branchguard.client import RepositoryBranchClient
from branchguard.exceptions import MutationError
from branchguard.logging import get_logger
from branchguard.types.protection import CleanupReport

logger = get_logger("cleanup")


class BranchCleaner:
    """Deletes branches covered by a protection rule, restoring the rule afterwards."""

    def __init__(self, client: RepositoryBranchClient) -> None:
        self.client = client

    def delete_branches(
        self,
        prefix: str,
        limit: int,
        rule_prefix: str | None = None,
    ) -> CleanupReport:
        """
        Delete up to ``limit`` branches whose name starts with ``prefix``.

        The protection rule matching ``rule_prefix`` (``prefix`` when not
        given) is relaxed for the duration of the deletions and put back
        on every exit path. A branch that fails to delete is recorded in
        the report and the remaining branches are still attempted.

        Args:
            prefix: Branch name prefix, e.g. "release/"
            limit: Maximum number of branches to delete
            rule_prefix: Prefix used to find the protection rule

        Returns:
            CleanupReport listing deleted and failed branches

        Raises:
            NotFoundError: If no protection rule matches
            QueryError: If the rule or the branches cannot be read
            MutationError: If the rule cannot be relaxed or restored
        """
        rule_id = self.client.get_branch_protection_rule_id(rule_prefix or prefix)
        branches = self.client.get_branches(prefix, limit)
        report = CleanupReport(rule_id=rule_id)

        if not branches:
            logger.info("No branches match %r, leaving rule %s untouched", prefix, rule_id)
            return report

        with self.client.deletions_allowed(rule_id) as rule:
            for branch in branches:
                try:
                    self.client.delete_branch(branch.id)
                except MutationError as e:
                    logger.warning("Could not delete %s: %s", branch.name, e)
                    report.failed.append((branch, e))
                else:
                    report.deleted.append(branch)

        report.restored = not rule.allows_deletions
        return report
