"""
Command line interface for branchguard.

Reads the repository coordinates and token from the environment (see
``RepositoryConfig.from_env``) and runs one administrative command. The
first failure stops the command and selects the exit status.
"""

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from branchguard.cleanup import BranchCleaner
from branchguard.client import MAX_PAGE_SIZE, RepositoryBranchClient
from branchguard.config import RepositoryConfig
from branchguard.exceptions import BranchGuardError, ConfigurationError, NotFoundError
from branchguard.logging import configure_logging, get_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 3
EXIT_NOT_FOUND = 4

logger = get_logger("cli")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="branchguard",
        description="Manage branch protection deletions and delete protected branches. "
        "Reads GITHUB_OWNER, GITHUB_REPO and GITHUB_TOKEN from the environment.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rule_id = subparsers.add_parser("rule-id", help="Print the id of the first rule matching a prefix")
    rule_id.add_argument("prefix", help="Prefix of the rule pattern, e.g. release/")
    rule_id.set_defaults(handler=_cmd_rule_id)

    allow = subparsers.add_parser("allow-deletions", help="Allow deleting branches covered by a rule")
    allow.add_argument("prefix", help="Prefix of the rule pattern")
    allow.set_defaults(handler=_cmd_set_deletions, allow=True)

    deny = subparsers.add_parser("deny-deletions", help="Forbid deleting branches covered by a rule")
    deny.add_argument("prefix", help="Prefix of the rule pattern")
    deny.set_defaults(handler=_cmd_set_deletions, allow=False)

    list_cmd = subparsers.add_parser("list", help="List branches matching a prefix")
    list_cmd.add_argument("prefix", help="Branch name prefix, e.g. release/")
    list_cmd.add_argument("--limit", type=_positive_int, default=MAX_PAGE_SIZE, help="Maximum branches to list")
    list_cmd.set_defaults(handler=_cmd_list)

    cleanup = subparsers.add_parser(
        "cleanup", help="Delete branches matching a prefix, relaxing their protection rule meanwhile"
    )
    cleanup.add_argument("prefix", help="Branch name prefix, e.g. release/")
    cleanup.add_argument("--rule-prefix", help="Prefix of the rule pattern (default: same as prefix)")
    cleanup.add_argument("--limit", type=_positive_int, default=5, help="Maximum branches to delete")
    cleanup.set_defaults(handler=_cmd_cleanup)

    return parser


def _cmd_rule_id(client: RepositoryBranchClient, args: argparse.Namespace) -> int:
    print(client.get_branch_protection_rule_id(args.prefix))
    return EXIT_OK


def _cmd_set_deletions(client: RepositoryBranchClient, args: argparse.Namespace) -> int:
    rule_id = client.get_branch_protection_rule_id(args.prefix)
    print(client.allow_delete_protected_branch(rule_id, args.allow))
    return EXIT_OK


def _cmd_list(client: RepositoryBranchClient, args: argparse.Namespace) -> int:
    for branch in client.get_branches(args.prefix, args.limit):
        print(f"{branch.name}\t{branch.id}")
    return EXIT_OK


def _cmd_cleanup(client: RepositoryBranchClient, args: argparse.Namespace) -> int:
    report = BranchCleaner(client).delete_branches(args.prefix, args.limit, args.rule_prefix)
    for branch in report.deleted:
        print(f"deleted\t{branch.name}")
    for branch, error in report.failed:
        print(f"failed\t{branch.name}\t{error.message}")
    if not report.deleted and not report.failed:
        print(f"no branches match {args.prefix}")
    return EXIT_OK if report.ok else EXIT_FAILURE


def main(
    argv: Sequence[str] | None = None,
    client_factory: Callable[[RepositoryConfig], RepositoryBranchClient] = RepositoryBranchClient.from_config,
) -> int:
    """
    Run the command line interface.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        client_factory: Builds the client from the loaded configuration

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    if args.verbose:
        configure_logging(level=logging.DEBUG)

    try:
        config = RepositoryConfig.from_env()
    except ConfigurationError as e:
        print(f"configuration error: {e.message}", file=sys.stderr)
        return EXIT_CONFIGURATION

    with client_factory(config) as client:
        try:
            return args.handler(client, args)
        except NotFoundError as e:
            print(f"error: {e.message}", file=sys.stderr)
            return EXIT_NOT_FOUND
        except BranchGuardError as e:
            logger.debug("Command %s failed", args.command, exc_info=True)
            print(f"error: {e.message}", file=sys.stderr)
            return EXIT_FAILURE
