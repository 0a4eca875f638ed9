#!/usr/bin/env python3
"""
Basic branchguard usage example.

Deletes up to five release branches while temporarily allowing deletions
on their protection rule.

Run with: GITHUB_OWNER=... GITHUB_REPO=... GITHUB_TOKEN=... python examples/basic_usage.py
"""

import logging

from branchguard import (
    BranchGuardError,
    NotFoundError,
    RepositoryBranchClient,
    RepositoryConfig,
    configure_logging,
)

configure_logging(level=logging.INFO)

config = RepositoryConfig.from_env()

with RepositoryBranchClient.from_config(config) as client:
    try:
        rule_id = client.get_branch_protection_rule_id("release/")
    except NotFoundError as e:
        raise SystemExit(f"No release rule: {e.message}")

    branches = client.get_branches("release/", 5)
    print(f"Found {len(branches)} release branches in {config.full_name}")

    with client.deletions_allowed(rule_id):
        for branch in branches:
            try:
                print(client.delete_branch(branch.id), f"({branch.name})")
            except BranchGuardError as e:
                print(f"Could not delete {branch.name}: {e}")

    print("Protection rule restored")
