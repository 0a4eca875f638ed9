"""Shared fixtures for the branchguard test-suite."""

from branchguard.testing.conftest import (  # noqa: F401
    branch_client,
    fake_github,
    mock_branch_client,
    mock_transport,
    sample_branch,
    sample_rule,
)
