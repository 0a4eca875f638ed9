"""
Pytest plugin for branchguard testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["branchguard.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from branchguard.testing.fixtures import (
    branch_client,
    fake_github,
    mock_branch_client,
    mock_transport,
    sample_branch,
    sample_rule,
)

__all__ = [
    "fake_github",
    "mock_transport",
    "branch_client",
    "mock_branch_client",
    "sample_branch",
    "sample_rule",
]
