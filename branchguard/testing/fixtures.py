"""
Pytest fixtures for branchguard testing.

Provides common fixtures for testing code that uses RepositoryBranchClient.
"""

from collections.abc import Generator

import pytest

from branchguard.client import RepositoryBranchClient
from branchguard.testing.fake import FakeGitHub
from branchguard.testing.mock import MockGraphQLTransport
from branchguard.types.branches import Branch
from branchguard.types.protection import BranchProtectionRule

TEST_OWNER = "octo-org"
TEST_REPOSITORY = "octo-repo"


def create_release_repository(
    owner: str = TEST_OWNER,
    repository: str = TEST_REPOSITORY,
) -> FakeGitHub:
    """
    Build a FakeGitHub with two protection rules and three branches.

    Rules, in server order: ``hotfix/`` (id "R1") and ``release/`` (id
    "R2"), both forbidding deletions. Branches: ``release/1.0``,
    ``release/2.0`` and ``main``.
    """
    fake = FakeGitHub(owner, repository)
    fake.add_rule("hotfix/", rule_id="R1")
    fake.add_rule("release/", rule_id="R2")
    fake.add_branch("release/1.0")
    fake.add_branch("release/2.0")
    fake.add_branch("main")
    return fake


# ============================================================================
# Transport Fixtures
# ============================================================================


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide the repository built by ``create_release_repository``."""
    return create_release_repository()


@pytest.fixture
def mock_transport() -> Generator[MockGraphQLTransport, None, None]:
    """
    Provide a MockGraphQLTransport for testing.

    Example:
        ```python
        def test_delete(mock_transport):
            mock_transport.configure("DeleteRef", data={"deleteRef": {}})
            client = RepositoryBranchClient("o", "r", mock_transport)
            client.delete_branch("REF_1")
            assert mock_transport.was_called("DeleteRef")
        ```
    """
    transport = MockGraphQLTransport()
    yield transport
    transport.reset()


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def branch_client(fake_github: FakeGitHub) -> RepositoryBranchClient:
    """Provide a client bound to ``fake_github``."""
    return RepositoryBranchClient(TEST_OWNER, TEST_REPOSITORY, fake_github)


@pytest.fixture
def mock_branch_client(mock_transport: MockGraphQLTransport) -> RepositoryBranchClient:
    """Provide a client bound to ``mock_transport``."""
    return RepositoryBranchClient(TEST_OWNER, TEST_REPOSITORY, mock_transport)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_branch() -> Branch:
    """Provide a sample Branch object."""
    return Branch(id="REF_kwDOsample", name="release/1.0")


@pytest.fixture
def sample_rule() -> BranchProtectionRule:
    """Provide a sample BranchProtectionRule object."""
    return BranchProtectionRule(id="BPR_kwDOsample", pattern="release/*", allows_deletions=False)
