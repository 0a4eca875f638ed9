"""branchguard testing utilities.

Provides an in-memory GitHub repository, a scripted transport and pytest
fixtures for testing code that uses RepositoryBranchClient.
"""

from branchguard.testing.fake import FakeGitHub, FakeRule
from branchguard.testing.mock import MockCall, MockGraphQLTransport, MockResponse

__all__ = [
    "FakeGitHub",
    "FakeRule",
    "MockGraphQLTransport",
    "MockCall",
    "MockResponse",
]
