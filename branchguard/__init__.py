"""branchguard - branch protection and branch cleanup for GitHub repositories."""

from branchguard.cleanup import BranchCleaner
from branchguard.client import RepositoryBranchClient
from branchguard.config import RepositoryConfig
from branchguard.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BranchGuardError,
    ConfigurationError,
    GraphQLError,
    MutationError,
    NotFoundError,
    QueryError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from branchguard.logging import configure_logging, get_logger
from branchguard.transport import GraphQLTransport, RetryConfig
from branchguard.types import Branch, BranchProtectionRule, CleanupReport

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "RepositoryBranchClient",
    "RepositoryConfig",
    "BranchCleaner",
    # Types
    "Branch",
    "BranchProtectionRule",
    "CleanupReport",
    # Exceptions
    "BranchGuardError",
    "ConfigurationError",
    "QueryError",
    "MutationError",
    "NotFoundError",
    "TransportError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitedError",
    "ServerError",
    "GraphQLError",
    # Transport
    "GraphQLTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
