"""
Client configuration.

Holds everything the client needs before it can talk to GitHub: the
repository coordinates and the access token. Reading the process
environment happens here and only here.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from branchguard.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class RepositoryConfig:
    """Coordinates and credentials for one GitHub repository."""

    owner: str
    repository: str
    token: str = field(repr=False)
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.owner:
            raise ConfigurationError("owner must not be empty")
        if not self.repository:
            raise ConfigurationError("repository must not be empty")
        if not self.token:
            raise ConfigurationError("token must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repository}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RepositoryConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITHUB_OWNER: Organization or user that owns the repository (required)
            GITHUB_REPO: Repository name (required)
            GITHUB_TOKEN: Access token sent as a bearer token (required)
            GITHUB_GRAPHQL_URL: GraphQL endpoint (optional, default: https://api.github.com/graphql)
            GITHUB_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Populated RepositoryConfig

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        owner = env.get("GITHUB_OWNER")
        repository = env.get("GITHUB_REPO")
        token = env.get("GITHUB_TOKEN")

        if not owner:
            raise ConfigurationError("GITHUB_OWNER environment variable not set")
        if not repository:
            raise ConfigurationError("GITHUB_REPO environment variable not set")
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        timeout_str = env.get("GITHUB_TIMEOUT")
        try:
            timeout = float(timeout_str) if timeout_str else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"Invalid GITHUB_TIMEOUT: {timeout_str}. Must be a number of seconds"
            ) from None

        return cls(
            owner=owner,
            repository=repository,
            token=token,
            api_url=env.get("GITHUB_GRAPHQL_URL") or DEFAULT_API_URL,
            timeout=timeout,
        )
