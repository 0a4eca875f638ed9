"""
GraphQL transport for branchguard.

Handles HTTPS communication with the GitHub GraphQL endpoint: bearer-token
authorization, automatic retry for idempotent operations, and mapping of
error responses into typed exceptions.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from branchguard.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BranchGuardError,
    GraphQLError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from branchguard.logging import log_http_request, log_http_response
from branchguard.operations import Operation

DEFAULT_USER_AGENT = "branchguard/0.1.0"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class GraphQLTransport:
    """
    Executes GraphQL operations over HTTPS.

    Handles:
    - Bearer-token authorization on every request
    - Exponential backoff with jitter for retries of idempotent operations
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """
        Initialize the transport.

        Args:
            url: GraphQL endpoint (e.g., "https://api.github.com/graphql")
            token: Access token sent as a bearer token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            user_agent: Value of the User-Agent header
        """
        self.url = url
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/vnd.github+json",
                "User-Agent": user_agent,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "GraphQLTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def execute(
        self,
        operation: Operation,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL operation.

        Args:
            operation: The named document to send
            variables: Variables for the document

        Returns:
            The ``data`` member of the response

        Raises:
            TransportError: On HTTP, network or GraphQL errors
        """
        payload = {
            "query": operation.document,
            "variables": variables or {},
            "operationName": operation.name,
        }

        def make_request() -> httpx.Response:
            log_http_request("POST", self.url, dict(self._client.headers), payload)
            return self._client.post(self.url, json=payload)

        max_retries = self.retry_config.max_retries if operation.idempotent else 0
        return self._execute_with_retry(make_request, max_retries)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response], max_retries: int
    ) -> dict[str, Any]:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request
            max_retries: Retries allowed for this request

        Returns:
            The ``data`` member of the response

        Raises:
            TransportError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
                elapsed_ms = (time.monotonic() - started) * 1000

                if response.status_code < 400:
                    body = self._parse_json(response)
                    log_http_response(response.status_code, self.url, body, elapsed_ms)
                    try:
                        return self._extract_data(body, response)
                    except RateLimitedError as e:
                        # GitHub reports an exhausted query budget inside a 200
                        if attempt >= max_retries:
                            raise
                        error: TransportError = e
                else:
                    log_http_response(response.status_code, self.url, None, elapsed_ms)
                    error = self._parse_error_response(response)

                    if not self._should_retry(response.status_code, attempt, max_retries, error):
                        raise error

                last_error = error
                time.sleep(self._get_backoff_time(attempt, self._retry_after_hint(response, error)))

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        if last_error:
            if isinstance(last_error, BranchGuardError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(
        self,
        status_code: int,
        attempt: int,
        max_retries: int,
        error: TransportError | None = None,
    ) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)
            max_retries: Retries allowed for this request
            error: The parsed error, if any; rate limits are always retryable

        Returns:
            True if the request should be retried
        """
        if attempt >= max_retries:
            return False

        if isinstance(error, RateLimitedError):
            return True

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)

    @staticmethod
    def _retry_after_hint(response: httpx.Response, error: TransportError) -> str | None:
        """Wait hint for the next attempt: the header, else the rate limit's delay."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is None and isinstance(error, RateLimitedError):
            return str(error.retry_after)
        return retry_after

    @staticmethod
    def _request_id(response: httpx.Response) -> str | None:
        return response.headers.get("X-GitHub-Request-Id")

    def _parse_json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise ServerError(
                "INVALID_RESPONSE",
                f"HTTP {response.status_code} response is not JSON",
                self._request_id(response),
            ) from e
        if not isinstance(body, dict):
            raise ServerError(
                "INVALID_RESPONSE",
                "response body is not a JSON object",
                self._request_id(response),
            )
        return body

    def _extract_data(
        self, body: dict[str, Any], response: httpx.Response
    ) -> dict[str, Any]:
        """
        Return the ``data`` member, raising if the body carries errors.

        GitHub reports query failures (unknown repository, bad node id,
        missing permission) as a 200 response with an ``errors`` array.
        """
        errors = body.get("errors")
        if errors:
            raise self._graphql_error(
                errors, self._request_id(response), self._retry_after(response)
            )
        return body.get("data") or {}

    @staticmethod
    def _graphql_error(
        errors: list[dict[str, Any]], request_id: str | None, retry_after: int = 60
    ) -> TransportError:
        code = errors[0].get("type") or "GRAPHQL_ERROR"
        message = "; ".join(e.get("message", "unknown error") for e in errors)
        if code == "RATE_LIMITED":
            return RateLimitedError(code, message, retry_after, request_id)
        return GraphQLError(code, message, request_id, errors)

    def _parse_error_response(self, response: httpx.Response) -> TransportError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate TransportError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        request_id = self._request_id(response)
        message = data.get("message") or f"HTTP {response.status_code}"
        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403 and "rate limit" in message.lower():
            return RateLimitedError(
                "SECONDARY_RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code == 403:
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        elif data.get("errors"):
            return self._graphql_error(data["errors"], request_id)
        else:
            return GraphQLError("BAD_REQUEST", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            return int(retry_after_str)
        except ValueError:
            return 60
