"""branchguard exception classes."""


class BranchGuardError(Exception):
    """Base exception for all branchguard errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(BranchGuardError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class TransportError(BranchGuardError):
    """Base class for failures talking to the GraphQL endpoint."""

    pass


class AuthenticationError(TransportError):
    """Raised when the access token is missing, expired or invalid."""

    pass


class AuthorizationError(TransportError):
    """Raised when the token lacks permission for the operation."""

    pass


class RateLimitedError(TransportError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(TransportError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GraphQLError(TransportError):
    """Raised when the endpoint answers with GraphQL errors."""

    def __init__(
        self,
        code: str,
        message: str,
        request_id: str | None = None,
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.errors = errors or []


class QueryError(BranchGuardError):
    """Raised when a read operation cannot complete."""

    def __init__(self, operation: str, cause: Exception | str) -> None:
        self.operation = operation
        self.cause = cause
        request_id = getattr(cause, "request_id", None)
        super().__init__(
            "QUERY_FAILED", f"failed to query {operation}: {cause}", request_id
        )


class MutationError(BranchGuardError):
    """Raised when a write operation cannot complete."""

    def __init__(self, operation: str, cause: Exception | str) -> None:
        self.operation = operation
        self.cause = cause
        request_id = getattr(cause, "request_id", None)
        super().__init__(
            "MUTATION_FAILED", f"failed to mutate {operation}: {cause}", request_id
        )


class NotFoundError(BranchGuardError):
    """Raised when a read succeeds but no matching entity exists."""

    def __init__(self, message: str) -> None:
        super().__init__("NOT_FOUND", message)
