"""Custom exceptions for taskman-mcp."""


class TaskmanError(Exception):
    """Base exception for taskman-mcp errors."""

    pass


class ConfigError(TaskmanError):
    """Raised when configuration is missing or invalid."""

    pass


class APIError(TaskmanError):
    """Raised when the upstream API answers with a status of 400 or above.

    The body is kept raw; callers must not assume it is JSON.
    """

    def __init__(self, status_code: int, message: str, body: bytes = b"") -> None:
        self.status_code = status_code
        self.message = message
        self.body = body
        super().__init__(f"API error {status_code}: {message}")

    @property
    def is_not_found(self) -> bool:
        """Whether the upstream reported a missing entity."""
        return self.status_code == 404


class APIConnectionError(TaskmanError):
    """Raised when the HTTP round-trip fails before a response arrives."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"request failed: {cause}")


class DecodeError(TaskmanError):
    """Raised when an upstream payload cannot be parsed into a record."""

    def __init__(self, entity: str, cause: BaseException | str) -> None:
        self.entity = entity
        self.cause = cause
        super().__init__(f"failed to parse {entity}: {cause}")


class ValidationError(TaskmanError):
    """Raised when a tool or prompt argument is missing or invalid."""

    pass


class MissingArgumentError(ValidationError):
    """Raised when a required argument is absent or empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is required")


class InvalidResourceURIError(ValidationError):
    """Raised when a resource URI does not match its expected pattern."""

    def __init__(self, kind: str, uri: str) -> None:
        self.kind = kind
        self.uri = uri
        super().__init__(f"invalid {kind} URI format: {uri}")


class MissingIdentifierError(ValidationError):
    """Raised when a resource URI carries an empty identifier segment."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"{kind} ID is required")


class InvalidDateError(ValidationError):
    """Raised when a date string cannot be parsed."""

    pass


class OperationError(TaskmanError):
    """Raised when the primary fetch or mutation of an operation fails.

    Wraps the underlying error with a prefix naming the failed operation,
    e.g. ``failed to get task: API error 404: Not Found``.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"failed to {operation}: {cause}")
