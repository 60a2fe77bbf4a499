"""Error types raised by the GitHub files client."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of a failure, inspectable without parsing messages."""

    SCHEMA_VALIDATION = "schema_validation"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    PERMISSION = "permission"
    CONFLICT = "conflict"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    API = "api"
    FILE_ACCESS = "file_access"
    FILE_READ = "file_read"
    EMPTY_PUSH = "empty_push"


class GitHubFilesError(Exception):
    """Base error carrying a kind and an optional nested cause."""

    kind: ErrorKind = ErrorKind.API

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        status: int | None = None,
        response: Any = None,
        path: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.status = status
        self.response = response
        self.path = path

    def wrap(self, prefix: str) -> "GitHubFilesError":
        """
        Return a copy of this error with context prepended.

        The copy has the same class, status and path; the original error
        becomes its cause.
        """
        return type(self)(
            f"{prefix}: {self.message}",
            cause=self,
            status=self.status,
            response=self.response,
            path=self.path,
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class SchemaValidationError(GitHubFilesError):
    kind = ErrorKind.SCHEMA_VALIDATION


class NotFoundError(GitHubFilesError):
    kind = ErrorKind.NOT_FOUND


class AuthError(GitHubFilesError):
    kind = ErrorKind.AUTH


class PermissionDeniedError(GitHubFilesError):
    kind = ErrorKind.PERMISSION


class ConflictError(GitHubFilesError):
    kind = ErrorKind.CONFLICT


class PayloadTooLargeError(GitHubFilesError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE


class UnprocessableError(GitHubFilesError):
    kind = ErrorKind.VALIDATION


class RateLimitError(GitHubFilesError):
    kind = ErrorKind.RATE_LIMIT


class GitHubAPIError(GitHubFilesError):
    kind = ErrorKind.API


class FileAccessError(GitHubFilesError):
    kind = ErrorKind.FILE_ACCESS


class FileReadError(GitHubFilesError):
    kind = ErrorKind.FILE_READ


class EmptyPushError(GitHubFilesError):
    kind = ErrorKind.EMPTY_PUSH


_STATUS_ERRORS: dict[int, type[GitHubFilesError]] = {
    401: AuthError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    413: PayloadTooLargeError,
    422: UnprocessableError,
    429: RateLimitError,
}


def error_for_status(status: int, body: Any) -> GitHubFilesError:
    """
    Build the error for a non-2xx API response.

    Args:
        status: HTTP status code
        body: Decoded response body (dict from GitHub, or raw text)

    Returns:
        GitHubFilesError subclass matching the status
    """
    if isinstance(body, dict):
        detail = body.get("message") or str(body)
    else:
        detail = str(body or "")

    error_cls = _STATUS_ERRORS.get(status, GitHubAPIError)
    # GitHub reports an exhausted primary rate limit as 403
    if status == 403 and "rate limit" in detail.lower():
        error_cls = RateLimitError

    return error_cls(
        f"GitHub API error {status}: {detail}",
        status=status,
        response=body,
    )
