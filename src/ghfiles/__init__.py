"""Read, write and push files in GitHub repositories."""

from .client import GitHubClient, get_base_url, get_token
from .errors import (
    AuthError,
    ConflictError,
    EmptyPushError,
    ErrorKind,
    FileAccessError,
    FileReadError,
    GitHubAPIError,
    GitHubFilesError,
    NotFoundError,
    PayloadTooLargeError,
    PermissionDeniedError,
    RateLimitError,
    SchemaValidationError,
    UnprocessableError,
)
from .files import GitHubFilesClient
from .models import (
    CreateOrUpdateFileResponse,
    FileContent,
    FilePath,
    GitHubCommit,
    GitHubDirectoryContent,
    GitHubFileContent,
    GitHubReference,
    GitHubTree,
)

__all__ = [
    "GitHubClient",
    "GitHubFilesClient",
    "get_token",
    "get_base_url",
    "FileContent",
    "FilePath",
    "GitHubFileContent",
    "GitHubDirectoryContent",
    "GitHubTree",
    "GitHubCommit",
    "GitHubReference",
    "CreateOrUpdateFileResponse",
    "ErrorKind",
    "GitHubFilesError",
    "SchemaValidationError",
    "NotFoundError",
    "AuthError",
    "PermissionDeniedError",
    "ConflictError",
    "PayloadTooLargeError",
    "UnprocessableError",
    "RateLimitError",
    "GitHubAPIError",
    "FileAccessError",
    "FileReadError",
    "EmptyPushError",
]
