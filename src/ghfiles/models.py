"""GitHub API data models."""

import base64
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .errors import SchemaValidationError

T = TypeVar("T")


# ============ Inputs ============

class FileContent(BaseModel):
    """File to push, given by its text."""

    path: str  # Repository-relative path
    content: str


class FilePath(BaseModel):
    """File to push, read from the local filesystem."""

    path: str  # Repository-relative path
    filepath: str  # Local filesystem location


# ============ Responses ============

class GitHubAuthor(BaseModel):
    """Commit author or committer."""

    name: str
    email: str
    date: str


class GitHubFileContent(BaseModel):
    """Single file returned by the contents API."""

    type: Literal["file"]
    encoding: str
    size: int
    name: str
    path: str
    content: str  # Base64 on the wire, decoded text once returned to callers
    sha: str
    url: str
    git_url: str
    html_url: str
    download_url: str | None = None


class GitHubDirectoryContent(BaseModel):
    """Directory listing entry (no content)."""

    type: str
    size: int
    name: str
    path: str
    sha: str
    url: str
    git_url: str | None = None
    html_url: str | None = None
    download_url: str | None = None


GitHubContent = GitHubFileContent | list[GitHubDirectoryContent]


class GitHubTreeEntry(BaseModel):
    path: str
    mode: str
    type: str
    sha: str
    size: int | None = None
    url: str | None = None


class GitHubTree(BaseModel):
    sha: str
    url: str
    tree: list[GitHubTreeEntry]
    truncated: bool = False


class GitHubObjectRef(BaseModel):
    """Sha/url pair used for trees and parents."""

    sha: str
    url: str


class GitHubCommit(BaseModel):
    sha: str
    node_id: str
    url: str
    author: GitHubAuthor
    committer: GitHubAuthor
    message: str
    tree: GitHubObjectRef
    parents: list[GitHubObjectRef]


class GitHubReferenceObject(BaseModel):
    sha: str
    type: str
    url: str


class GitHubReference(BaseModel):
    """Branch or tag pointer."""

    ref: str
    node_id: str
    url: str
    object: GitHubReferenceObject


class GitHubWrittenFile(BaseModel):
    """File descriptor returned after a write (carries no content)."""

    name: str
    path: str
    sha: str
    size: int
    url: str
    html_url: str
    git_url: str
    download_url: str | None = None
    type: str = "file"


class GitHubParentLink(GitHubObjectRef):
    html_url: str


class GitHubFileCommit(BaseModel):
    """Commit created by a contents write."""

    sha: str
    node_id: str
    url: str
    html_url: str
    author: GitHubAuthor
    committer: GitHubAuthor
    message: str
    tree: GitHubObjectRef
    parents: list[GitHubParentLink]


class CreateOrUpdateFileResponse(BaseModel):
    """Result of a contents write."""

    content: GitHubWrittenFile | None = None
    commit: GitHubFileCommit


# ============ Request bodies ============

class CreateOrUpdateFileRequest(BaseModel):
    message: str
    content: str  # Base64
    branch: str
    sha: str | None = None


class TreeEntry(BaseModel):
    path: str
    mode: Literal["100644"] = "100644"
    type: Literal["blob"] = "blob"
    content: str


class CreateTreeRequest(BaseModel):
    tree: list[TreeEntry] = Field(default_factory=list)
    base_tree: str | None = None


class CreateCommitRequest(BaseModel):
    message: str
    tree: str
    parents: list[str]


class UpdateReferenceRequest(BaseModel):
    sha: str
    force: bool = True


def request_body(model: BaseModel) -> dict[str, Any]:
    """Serialize a request model, leaving out unset optional fields."""
    return model.model_dump(exclude_none=True)


# ============ Helpers ============

def parse_response(schema: type[T] | Any, data: Any, name: str) -> T:
    """
    Validate an API payload against its expected shape.

    Args:
        schema: Model class or type expression (e.g. a union)
        data: Decoded JSON payload
        name: Response name used in the error message

    Returns:
        Validated model instance

    Raises:
        SchemaValidationError: If the payload does not match
    """
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        raise SchemaValidationError(
            f"Unexpected {name} response: {e}",
            cause=e,
            response=data,
        ) from e


def encode_content(text: str) -> str:
    """Encode text as base64 for the contents API."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(encoded: str) -> str:
    """Decode base64 content returned by the contents API."""
    # GitHub wraps base64 payloads at 60 columns
    return base64.b64decode("".join(encoded.split())).decode("utf-8")
