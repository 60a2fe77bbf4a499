"""File and commit operations on a GitHub repository."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import quote

from .client import GitHubClient
from .errors import (
    EmptyPushError,
    FileAccessError,
    FileReadError,
    GitHubFilesError,
    SchemaValidationError,
)
from .models import (
    CreateCommitRequest,
    CreateOrUpdateFileRequest,
    CreateOrUpdateFileResponse,
    CreateTreeRequest,
    FileContent,
    FilePath,
    GitHubCommit,
    GitHubContent,
    GitHubDirectoryContent,
    GitHubFileContent,
    GitHubReference,
    GitHubTree,
    TreeEntry,
    UpdateReferenceRequest,
    decode_content,
    encode_content,
    parse_response,
    request_body,
)

logger = logging.getLogger(__name__)

PUSH_FAILED = "Failed to push files"


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


async def _check_access(file: FilePath) -> None:
    try:
        await asyncio.to_thread(os.stat, file.filepath)
    except OSError as e:
        raise FileAccessError(
            f"File not accessible: {file.filepath} - {e}",
            cause=e,
            path=file.filepath,
        ) from e


async def _read_file(file: FilePath) -> FileContent:
    try:
        content = await asyncio.to_thread(Path(file.filepath).read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(
            f"Failed to read file {file.filepath}: {e}",
            cause=e,
            path=file.filepath,
        ) from e
    return FileContent(path=file.path, content=content)


async def _gather_in_order(coros: list) -> list:
    """Run coroutines concurrently; raise the first failure in input order."""
    results = await asyncio.gather(*coros, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class GitHubFilesClient(GitHubClient):
    """Read, write and push files in a GitHub repository."""

    async def _get_contents(
        self, owner: str, repo: str, path: str, branch: str | None
    ) -> tuple[GitHubFileContent | list[GitHubDirectoryContent], Any]:
        endpoint = f"{_repo_path(owner, repo)}/contents/{quote(path, safe='/')}"
        params = {"ref": branch} if branch else None
        data = await self.request("GET", endpoint, params=params)
        return parse_response(GitHubContent, data, "contents"), data

    async def get_file_contents(
        self, owner: str, repo: str, path: str, branch: str | None = None
    ) -> GitHubFileContent | list[GitHubDirectoryContent]:
        """
        Get a file or a directory listing.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Path in repository
            branch: Branch/tag/commit (default branch when omitted)

        Returns:
            GitHubFileContent with decoded text content, or the ordered
            directory entries

        Raises:
            NotFoundError: Path does not exist
            AuthError: Bad credentials
            SchemaValidationError: Unexpected payload
        """
        logger.info("Fetching contents: %s/%s path=%s ref=%s", owner, repo, path, branch)
        contents, data = await self._get_contents(owner, repo, path, branch)

        if isinstance(contents, list):
            logger.debug("Directory listing: %d items", len(contents))
            return contents

        # Files over 1 MB come back with encoding "none" and empty content
        if contents.encoding != "base64":
            raise SchemaValidationError(
                f"Content of {path} is not returned inline "
                f"(encoding={contents.encoding!r}, size={contents.size})",
                response=data,
            )

        if contents.content:
            try:
                decoded = decode_content(contents.content)
            except ValueError as e:
                raise SchemaValidationError(
                    f"Content of {path} is not base64 encoded UTF-8 text: {e}",
                    cause=e,
                    response=data,
                ) from e
            contents = contents.model_copy(update={"content": decoded})
        logger.debug("File content fetched: %s (%d chars)", path, len(contents.content))
        return contents

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> CreateOrUpdateFileResponse:
        """
        Create or replace a single file with one commit.

        When sha is not given the current file is read first to find it;
        if that read fails the file is created.

        Raises:
            ConflictError: sha is stale
            AuthError: Bad credentials
            SchemaValidationError: Unexpected payload
        """
        current_sha = sha
        if not current_sha:
            try:
                # Only the sha is needed, so large files need no decoding
                existing, _ = await self._get_contents(owner, repo, path, branch)
            except GitHubFilesError as e:
                logger.info(
                    "No existing file at %s on %s (%s), will create new file",
                    path, branch, e,
                )
            else:
                if isinstance(existing, GitHubFileContent):
                    current_sha = existing.sha

        body = CreateOrUpdateFileRequest(
            message=message,
            content=encode_content(content),
            branch=branch,
            sha=current_sha,
        )
        endpoint = f"{_repo_path(owner, repo)}/contents/{quote(path, safe='/')}"
        logger.info(
            "%s file: %s/%s path=%s branch=%s",
            "Updating" if current_sha else "Creating", owner, repo, path, branch,
        )
        data = await self.request("PUT", endpoint, json=request_body(body))
        return parse_response(CreateOrUpdateFileResponse, data, "create/update file")

    async def _get_reference(self, owner: str, repo: str, ref: str) -> GitHubReference:
        endpoint = f"{_repo_path(owner, repo)}/git/refs/{quote(ref, safe='/')}"
        data = await self.request("GET", endpoint)
        return parse_response(GitHubReference, data, "reference")

    async def _create_tree(
        self,
        owner: str,
        repo: str,
        files: list[FileContent],
        base_tree: str | None = None,
    ) -> GitHubTree:
        body = CreateTreeRequest(
            tree=[TreeEntry(path=f.path, content=f.content) for f in files],
            base_tree=base_tree,
        )
        logger.debug("Creating tree: %d entries, base_tree=%s", len(files), base_tree)
        data = await self.request(
            "POST", f"{_repo_path(owner, repo)}/git/trees", json=request_body(body)
        )
        return parse_response(GitHubTree, data, "tree")

    async def _create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parents: list[str],
    ) -> GitHubCommit:
        body = CreateCommitRequest(message=message, tree=tree, parents=parents)
        logger.debug("Creating commit: tree=%s parents=%s", tree, parents)
        data = await self.request(
            "POST", f"{_repo_path(owner, repo)}/git/commits", json=request_body(body)
        )
        return parse_response(GitHubCommit, data, "commit")

    async def _update_reference(
        self, owner: str, repo: str, ref: str, sha: str
    ) -> GitHubReference:
        # force=True: no fast-forward check, concurrent commits on the branch are lost
        body = UpdateReferenceRequest(sha=sha, force=True)
        logger.debug("Updating reference: %s -> %s", ref, sha)
        data = await self.request(
            "PATCH",
            f"{_repo_path(owner, repo)}/git/refs/{quote(ref, safe='/')}",
            json=request_body(body),
        )
        return parse_response(GitHubReference, data, "reference")

    async def push_files_content(
        self,
        owner: str,
        repo: str,
        branch: str,
        files: list[FileContent],
        message: str,
    ) -> GitHubReference:
        """
        Push several files as a single commit on top of a branch.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Branch to push to
            files: Files with their text content
            message: Commit message

        Returns:
            The updated branch reference

        A failure at any step stops the push. A tree or commit already
        created stays on the remote, unreferenced.
        """
        logger.info(
            "Pushing %d files to %s/%s branch=%s", len(files), owner, repo, branch
        )
        ref = await self._get_reference(owner, repo, f"heads/{branch}")
        head_sha = ref.object.sha

        tree = await self._create_tree(owner, repo, files, head_sha)
        commit = await self._create_commit(owner, repo, message, tree.sha, [head_sha])
        updated = await self._update_reference(owner, repo, f"heads/{branch}", commit.sha)
        logger.info("Pushed commit %s to %s", commit.sha, updated.ref)
        return updated

    async def push_files_from_path(
        self,
        owner: str,
        repo: str,
        branch: str,
        files: list[FilePath],
        message: str,
    ) -> GitHubReference:
        """
        Push local files as a single commit.

        All files are checked and read before any request is made.

        Raises:
            FileAccessError: A local file is missing or not accessible
            FileReadError: A local file could not be read as UTF-8 text
            EmptyPushError: No file content to push
        """
        try:
            await _gather_in_order([_check_access(f) for f in files])
            contents = await _gather_in_order([_read_file(f) for f in files])
            if not contents:
                raise EmptyPushError("No files were successfully read")
        except (FileAccessError, FileReadError, EmptyPushError) as e:
            logger.error("%s: %s", PUSH_FAILED, e)
            raise e.wrap(PUSH_FAILED) from e

        return await self.push_files_content(owner, repo, branch, contents, message)
