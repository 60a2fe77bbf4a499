"""Shared test fixtures for ghfiles tests."""

import base64
import json
from dataclasses import dataclass
from typing import Any, Callable

import httpx
import pytest

from ghfiles import GitHubFilesClient

BASE_URL = "https://api.github.test"
OWNER = "octo"
REPO = "demo"


@dataclass(frozen=True, slots=True)
class Call:
    """Request seen by the fake API."""

    method: str
    path: str
    params: dict[str, str]
    body: Any
    headers: httpx.Headers


Responder = Callable[[Call], httpx.Response]


class FakeGitHub:
    """In-memory GitHub API answering from registered routes."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.calls: list[Call] = []

    def add(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        """Queue a response; the last one queued for a route is reused."""
        self.add_responder(method, path, lambda call: httpx.Response(status, json=json))

    def add_responder(self, method: str, path: str, responder: Responder) -> None:
        self.routes.setdefault((method, path), []).append(responder)

    def handler(self, request: httpx.Request) -> httpx.Response:
        call = Call(
            method=request.method,
            path=request.url.path,
            params=dict(request.url.params),
            body=json.loads(request.content) if request.content else None,
            headers=request.headers,
        )
        self.calls.append(call)
        responders = self.routes.get((call.method, call.path))
        if not responders:
            return httpx.Response(404, json={"message": "Not Found"})
        responder = responders.pop(0) if len(responders) > 1 else responders[0]
        return responder(call)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def methods(self) -> list[tuple[str, str]]:
        return [(c.method, c.path) for c in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GH_TOKEN", "GITHUB_TOKEN", "GITHUB_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(fake: FakeGitHub) -> GitHubFilesClient:
    return GitHubFilesClient(token="test-token", base_url=BASE_URL, transport=fake.transport)


# ============ Payload builders ============

def repo_url(suffix: str) -> str:
    return f"{BASE_URL}/repos/{OWNER}/{REPO}/{suffix}"


def author() -> dict:
    return {"name": "Octo Cat", "email": "octo@example.com", "date": "2024-05-01T12:00:00Z"}


def file_payload(path: str, text: str, sha: str = "blob-sha") -> dict:
    name = path.rsplit("/", 1)[-1]
    return {
        "type": "file",
        "encoding": "base64",
        "size": len(text.encode("utf-8")),
        "name": name,
        "path": path,
        # GitHub wraps the payload with newlines
        "content": base64.encodebytes(text.encode("utf-8")).decode("ascii"),
        "sha": sha,
        "url": repo_url(f"contents/{path}"),
        "git_url": repo_url(f"git/blobs/{sha}"),
        "html_url": f"https://github.test/{OWNER}/{REPO}/blob/main/{path}",
        "download_url": f"https://raw.github.test/{OWNER}/{REPO}/main/{path}",
    }


def dir_entry(path: str, type_: str = "file", sha: str = "entry-sha") -> dict:
    return {
        "type": type_,
        "size": 0 if type_ == "dir" else 12,
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": sha,
        "url": repo_url(f"contents/{path}"),
        "git_url": repo_url(f"git/trees/{sha}"),
        "html_url": f"https://github.test/{OWNER}/{REPO}/tree/main/{path}",
        "download_url": None,
    }


def ref_payload(branch: str, sha: str) -> dict:
    return {
        "ref": f"refs/heads/{branch}",
        "node_id": "REF_node",
        "url": repo_url(f"git/refs/heads/{branch}"),
        "object": {"sha": sha, "type": "commit", "url": repo_url(f"git/commits/{sha}")},
    }


def tree_payload(sha: str, paths: list[str]) -> dict:
    return {
        "sha": sha,
        "url": repo_url(f"git/trees/{sha}"),
        "tree": [
            {"path": p, "mode": "100644", "type": "blob", "sha": f"blob-{i}", "size": 5}
            for i, p in enumerate(paths)
        ],
        "truncated": False,
    }


def commit_payload(sha: str, tree_sha: str, parents: list[str], message: str = "msg") -> dict:
    return {
        "sha": sha,
        "node_id": "C_node",
        "url": repo_url(f"git/commits/{sha}"),
        "author": author(),
        "committer": author(),
        "message": message,
        "tree": {"sha": tree_sha, "url": repo_url(f"git/trees/{tree_sha}")},
        "parents": [{"sha": p, "url": repo_url(f"git/commits/{p}")} for p in parents],
    }


def put_payload(path: str, blob_sha: str, commit_sha: str, parent: str = "H0") -> dict:
    commit = commit_payload(commit_sha, "T-put", [parent])
    commit["html_url"] = f"https://github.test/{OWNER}/{REPO}/commit/{commit_sha}"
    commit["parents"][0]["html_url"] = f"https://github.test/{OWNER}/{REPO}/commit/{parent}"
    content = file_payload(path, "", blob_sha)
    for key in ("content", "encoding"):
        content.pop(key)
    return {"content": content, "commit": commit}
