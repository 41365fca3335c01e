import base64
import re
from typing import NamedTuple
from urllib.parse import quote

import httpx

from readme_wtf import config

NOT_FOUND_MESSAGE = "Repository not found. Make sure it exists and is public."


class GitHubError(Exception):
    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidRepositoryUrl(GitHubError):
    def __init__(self, message: str = "Invalid GitHub URL format"):
        super().__init__(message, status_code=400)


class RepositoryNotFound(GitHubError):
    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message, status_code=404)


class RepoRef(NamedTuple):
    owner: str
    repo: str


# HTTPS form first, then SSH (git@github.com:owner/repo)
_URL_PATTERNS = (
    re.compile(r"github\.com/([^/\s?#]+)/([^/\s?#]+)"),
    re.compile(r"github\.com:([^/\s?#]+)/([^/\s?#]+)"),
)


def parse_github_url(url: str) -> RepoRef | None:
    url = url.strip()
    for pattern in _URL_PATTERNS:
        m = pattern.search(url)
        if m:
            repo = m.group(2)
            if repo.endswith(".git"):
                repo = repo[:-4]
            return RepoRef(m.group(1), repo)
    return None


def is_valid_github_url(url: str) -> bool:
    return parse_github_url(url) is not None


def repo_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}"


def _api_url() -> str:
    return config.get_config().github.api_url.rstrip("/")


async def _get(client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    try:
        return await client.get(url, headers={"Accept": "application/vnd.github.v3+json"}, **kwargs)
    except httpx.HTTPError as exc:
        raise GitHubError(f"Failed to connect to GitHub: {exc}") from exc


def _handle_error(resp: httpx.Response, context: str) -> None:
    if resp.status_code == 404:
        raise GitHubError(f"{context}: not found", status_code=404)
    if resp.status_code == 403:
        if "rate limit" in resp.text.lower():
            raise GitHubError("GitHub API rate limit exceeded", status_code=429)
        raise GitHubError("Repository is private or access denied", status_code=403)
    if resp.status_code >= 400:
        raise GitHubError(f"GitHub API error ({resp.status_code}): {resp.text[:200]}", status_code=502)


async def fetch_default_branch(client: httpx.AsyncClient, owner: str, repo: str) -> str:
    resp = await _get(client, f"{_api_url()}/repos/{owner}/{repo}")
    if resp.status_code == 404:
        raise RepositoryNotFound()
    _handle_error(resp, "Repository")
    branch = resp.json().get("default_branch")
    if not branch:
        raise GitHubError("Repository is empty", status_code=400)
    return branch


async def fetch_repo_tree(client: httpx.AsyncClient, owner: str, repo: str, ref: str) -> tuple[list[dict], bool]:
    """Return the recursive tree entries for ``ref`` and GitHub's ``truncated`` flag."""
    resp = await _get(client, f"{_api_url()}/repos/{owner}/{repo}/git/trees/{ref}", params={"recursive": "1"})
    if resp.status_code == 404:
        raise RepositoryNotFound()
    _handle_error(resp, "Repository tree")
    data = resp.json()
    return data.get("tree", []), bool(data.get("truncated"))


async def fetch_file_content(client: httpx.AsyncClient, owner: str, repo: str, path: str, ref: str) -> str:
    resp = await _get(client, f"{_api_url()}/repos/{owner}/{repo}/contents/{quote(path)}", params={"ref": ref})
    _handle_error(resp, f"File '{path}'")
    data = resp.json()

    # Directories come back as a list of entries
    if not isinstance(data, dict) or not isinstance(data.get("content"), str):
        raise GitHubError(f"Unexpected content format for '{path}'", status_code=502)

    if data.get("encoding") != "base64":
        return data["content"]

    try:
        return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
    except ValueError as exc:
        raise GitHubError(f"Failed to decode '{path}': {exc}", status_code=502) from exc
