import base64

import httpx
import pytest
import respx

from readme_wtf import config, llm

API = "https://api.github.com"

SMALL_TREE = [
    {"path": "package.json", "type": "blob", "size": 400},
    {"path": "README.md", "type": "blob", "size": 500},
    {"path": "src/index.ts", "type": "blob", "size": 2000},
    {"path": "node_modules/x.js", "type": "blob", "size": 50_000},
    {"path": "dist/bundle.min.js", "type": "blob", "size": 100_000},
]

LARGE_TREE_WITH_JUNK = [
    {"path": "README.md", "type": "blob", "size": 500},
    {"path": "package.json", "type": "blob", "size": 400},
    {"path": "package-lock.json", "type": "blob", "size": 500_000},
    {"path": "src/index.ts", "type": "blob", "size": 2000},
    {"path": "src/components/App.tsx", "type": "blob", "size": 3000},
    {"path": "node_modules/lodash/index.js", "type": "blob", "size": 50_000},
    {"path": "dist/bundle.min.js", "type": "blob", "size": 100_000},
    {"path": ".git/config", "type": "blob", "size": 200},
    {"path": ".next/server/app.js", "type": "blob", "size": 1000},
    {"path": "coverage/lcov.info", "type": "blob", "size": 1000},
    {"path": "yarn.lock", "type": "blob", "size": 1000},
    {"path": ".github/workflows/ci.yml", "type": "blob", "size": 800},
    {"path": "Dockerfile", "type": "blob", "size": 300},
    # Tree entry (directory), dropped by filter_tree
    {"path": "src/components", "type": "tree", "size": 0},
]

SAMPLE_FILE_CONTENTS = {
    "package.json": '{"name": "demo", "dependencies": {"react": "^18.0.0", "next": "14.0.0"}}',
    "README.md": "# Demo\n\nA sample project for testing.",
    "src/index.ts": "export const answer = 42;\n",
}


@pytest.fixture(autouse=True)
def _fresh_config():
    config.get_config.cache_clear()
    llm._get_client.cache_clear()
    yield
    config.get_config.cache_clear()
    llm._get_client.cache_clear()


@pytest.fixture
def small_tree():
    return [dict(e) for e in SMALL_TREE]


@pytest.fixture
def large_tree():
    return [dict(e) for e in LARGE_TREE_WITH_JUNK]


@pytest.fixture
def sample_contents():
    return dict(SAMPLE_FILE_CONTENTS)


def encode(text: str) -> dict:
    return {"content": base64.b64encode(text.encode()).decode(), "encoding": "base64"}


def mock_github_repo(
    tree: list[dict],
    contents: dict[str, str],
    owner: str = "acme",
    repo: str = "demo",
    branch: str = "main",
) -> dict[str, respx.Route]:
    """Set up respx routes for a repository and return the content routes by path.

    Paths in ``tree`` without an entry in ``contents`` answer 404.
    """
    base = f"{API}/repos/{owner}/{repo}"
    respx.get(base).mock(return_value=httpx.Response(200, json={"default_branch": branch}))
    respx.get(f"{base}/git/trees/{branch}", params={"recursive": "1"}).mock(
        return_value=httpx.Response(200, json={"tree": tree, "truncated": False})
    )
    routes = {}
    for entry in tree:
        path = entry["path"]
        if path in contents:
            response = httpx.Response(200, json=encode(contents[path]))
        else:
            response = httpx.Response(404, json={"message": "Not Found"})
        routes[path] = respx.get(f"{base}/contents/{path}", params={"ref": branch}).mock(return_value=response)
    return routes
