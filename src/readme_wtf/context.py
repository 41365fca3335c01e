import json
import logging
from dataclasses import dataclass, field

import httpx

from readme_wtf import classify, config, github, models
from readme_wtf.tokens import estimate_tokens

logger = logging.getLogger(__name__)


@dataclass
class _Selection:
    max_tokens: int
    tokens_used: int = 0
    key_files: list[models.FileContent] = field(default_factory=list)

    def has(self, path: str) -> bool:
        return any(f.path == path for f in self.key_files)

    def admit(self, path: str, content: str) -> bool:
        tokens = estimate_tokens(content)
        if self.tokens_used + tokens > self.max_tokens:
            logger.info(f"Skipping {path}: {tokens} tokens would exceed budget ({self.tokens_used}/{self.max_tokens})")
            return False
        self.key_files.append(models.FileContent(path=path, content=content))
        self.tokens_used += tokens
        return True


def filter_tree(tree: list[dict], rules: classify.ClassifierRules = classify.DEFAULT_RULES) -> list[str]:
    return [
        entry["path"]
        for entry in tree
        if entry.get("type") == "blob"
        and entry.get("path")
        and not classify.is_ignored(entry["path"], rules)
    ]


def is_readme(path: str) -> bool:
    return classify.basename(path).lower() == config.README_FILENAME


def parse_manifest(content: str) -> dict | None:
    try:
        data = json.loads(content)
    except ValueError as exc:
        logger.warning(f"Ignoring malformed {config.MANIFEST_FILENAME}: {exc}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {config.MANIFEST_FILENAME}: expected a JSON object, got {type(data).__name__}")
        return None
    return data


async def _fetch_optional(client: httpx.AsyncClient, owner: str, repo: str, path: str, ref: str) -> str | None:
    try:
        return await github.fetch_file_content(client, owner, repo, path, ref)
    except github.GitHubError as exc:
        logger.warning(f"Failed to fetch {path}: {exc}")
        return None


async def _select(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    ref: str,
    paths: list[str],
    selection: _Selection,
) -> None:
    # Sequential on purpose: budget admission depends on fetch order
    for path in paths:
        if selection.has(path):
            continue
        content = await _fetch_optional(client, owner, repo, path, ref)
        if content:
            selection.admit(path, content)


async def build_repo_context(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    *,
    rules: classify.ClassifierRules = classify.DEFAULT_RULES,
    max_context_tokens: int = config.MAX_CONTEXT_TOKENS,
    max_tree_files: int = config.MAX_TREE_FILES,
    max_matches_per_pattern: int = config.MAX_MATCHES_PER_PATTERN,
) -> models.RepoContext:
    """Collect the file tree and a token-budgeted set of key files for a repository.

    Priority files are fetched first in ``rules.priority_files`` order, then up to
    ``max_matches_per_pattern`` files per source pattern. A file is kept only if it
    fits in the remaining budget; nothing admitted earlier is ever dropped. Fetch
    failures for individual files are logged and skipped. A missing repository
    raises :class:`github.RepositoryNotFound`.
    """
    branch = await github.fetch_default_branch(client, owner, repo)
    tree, truncated = await github.fetch_repo_tree(client, owner, repo, branch)
    if truncated:
        logger.warning(f"Tree listing for {owner}/{repo} was truncated by GitHub")

    candidates = filter_tree(tree, rules)
    logger.info(f"Tree: {len(tree)} entries, {len(candidates)} after filtering")

    selection = _Selection(max_tokens=max_context_tokens)

    priority_paths = []
    for filename in rules.priority_files:
        path = classify.find_priority_path(filename, candidates)
        if path and path not in priority_paths:
            priority_paths.append(path)
    await _select(client, owner, repo, branch, priority_paths, selection)

    for pattern in rules.source_patterns:
        matches = classify.source_pattern_matches(pattern, candidates, max_matches_per_pattern)
        await _select(client, owner, repo, branch, matches, selection)

    logger.info(f"Selected {len(selection.key_files)} files, ~{selection.tokens_used} tokens")

    manifest_file = next(
        (f for f in selection.key_files if f.path.endswith(config.MANIFEST_FILENAME)),
        None,
    )
    package_manifest = parse_manifest(manifest_file.content) if manifest_file else None

    # Root readme only; nested ones are still left out of key_files
    readme_file = next((f for f in selection.key_files if f.path.lower() == config.README_FILENAME), None)

    return models.RepoContext(
        owner=owner,
        repo=repo,
        url=github.repo_url(owner, repo),
        file_tree=tuple(candidates[:max_tree_files]),
        package_manifest=package_manifest,
        key_files=tuple(f for f in selection.key_files if not is_readme(f.path)),
        existing_readme=readme_file.content if readme_file else None,
    )
