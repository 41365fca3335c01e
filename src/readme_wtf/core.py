import logging
import time
from collections.abc import AsyncIterator

import httpx

from readme_wtf import config, context, github, llm, models, prompts

logger = logging.getLogger(__name__)


class AnalysisFailed(Exception):
    def __init__(self, message: str = "Failed to analyze repository"):
        self.message = message
        self.status_code = 500
        super().__init__(message)


async def analyze_repo(repo_url: str) -> models.RepoContext:
    if not repo_url.strip():
        raise github.InvalidRepositoryUrl("Repository URL is required")
    ref = github.parse_github_url(repo_url)
    if ref is None:
        raise github.InvalidRepositoryUrl()

    cfg = config.get_config()
    logger.info(f"Analyzing {ref.owner}/{ref.repo}")
    t0 = time.monotonic()
    try:
        async with httpx.AsyncClient(timeout=cfg.github.timeout) as client:
            ctx = await context.build_repo_context(
                client,
                ref.owner,
                ref.repo,
                max_context_tokens=cfg.context.max_context_tokens,
                max_tree_files=cfg.context.max_tree_files,
                max_matches_per_pattern=cfg.context.max_matches_per_pattern,
            )
    except github.GitHubError:
        raise
    except Exception as exc:
        logger.exception(f"Analysis of {ref.owner}/{ref.repo} failed")
        raise AnalysisFailed(str(exc) or "Failed to analyze repository") from exc

    logger.info(
        f"Analyzed {ref.owner}/{ref.repo} in {time.monotonic() - t0:.1f}s: "
        f"{len(ctx.file_tree)} paths, {len(ctx.key_files)} key files"
    )
    return ctx


async def stream_readme(request: models.ChatRequest) -> AsyncIterator[str]:
    """Open the model stream and return an iterator over its text.

    The stream is opened before returning so that model errors surface as
    :class:`llm.LLMError` rather than inside a response already in flight.
    """
    cfg = config.get_config()
    system_prompt = prompts.build_system_prompt(
        request.repo_context, request.style, tree_limit=cfg.context.prompt_tree_files,
    )
    stream = await llm.open_chat_stream(system_prompt, request.messages)
    return llm.iter_text(stream)
