import logging
from collections.abc import AsyncIterator
from functools import lru_cache

from openai import AsyncOpenAI, AsyncStream
from openai.types.chat import ChatCompletionChunk

from readme_wtf import config, models

logger = logging.getLogger(__name__)


class LLMError(Exception):
    pass


@lru_cache
def _get_client(api_key: str, base_url: str) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url)


def build_messages(system_prompt: str, messages: list[models.ChatMessage]) -> list[dict]:
    return [{"role": "system", "content": system_prompt}] + [
        {"role": msg.role, "content": msg.content} for msg in messages
    ]


async def open_chat_stream(
    system_prompt: str,
    messages: list[models.ChatMessage],
) -> AsyncStream[ChatCompletionChunk]:
    cfg = config.get_config().llm
    if not cfg.api_key:
        raise LLMError("LLM_API_KEY is not configured")
    client = _get_client(cfg.api_key, cfg.base_url)

    logger.info(f"Starting stream with model {cfg.model_name}")
    try:
        return await client.chat.completions.create(
            model=cfg.model_name,
            messages=build_messages(system_prompt, messages),
            temperature=cfg.temperature,
            timeout=cfg.timeout,
            stream=True,
        )
    except Exception as exc:
        raise LLMError(f"LLM chat request failed: {exc}") from exc


async def iter_text(stream: AsyncStream[ChatCompletionChunk]) -> AsyncIterator[str]:
    # Headers are already sent by the time we iterate, so errors become text
    try:
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta
    except Exception as exc:
        logger.error(f"Stream error: {exc}")
        yield f"\n\n⚠️ Error: {exc}\n\nPlease try again in a moment."
