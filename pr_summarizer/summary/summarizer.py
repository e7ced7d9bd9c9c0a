"""
单文件 diff summary（LLM 单次调用，不 loop、不重试）。

失败策略和 review 流程的其他部分相反：这里**永远不抛错**。
prompt 过长、LLM 报错、返回空内容，统一回退为 `SUMMARY_ERROR`，
调用方照常把它作为评论正文发出去，reviewer 能看到“尝试过但失败了”。
"""

from __future__ import annotations

import logging
from typing import Protocol

from pr_summarizer.llm.client import ChatMessage
from pr_summarizer.summary.comments import SUMMARY_ERROR
from pr_summarizer.summary.prompts import FILE_SUMMARY_SYSTEM_PROMPT
from pr_summarizer.summary.prompts import build_file_summary_user_prompt

logger = logging.getLogger(__name__)


class PromptTooLargeError(ValueError):
    """prompt 超过 max_prompt_chars，不调用 LLM。"""

    pass


class TextCompletionClient(Protocol):
    """Summarizer 依赖的 LLM 接口（`OpenAICompatLLMClient` 满足该协议，测试里可替换为 fake）。"""

    async def complete_text(
        self,
        messages: list[ChatMessage],
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str: ...


class FileSummarizer:
    def __init__(
        self,
        llm_client: TextCompletionClient,
        max_prompt_chars: int,
        max_tokens: int,
        temperature: float,
    ) -> None:
        if max_prompt_chars <= 0:
            raise ValueError("max_prompt_chars must be > 0")
        self._llm_client = llm_client
        self._max_prompt_chars = max_prompt_chars
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def summarize(self, filename: str, diff: str) -> str:
        """返回 LLM 生成的 `SUMMARY:` + bullet list；任何失败都返回 `SUMMARY_ERROR`。"""
        try:
            return await self._summarize(filename=filename, diff=diff)
        except Exception:
            logger.exception(f"Failed to summarize {filename}")
        return SUMMARY_ERROR

    async def _summarize(self, filename: str, diff: str) -> str:
        user_prompt = build_file_summary_user_prompt(filename=filename, diff=diff)
        logger.debug(f"File summary prompt for {filename}:\n{user_prompt}")

        if len(user_prompt) > self._max_prompt_chars:
            raise PromptTooLargeError(
                f"Prompt for {filename} is too big: {len(user_prompt)} > {self._max_prompt_chars} chars"
            )

        messages = [
            ChatMessage(role="system", content=FILE_SUMMARY_SYSTEM_PROMPT),
            ChatMessage(role="user", content=user_prompt),
        ]
        content = await self._llm_client.complete_text(
            messages=messages,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        return content or SUMMARY_ERROR
