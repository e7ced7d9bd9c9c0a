"""
File summary Orchestrator（依赖装配）。

- 把配置 + 共享的 httpx.AsyncClient 装配成 GitHubClient / LLM client / FileSummarizer
- webhook 与 CI runner 共用同一套装配，业务流程只在 reconciler 里
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from pr_summarizer.config import AppConfig
from pr_summarizer.github.client import GitHubClient
from pr_summarizer.github.schemas import GitHubPullRequestWebhookEvent
from pr_summarizer.llm.client import OpenAICompatLLMClient
from pr_summarizer.summary.models import FileSummaryRun
from pr_summarizer.summary.reconciler import summarize_pull_request_files
from pr_summarizer.summary.summarizer import FileSummarizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryOrchestrator:
    """一次运行需要的全部依赖。"""

    github_client: GitHubClient
    summarizer: FileSummarizer
    html_base_url: str
    max_files_to_summarize: int


def build_summary_orchestrator(config: AppConfig, http_client: httpx.AsyncClient) -> SummaryOrchestrator:
    """创建 orchestrator（GitHub API 与 LLM 复用同一个 http_client 连接池）。"""
    github_client = GitHubClient(
        api_base_url=str(config.github.api_base_url).rstrip("/"),
        token=config.github.token,
        http_client=http_client,
    )
    llm_client = OpenAICompatLLMClient(
        api_key=config.llm.api_key,
        base_url=str(config.llm.base_url).rstrip("/"),
        http_client=http_client,
        model=config.llm.model,
    )
    summarizer = FileSummarizer(
        llm_client=llm_client,
        max_prompt_chars=config.llm.max_prompt_chars,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    return SummaryOrchestrator(
        github_client=github_client,
        summarizer=summarizer,
        html_base_url=str(config.github.html_base_url).rstrip("/"),
        max_files_to_summarize=config.max_files_to_summarize,
    )


async def run_file_summaries(
    orchestrator: SummaryOrchestrator,
    owner: str,
    repo: str,
    pull_number: int,
) -> FileSummaryRun:
    """对一个 PR 跑一次 file summary 同步。"""
    run = await summarize_pull_request_files(
        github_client=orchestrator.github_client,
        summarizer=orchestrator.summarizer,
        owner=owner,
        repo=repo,
        pull_number=pull_number,
        html_base_url=orchestrator.html_base_url,
        max_files_to_summarize=orchestrator.max_files_to_summarize,
    )
    logger.info(
        f"PR {owner}/{repo}#{pull_number}: {run.created_count} new summary comment(s), "
        f"{len(run.outcomes) - run.created_count} reused, {len(run.deleted_comment_ids)} deleted, "
        f"{len(run.skipped_files)} skipped, {len(run.deferred_files)} deferred"
    )
    return run


def build_github_webhook_handler(
    orchestrator: SummaryOrchestrator,
) -> Callable[[GitHubPullRequestWebhookEvent], Awaitable[None]]:
    """返回一个 `async def handle(event)` 给 webhook 路由调用。"""

    async def handle(event: GitHubPullRequestWebhookEvent) -> None:
        await run_file_summaries(
            orchestrator=orchestrator,
            owner=event.repository.owner.login,
            repo=event.repository.name,
            pull_number=event.pull_request.number,
        )

    return handle
