"""
CI / GitHub Actions 入口：对触发事件对应的 PR 跑一次 file summary 同步。

启动：
  python -m pr_summarizer.run_action

约定：
- 事件 payload 从 `GITHUB_EVENT_PATH` 读取（Actions runner 自动注入）
- 成功退出码 0；任何异常记录日志后退出码 1
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

import anyio
import httpx

from pr_summarizer.config import load_config_from_env
from pr_summarizer.github.schemas import GitHubRepository
from pr_summarizer.summary.orchestrator import build_summary_orchestrator
from pr_summarizer.summary.orchestrator import run_file_summaries

logger = logging.getLogger(__name__)


def load_event_payload(environ: Mapping[str, str]) -> dict[str, object]:
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        raise ValueError("Missing required env var: GITHUB_EVENT_PATH")
    payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected event payload shape: {type(payload).__name__}")
    return payload


def parse_pull_request_target(payload: Mapping[str, object]) -> tuple[GitHubRepository, int]:
    """从 payload 取出 (repository, pull_number)。缺字段直接报错。"""
    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        raise ValueError("Missing pull request in context payload!")
    repository = payload.get("repository")
    if not isinstance(repository, dict):
        raise ValueError("Repository undefined in context payload!")
    number = pull_request.get("number")
    if not isinstance(number, int):
        raise ValueError("Pull request number missing in context payload!")
    return GitHubRepository.model_validate(repository), number


async def run(environ: Mapping[str, str]) -> dict[str, str]:
    """执行一次同步，返回 filename -> summary。"""
    config = load_config_from_env(environ)
    repository, pull_number = parse_pull_request_target(load_event_payload(environ))

    async with httpx.AsyncClient(timeout=httpx.Timeout(30.0)) as http_client:
        orchestrator = build_summary_orchestrator(config=config, http_client=http_client)
        result = await run_file_summaries(
            orchestrator=orchestrator,
            owner=repository.owner.login,
            repo=repository.name,
            pull_number=pull_number,
        )
    return result.summaries()


def main(environ: Mapping[str, str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    env = os.environ if environ is None else environ
    try:
        anyio.run(run, env)
    except Exception:
        logger.exception("File summary run failed")
        return 1
    logger.info("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
