"""
FastAPI 服务入口。

这里做三件事：
- 加载配置（严格校验环境变量）
- 组装外部依赖（HTTP Client / GitHub Client / LLM Client）
- 装配路由（health + github webhook）

注意：
- 业务流程不写在这里（由 `summary/reconciler.py` 负责）
- `httpx.AsyncClient` 会被复用（避免每个请求新建连接）
"""

from __future__ import annotations

import os
from collections.abc import Mapping

import httpx
import uvicorn
from fastapi import FastAPI

from pr_summarizer.config import load_config_from_env
from pr_summarizer.github.webhook import build_github_webhook_router
from pr_summarizer.summary.orchestrator import build_github_webhook_handler
from pr_summarizer.summary.orchestrator import build_summary_orchestrator


def build_app(environ: Mapping[str, str] | None = None) -> FastAPI:
    """创建并返回 FastAPI app（便于测试/复用）。"""

    # 1) 配置：缺失会直接抛错，启动失败（这是期望行为）
    config = load_config_from_env(os.environ if environ is None else environ)

    # 2) 可复用的 HTTP client：供 GitHub API 与 LLM 调用使用
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))

    # 3) 装配 GitHub client + summarizer
    orchestrator = build_summary_orchestrator(config=config, http_client=http_client)

    app = FastAPI(title="PR File Summary Bot", version="0.1.0")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """健康检查：用于 k8s / LB 探活。"""
        return {"status": "ok"}

    if config.github.webhook_secret:
        handler = build_github_webhook_handler(orchestrator=orchestrator)
        app.include_router(build_github_webhook_router(config=config.github, handler=handler))
    return app


def main() -> None:
    # Uvicorn factory 模式：导入本模块不会读取环境变量
    uvicorn.run("pr_summarizer.main:build_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
