"""
GitHub Webhook / API response schemas（Pydantic）。

说明：
- 字段只覆盖 file summary 闭环需要的子集（PR webhook + files + tree + review comments）。
- 未声明的字段会被忽略（Pydantic 默认行为），GitHub 增加字段不会导致校验失败。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GitHubOwner(BaseModel):
    login: str


class GitHubRepository(BaseModel):
    name: str
    owner: GitHubOwner
    full_name: str


class GitHubCommitRef(BaseModel):
    """PR 的 base/head 端点。"""

    sha: str
    ref: str


class GitHubPullRequest(BaseModel):
    """GET /pulls/{pull_number} 与 webhook 里的 pull_request 子结构。"""

    number: int
    head: GitHubCommitRef
    base: GitHubCommitRef


class GitHubPullRequestWebhookEvent(BaseModel):
    """
    GitHub `pull_request` webhook event（最小结构）。

    action: opened/reopened/synchronize/closed 等。GitHub 会不断新增 action，这里不做枚举，由路由层过滤。
    """

    action: str
    pull_request: GitHubPullRequest
    repository: GitHubRepository


class GitHubPullRequestFile(BaseModel):
    """
    PR 文件列表 item（GET /pulls/{pull_number}/files）。

    patch 可能缺失（二进制/过大的 diff），这种情况在 adapter 里归一化为空串。
    """

    filename: str
    status: Literal["added", "modified", "removed", "renamed", "changed", "copied", "unchanged"]
    sha: str | None = None
    patch: str | None = None


class GitHubTreeEntry(BaseModel):
    path: str
    type: str
    sha: str


class GitHubTree(BaseModel):
    """GET /git/trees/{tree_sha}?recursive=1。truncated=True 表示仓库太大，tree 不完整。"""

    sha: str
    tree: list[GitHubTreeEntry] = Field(default_factory=list)
    truncated: bool = False


class GitHubReviewComment(BaseModel):
    """PR review comment（行内评论）。body 在极少数情况下为 null。"""

    id: int
    body: str | None = None
    path: str | None = None
