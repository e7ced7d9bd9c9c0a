"""
GitHub API 客户端（外部系统连接器）。

约定：
- 这里只做 HTTP 调用 + 错误处理 + schema 校验
- 出错直接抛错（不要吞），便于定位与告警；是否容错由调用方决定
"""

from __future__ import annotations

import logging
from typing import Literal

import httpx

from pr_summarizer.github.schemas import GitHubPullRequest
from pr_summarizer.github.schemas import GitHubPullRequestFile
from pr_summarizer.github.schemas import GitHubReviewComment
from pr_summarizer.github.schemas import GitHubTree

logger = logging.getLogger(__name__)

PER_PAGE = 100


class GitHubAPIError(RuntimeError):
    """GitHub 返回 4xx/5xx 时抛出的错误类型（保留 status_code 便于调用方区分）。"""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"GitHub API error {status_code}: {text}")
        self.status_code = status_code


class GitHubClient:
    """GitHub REST client：只覆盖 file summary 需要的 6 个接口。"""

    def __init__(self, api_base_url: str, token: str, http_client: httpx.AsyncClient) -> None:
        """
        - api_base_url: 例如 `https://api.github.com`（GHES 为 `https://host/api/v3`）
        - token: installation token / PAT / Actions 的 GITHUB_TOKEN
        - http_client: 复用的 httpx.AsyncClient
        """
        self._api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self._api_base_url}/repos/{owner}/{repo}"

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code >= 400:
            raise GitHubAPIError(status_code=response.status_code, text=response.text)

    async def _get_all_pages(self, url: str) -> list[object]:
        """
        按 page/per_page 拉取全部分页。

        返回的一页少于 per_page 条即视为最后一页（与 GitHub 的 Link header 语义一致，但不依赖它）。
        """
        page = 1
        all_items: list[object] = []
        while True:
            response = await self._http_client.get(
                url,
                headers=self._headers(),
                params={"per_page": PER_PAGE, "page": page},
            )
            self._raise_for_status(response)
            data = response.json()
            if not isinstance(data, list):
                raise RuntimeError(f"Unexpected GitHub response shape for {url}: {data}")
            all_items.extend(data)
            if len(data) < PER_PAGE:
                break
            page += 1
        return all_items

    async def list_pull_request_files(self, owner: str, repo: str, pull_number: int) -> list[GitHubPullRequestFile]:
        """拉取 PR 的变更文件列表（包含每个文件的 patch diff 与 head 侧 blob sha）。"""
        url = f"{self._repo_url(owner, repo)}/pulls/{pull_number}/files"
        data = await self._get_all_pages(url)
        return [GitHubPullRequestFile.model_validate(x) for x in data]

    async def get_pull_request(self, owner: str, repo: str, pull_number: int) -> GitHubPullRequest:
        """PR 元数据：这里主要用 base.sha / head.sha。"""
        url = f"{self._repo_url(owner, repo)}/pulls/{pull_number}"
        response = await self._http_client.get(url, headers=self._headers())
        self._raise_for_status(response)
        return GitHubPullRequest.model_validate(response.json())

    async def get_tree(self, owner: str, repo: str, tree_sha: str, recursive: bool = True) -> GitHubTree:
        """
        获取某个 commit/tree 的文件树。

        注意：recursive 模式下 GitHub 对超大仓库会返回 truncated=True（条目不完整）。
        """
        url = f"{self._repo_url(owner, repo)}/git/trees/{tree_sha}"
        params = {"recursive": "true"} if recursive else None
        response = await self._http_client.get(url, headers=self._headers(), params=params)
        self._raise_for_status(response)
        tree = GitHubTree.model_validate(response.json())
        if tree.truncated:
            logger.warning(f"GitHub tree {tree_sha} is truncated; missing paths will be treated as new files")
        return tree

    async def list_review_comments(self, owner: str, repo: str, pull_number: int) -> list[GitHubReviewComment]:
        """拉取 PR 上全部行内 review comments（分页）。"""
        url = f"{self._repo_url(owner, repo)}/pulls/{pull_number}/comments"
        data = await self._get_all_pages(url)
        return [GitHubReviewComment.model_validate(x) for x in data]

    async def create_review_comment(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        commit_id: str,
        path: str,
        line: int,
        side: Literal["LEFT", "RIGHT"],
        body: str,
    ) -> GitHubReviewComment:
        """
        在 PR diff 上创建一条行内评论。

        说明：使用 line + side（而不是已废弃的 position）定位评论。
        """
        url = f"{self._repo_url(owner, repo)}/pulls/{pull_number}/comments"
        payload = {"commit_id": commit_id, "path": path, "line": line, "side": side, "body": body}
        response = await self._http_client.post(url, headers=self._headers(), json=payload)
        self._raise_for_status(response)
        return GitHubReviewComment.model_validate(response.json())

    async def delete_review_comment(self, owner: str, repo: str, comment_id: int) -> None:
        """删除一条行内评论（成功返回 204）。"""
        url = f"{self._repo_url(owner, repo)}/pulls/comments/{comment_id}"
        response = await self._http_client.delete(url, headers=self._headers())
        self._raise_for_status(response)
