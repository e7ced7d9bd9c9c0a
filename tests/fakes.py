from __future__ import annotations

from dataclasses import dataclass, field

from pr_summarizer.github.client import GitHubAPIError
from pr_summarizer.github.schemas import GitHubCommitRef
from pr_summarizer.github.schemas import GitHubPullRequest
from pr_summarizer.github.schemas import GitHubPullRequestFile
from pr_summarizer.github.schemas import GitHubReviewComment
from pr_summarizer.github.schemas import GitHubTree
from pr_summarizer.github.schemas import GitHubTreeEntry
from pr_summarizer.llm.client import ChatMessage

BASE_SHA = "b" * 40
HEAD_SHA = "e" * 40


@dataclass
class FakeGitHubClient:
    """内存版 GitHubClient：记录写操作，便于断言。"""

    files: list[GitHubPullRequestFile] = field(default_factory=list)
    tree: dict[str, str] = field(default_factory=dict)
    comments: list[GitHubReviewComment] = field(default_factory=list)
    fail_delete_ids: set[int] = field(default_factory=set)
    fail_create_paths: set[str] = field(default_factory=set)
    created: list[dict[str, object]] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)

    async def list_pull_request_files(self, owner: str, repo: str, pull_number: int) -> list[GitHubPullRequestFile]:
        return list(self.files)

    async def get_pull_request(self, owner: str, repo: str, pull_number: int) -> GitHubPullRequest:
        return GitHubPullRequest(
            number=pull_number,
            head=GitHubCommitRef(sha=HEAD_SHA, ref="feature"),
            base=GitHubCommitRef(sha=BASE_SHA, ref="main"),
        )

    async def get_tree(self, owner: str, repo: str, tree_sha: str, recursive: bool = True) -> GitHubTree:
        assert tree_sha == BASE_SHA
        entries = [GitHubTreeEntry(path=path, type="blob", sha=sha) for path, sha in self.tree.items()]
        return GitHubTree(sha=tree_sha, tree=entries)

    async def list_review_comments(self, owner: str, repo: str, pull_number: int) -> list[GitHubReviewComment]:
        return list(self.comments)

    async def create_review_comment(self, **kwargs: object) -> GitHubReviewComment:
        if kwargs["path"] in self.fail_create_paths:
            raise GitHubAPIError(status_code=422, text="Unprocessable Entity")
        self.created.append(dict(kwargs))
        return GitHubReviewComment(id=1000 + len(self.created), body=str(kwargs["body"]), path=str(kwargs["path"]))

    async def delete_review_comment(self, owner: str, repo: str, comment_id: int) -> None:
        if comment_id in self.fail_delete_ids:
            raise GitHubAPIError(status_code=404, text="Not Found")
        self.deleted.append(comment_id)


@dataclass
class FakeLLMClient:
    """记录每次调用的 messages，返回固定内容（或抛出指定异常）。"""

    content: str = "SUMMARY:\n* changed things"
    error: Exception | None = None
    calls: list[list[ChatMessage]] = field(default_factory=list)
    kwargs: list[dict[str, object]] = field(default_factory=list)

    async def complete_text(
        self,
        messages: list[ChatMessage],
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        self.calls.append(list(messages))
        self.kwargs.append({"max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.content
