"""
File summary 领域模型（Pydantic）。

用途：
- 把 GitHub 的 files/tree/comments 归一化为平台无关的结构
- 明确 reconciler 每个阶段的输入/输出
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# base tree 里找不到该文件（新增文件）时 origin_sha 的取值；会原样出现在评论标题里
MISSING_SHA = "None"


class ModifiedFile(BaseModel):
    """PR 中一个变更文件。(origin_sha, sha) 唯一标识“这个文件的这一次版本变化”。"""

    filename: str
    sha: str
    origin_sha: str
    diff: str
    position: float

    @property
    def is_new_file(self) -> bool:
        return self.origin_sha == MISSING_SHA


class BotComment(BaseModel):
    """已存在的 review comment；message 是归一化（去掉 commit 链接）之后的正文。"""

    id: int
    message: str


class CommentPlacement(BaseModel):
    """新评论在 diff 上的锚点。"""

    line: int
    side: Literal["LEFT", "RIGHT"]


class FileSummaryOutcome(BaseModel):
    """单个文件在本次运行中的结果（只记录进入结果映射的文件）。"""

    filename: str
    summary: str
    reused: bool
    comment_created: bool


class FileSummaryRun(BaseModel):
    """一次 reconcile 的完整结果。"""

    outcomes: list[FileSummaryOutcome] = Field(default_factory=list)
    deleted_comment_ids: list[int] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    deferred_files: list[str] = Field(default_factory=list)

    @property
    def created_count(self) -> int:
        return sum(1 for o in self.outcomes if o.comment_created)

    def summaries(self) -> dict[str, str]:
        """filename -> summary（供下游 commit summary 等步骤使用）。"""
        return {o.filename: o.summary for o in self.outcomes}
