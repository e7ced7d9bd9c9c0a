"""
GitHub -> File summary domain adapter。

职责：
- 将 GitHub PR files + base tree 转为平台无关的 `ModifiedFile`
- 将 review comments 归一化为 `BotComment`（链接还原为裸 sha）
"""

from __future__ import annotations

import math
import re

from pr_summarizer.github.schemas import GitHubPullRequestFile
from pr_summarizer.github.schemas import GitHubReviewComment
from pr_summarizer.github.schemas import GitHubTree
from pr_summarizer.summary.comments import normalize_comment_body
from pr_summarizer.summary.models import MISSING_SHA
from pr_summarizer.summary.models import BotComment
from pr_summarizer.summary.models import ModifiedFile

_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_first_hunk_position(patch: str | None) -> float:
    """
    取 patch 里第一个 `+` 之后、下一个 `,` 之前的数字，即第一个 hunk 在新文件里的起始行。

    例如 `@@ -10,7 +12,9 @@` -> 12。解析不出来时返回 nan（由 placement 回退到第 1 行）。
    """
    if not patch:
        return math.nan
    parts = patch.split("+")
    if len(parts) < 2:
        return math.nan
    candidate = parts[1].split(",")[0].strip()
    if candidate == "":
        return 0.0
    if not _NUMBER_RE.fullmatch(candidate):
        return math.nan
    return float(candidate)


def build_modified_files(files: list[GitHubPullRequestFile], base_tree: GitHubTree) -> list[ModifiedFile]:
    """
    按 GitHub 返回顺序构造 ModifiedFile 列表。

    - origin_sha：base tree 中同路径 blob 的 sha；找不到即新增文件，记为 "None"
    - 同名文件只保留最后一次出现（filename 是本次运行内的唯一键）
    """
    origin_by_path: dict[str, str] = {entry.path: entry.sha for entry in base_tree.tree}
    by_filename: dict[str, ModifiedFile] = {}
    for f in files:
        by_filename[f.filename] = ModifiedFile(
            filename=f.filename,
            sha=f.sha or MISSING_SHA,
            origin_sha=origin_by_path.get(f.filename, MISSING_SHA),
            diff=f.patch or "",
            position=parse_first_hunk_position(f.patch),
        )
    return list(by_filename.values())


def build_bot_comment_candidates(comments: list[GitHubReviewComment]) -> list[BotComment]:
    """把所有 review comment 归一化（是否是 bot 评论由调用方按前缀过滤）。"""
    return [BotComment(id=c.id, message=normalize_comment_body(c.body or "")) for c in comments]
