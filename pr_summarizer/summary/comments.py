"""
Bot 评论的文本约定（纯函数，确定性，可单测）。

评论格式（与历史评论保持兼容，不能随意改动）：

    GPT summary of [<originSha6>](<html>/<owner>/<repo>/blob/<baseSha>/<filename>#<originSha>) - [<sha6>](...#<sha>):
    <summary>

匹配时先用 `normalize_comment_body` 把链接还原成裸 sha，再按
`GPT summary of <originSha> - <sha>:` 做子串匹配。
"""

from __future__ import annotations

import math
import re

from pr_summarizer.summary.models import CommentPlacement
from pr_summarizer.summary.models import ModifiedFile

GPT_SUMMARY_MARKER = "GPT summary of"
SUMMARY_ERROR = "Error: couldn't generate summary"
LFS_POINTER_MARKER = "https://git-lfs.github.com/"

SHORT_SHA_LENGTH = 6

# 不限定 host：旧评论可能指向 GHES 或其他 html 地址，只要锚点里的 sha 一致就算同一个版本
_SHA_LINK_RE = re.compile(r"\[(?:[a-f0-9]{6}|None)\]\(https?://.*?#([a-f0-9]{40}|None)\)")


def normalize_comment_body(body: str) -> str:
    """把评论里的 `[abc123](https://.../blob/...#<40位sha>)` 还原为 `<40位sha>`（或 `None`）。"""
    return _SHA_LINK_RE.sub(lambda m: m.group(1), body)


def is_bot_comment(message: str) -> bool:
    return message.startswith(GPT_SUMMARY_MARKER)


def build_expected_title(file: ModifiedFile) -> str:
    """归一化后的评论里应当包含的标题；包含即表示该评论对应这个文件的当前版本。"""
    return f"{GPT_SUMMARY_MARKER} {file.origin_sha} - {file.sha}:"


def strip_title(message: str) -> str:
    """去掉第一行（标题），剩下的就是 summary 正文。"""
    return "\n".join(message.split("\n")[1:])


def short_sha(sha: str) -> str:
    # "None" 本身不足 6 位，切片后保持原样
    return sha[:SHORT_SHA_LENGTH]


def format_comment_body(
    file: ModifiedFile,
    summary: str,
    owner: str,
    repo: str,
    base_sha: str,
    head_sha: str,
    html_base_url: str = "https://github.com",
) -> str:
    html = html_base_url.rstrip("/")
    origin_link = f"[{short_sha(file.origin_sha)}]({html}/{owner}/{repo}/blob/{base_sha}/{file.filename}#{file.origin_sha})"
    head_link = f"[{short_sha(file.sha)}]({html}/{owner}/{repo}/blob/{head_sha}/{file.filename}#{file.sha})"
    return f"{GPT_SUMMARY_MARKER} {origin_link} - {head_link}:\n{summary}"


def compute_comment_placement(file: ModifiedFile) -> CommentPlacement:
    """
    计算新评论的 line/side。

    - line：position 是有限正数时取 position，否则回退到第 1 行
    - side：position 为正或新增文件时评论在新文件侧（RIGHT），否则在旧文件侧（LEFT）
    """
    position = file.position
    line = int(position) if math.isfinite(position) and position > 0 else 1
    side = "RIGHT" if position > 0 or file.is_new_file else "LEFT"
    return CommentPlacement(line=line, side=side)
