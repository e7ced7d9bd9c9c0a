"""
File summary Reconciler（核心流程）。

目标：让 PR 上的 bot 评论始终和当前 diff 保持一致
- 每个文件版本由 (origin_sha, sha) 标识，写进评论标题
- 标题对不上任何当前文件的 bot 评论视为过期，删除
- 已有对应评论的文件直接复用正文，不再调用 LLM、不再发评论
- 单次运行最多新建 MAX_FILES_TO_SUMMARIZE 条评论，其余留给下次运行

流程：
files + PR + base tree + comments -> 删除过期评论 -> 逐文件 复用 / summarize + 发评论
"""

from __future__ import annotations

import logging

import anyio
import httpx

from pr_summarizer.github.adapter import build_bot_comment_candidates
from pr_summarizer.github.adapter import build_modified_files
from pr_summarizer.github.client import GitHubAPIError
from pr_summarizer.github.client import GitHubClient
from pr_summarizer.summary.comments import LFS_POINTER_MARKER
from pr_summarizer.summary.comments import build_expected_title
from pr_summarizer.summary.comments import compute_comment_placement
from pr_summarizer.summary.comments import format_comment_body
from pr_summarizer.summary.comments import is_bot_comment
from pr_summarizer.summary.comments import strip_title
from pr_summarizer.summary.models import BotComment
from pr_summarizer.summary.models import FileSummaryOutcome
from pr_summarizer.summary.models import FileSummaryRun
from pr_summarizer.summary.models import ModifiedFile
from pr_summarizer.summary.summarizer import FileSummarizer

logger = logging.getLogger(__name__)

MAX_FILES_TO_SUMMARIZE = 20


def find_stale_comments(bot_comments: list[BotComment], files: list[ModifiedFile]) -> list[BotComment]:
    """找出不包含任何当前文件标题的 bot 评论。"""
    titles = [build_expected_title(f) for f in files]
    return [c for c in bot_comments if not any(title in c.message for title in titles)]


def find_existing_summary(bot_comments: list[BotComment], file: ModifiedFile) -> str | None:
    """文件当前版本已有评论时返回其正文（去掉标题行），否则返回 None。"""
    title = build_expected_title(file)
    for comment in bot_comments:
        if title in comment.message:
            return strip_title(comment.message)
    return None


def skip_reason(file: ModifiedFile) -> str | None:
    if file.diff == "":
        return "binary file"
    if LFS_POINTER_MARKER in file.diff:
        return "git lfs file"
    return None


async def delete_stale_comments(
    github_client: GitHubClient,
    owner: str,
    repo: str,
    comments: list[BotComment],
) -> list[int]:
    """
    并发删除过期评论，返回删除成功的 comment id。

    单条删除失败只记日志，不影响其他删除（best-effort）。
    """
    deleted: list[int] = []

    async def _delete(comment: BotComment) -> None:
        try:
            await github_client.delete_review_comment(owner=owner, repo=repo, comment_id=comment.id)
        except (GitHubAPIError, httpx.HTTPError) as exc:
            logger.warning(f"Failed to delete stale summary comment {comment.id}: {exc}")
            return
        logger.info(f"Deleted stale summary comment {comment.id}")
        deleted.append(comment.id)

    async with anyio.create_task_group() as tg:
        for comment in comments:
            tg.start_soon(_delete, comment)

    # 完成顺序不确定，按输入顺序返回
    order = {c.id: i for i, c in enumerate(comments)}
    return sorted(deleted, key=lambda comment_id: order[comment_id])


async def summarize_pull_request_files(
    github_client: GitHubClient,
    summarizer: FileSummarizer,
    owner: str,
    repo: str,
    pull_number: int,
    html_base_url: str = "https://github.com",
    max_files_to_summarize: int = MAX_FILES_TO_SUMMARIZE,
) -> FileSummaryRun:
    """
    对一个 PR 跑一次完整 reconcile。

    - 拉取 PR 数据失败直接抛错（整次运行失败）
    - summarize 失败不会抛错（summarizer 返回兜底文案，照常发评论）
    - 发评论失败直接抛错，中断剩余文件（下次运行会补上）
    """
    if max_files_to_summarize <= 0:
        raise ValueError("max_files_to_summarize must be > 0")

    # Step 1: PR 数据（全部是读操作，失败即终止）
    files = await github_client.list_pull_request_files(owner=owner, repo=repo, pull_number=pull_number)
    pull_request = await github_client.get_pull_request(owner=owner, repo=repo, pull_number=pull_number)
    base_sha = pull_request.base.sha
    head_sha = pull_request.head.sha
    base_tree = await github_client.get_tree(owner=owner, repo=repo, tree_sha=base_sha, recursive=True)
    modified_files = build_modified_files(files=files, base_tree=base_tree)

    all_comments = await github_client.list_review_comments(owner=owner, repo=repo, pull_number=pull_number)
    bot_comments = [c for c in build_bot_comment_candidates(all_comments) if is_bot_comment(c.message)]
    logger.info(
        f"PR {owner}/{repo}#{pull_number}: {len(modified_files)} modified file(s), "
        f"{len(bot_comments)} existing summary comment(s)"
    )

    # Step 2: 删除过期评论
    stale = find_stale_comments(bot_comments=bot_comments, files=modified_files)
    run = FileSummaryRun()
    run.deleted_comment_ids = await delete_stale_comments(
        github_client=github_client,
        owner=owner,
        repo=repo,
        comments=stale,
    )
    stale_ids = {c.id for c in stale}
    surviving = [c for c in bot_comments if c.id not in stale_ids]

    # Step 3: 逐文件生成（顺序与 GitHub 返回顺序一致）
    for index, file in enumerate(modified_files):
        if run.created_count >= max_files_to_summarize:
            run.deferred_files = [f.filename for f in modified_files[index:] if skip_reason(f) is None]
            logger.info(f"Reached {max_files_to_summarize} new summaries; deferring {len(run.deferred_files)} file(s)")
            break

        reason = skip_reason(file)
        if reason is not None:
            logger.info(f"Skipping {reason} {file.filename}")
            run.skipped_files.append(file.filename)
            continue

        existing = find_existing_summary(bot_comments=surviving, file=file)
        if existing is not None:
            run.outcomes.append(
                FileSummaryOutcome(filename=file.filename, summary=existing, reused=True, comment_created=False)
            )
            continue

        summary = await summarizer.summarize(filename=file.filename, diff=file.diff)

        placement = compute_comment_placement(file)
        logger.info(f"Adding summary comment to {file.filename} line {placement.line} ({placement.side})")
        await github_client.create_review_comment(
            owner=owner,
            repo=repo,
            pull_number=pull_number,
            commit_id=head_sha,
            path=file.filename,
            line=placement.line,
            side=placement.side,
            body=format_comment_body(
                file=file,
                summary=summary,
                owner=owner,
                repo=repo,
                base_sha=base_sha,
                head_sha=head_sha,
                html_base_url=html_base_url,
            ),
        )
        run.outcomes.append(
            FileSummaryOutcome(filename=file.filename, summary=summary, reused=False, comment_created=True)
        )

    return run


async def get_file_summaries(
    github_client: GitHubClient,
    summarizer: FileSummarizer,
    owner: str,
    repo: str,
    pull_number: int,
    html_base_url: str = "https://github.com",
    max_files_to_summarize: int = MAX_FILES_TO_SUMMARIZE,
) -> dict[str, str]:
    """只返回 filename -> summary 映射的便捷入口。"""
    run = await summarize_pull_request_files(
        github_client=github_client,
        summarizer=summarizer,
        owner=owner,
        repo=repo,
        pull_number=pull_number,
        html_base_url=html_base_url,
        max_files_to_summarize=max_files_to_summarize,
    )
    return run.summaries()
