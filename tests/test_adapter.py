from __future__ import annotations

import math

from pr_summarizer.github.adapter import build_bot_comment_candidates
from pr_summarizer.github.adapter import build_modified_files
from pr_summarizer.github.adapter import parse_first_hunk_position
from pr_summarizer.github.schemas import GitHubPullRequestFile
from pr_summarizer.github.schemas import GitHubReviewComment
from pr_summarizer.github.schemas import GitHubTree
from pr_summarizer.github.schemas import GitHubTreeEntry


def test_parse_first_hunk_position() -> None:
    assert parse_first_hunk_position("@@ -10,7 +12,9 @@ def f():\n context") == 12.0


def test_parse_first_hunk_position_without_count_is_nan() -> None:
    # `+1 @@` 后面没有逗号，整段不是数字
    assert math.isnan(parse_first_hunk_position("@@ -0,0 +1 @@\n+x"))


def test_parse_first_hunk_position_missing_patch_is_nan() -> None:
    assert math.isnan(parse_first_hunk_position(None))
    assert math.isnan(parse_first_hunk_position(""))
    assert math.isnan(parse_first_hunk_position("no plus sign"))


def test_build_modified_files_resolves_origin_sha() -> None:
    files = [
        GitHubPullRequestFile(filename="a.py", status="modified", sha="1" * 40, patch="@@ -1,2 +1,3 @@\n+x"),
        GitHubPullRequestFile(filename="new.py", status="added", sha="2" * 40, patch="@@ -0,0 +1,1 @@\n+y"),
        GitHubPullRequestFile(filename="img.png", status="modified", sha="3" * 40, patch=None),
    ]
    tree = GitHubTree(
        sha="base",
        tree=[
            GitHubTreeEntry(path="a.py", type="blob", sha="9" * 40),
            GitHubTreeEntry(path="img.png", type="blob", sha="8" * 40),
        ],
    )
    modified = build_modified_files(files=files, base_tree=tree)

    assert [m.filename for m in modified] == ["a.py", "new.py", "img.png"]
    assert modified[0].origin_sha == "9" * 40
    assert modified[0].position == 1.0
    assert modified[1].origin_sha == "None"
    assert modified[1].is_new_file
    assert modified[2].diff == ""
    assert math.isnan(modified[2].position)


def test_build_modified_files_missing_sha_uses_sentinel() -> None:
    files = [GitHubPullRequestFile(filename="gone.py", status="removed", sha=None, patch="@@ -1,1 +0,0 @@\n-x")]
    modified = build_modified_files(files=files, base_tree=GitHubTree(sha="base"))
    assert modified[0].sha == "None"


def test_build_bot_comment_candidates_normalizes_body() -> None:
    sha = "c" * 40
    comments = [
        GitHubReviewComment(id=1, body=f"GPT summary of [None](https://github.com/o/r/blob/x/a.py#None) - [cccccc](https://github.com/o/r/blob/y/a.py#{sha}):\nbody"),
        GitHubReviewComment(id=2, body=None),
    ]
    candidates = build_bot_comment_candidates(comments)
    assert candidates[0].message == f"GPT summary of None - {sha}:\nbody"
    assert candidates[1].message == ""
