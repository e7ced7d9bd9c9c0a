"""
本地 Mock GitHub API server（只覆盖 file summary 用到的接口）。

用途：
- 在没有真实 GitHub 的情况下，本地跑通：
  list files -> get PR -> get tree -> list/delete/create review comments

启动：
  python -m pr_summarizer.dev.mock_github_server
  GITHUB_API_BASE_URL=http://127.0.0.1:9002
"""

from __future__ import annotations

import itertools

import uvicorn
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Response
from pydantic import BaseModel

BASE_SHA = "0" * 40
HEAD_SHA = "1" * 40


class ReviewCommentCreateRequest(BaseModel):
    commit_id: str
    path: str
    line: int
    side: str
    body: str


def _default_files_response() -> list[dict[str, object]]:
    return [
        {
            "filename": "src/example.py",
            "status": "modified",
            "sha": "b" * 40,
            "patch": (
                "@@ -1,3 +1,6 @@\n"
                " def add(a: int, b: int) -> int:\n"
                "-    return a + b\n"
                "+    # TODO: handle None inputs\n"
                "+    return a + b\n"
                "+\n"
                "+def sub(a: int, b: int) -> int:\n"
                "+    return a - b\n"
            ),
        },
        {
            "filename": "src/new_module.py",
            "status": "added",
            "sha": "c" * 40,
            "patch": "@@ -0,0 +1,2 @@\n+def hello() -> str:\n+    return 'hello'\n",
        },
        {"filename": "assets/logo.png", "status": "modified", "sha": "d" * 40},
    ]


def _default_tree_response() -> dict[str, object]:
    return {
        "sha": BASE_SHA,
        "truncated": False,
        "tree": [
            {"path": "src", "type": "tree", "sha": "e" * 40},
            {"path": "src/example.py", "type": "blob", "sha": "a" * 40},
            {"path": "assets/logo.png", "type": "blob", "sha": "f" * 40},
        ],
    }


app = FastAPI(title="Mock GitHub API", version="0.1.0")

_comments: list[dict[str, object]] = []
_comment_ids = itertools.count(1)


@app.get("/repos/{owner}/{repo}/pulls/{pull_number}/files")
async def list_pull_request_files(owner: str, repo: str, pull_number: int, page: int = 1) -> list[dict[str, object]]:
    _ = (owner, repo, pull_number)
    return _default_files_response() if page == 1 else []


@app.get("/repos/{owner}/{repo}/pulls/{pull_number}")
async def get_pull_request(owner: str, repo: str, pull_number: int) -> dict[str, object]:
    _ = (owner, repo)
    return {
        "number": pull_number,
        "head": {"sha": HEAD_SHA, "ref": "feature"},
        "base": {"sha": BASE_SHA, "ref": "main"},
    }


@app.get("/repos/{owner}/{repo}/git/trees/{tree_sha}")
async def get_tree(owner: str, repo: str, tree_sha: str) -> dict[str, object]:
    _ = (owner, repo, tree_sha)
    return _default_tree_response()


@app.get("/repos/{owner}/{repo}/pulls/{pull_number}/comments")
async def list_review_comments(owner: str, repo: str, pull_number: int, page: int = 1) -> list[dict[str, object]]:
    _ = (owner, repo, pull_number)
    return list(_comments) if page == 1 else []


@app.post("/repos/{owner}/{repo}/pulls/{pull_number}/comments", status_code=201)
async def create_review_comment(
    owner: str, repo: str, pull_number: int, req: ReviewCommentCreateRequest
) -> dict[str, object]:
    _ = (owner, repo, pull_number)
    comment = {"id": next(_comment_ids), "body": req.body, "path": req.path, "line": req.line, "side": req.side}
    _comments.append(comment)
    return comment


@app.delete("/repos/{owner}/{repo}/pulls/comments/{comment_id}", status_code=204)
async def delete_review_comment(owner: str, repo: str, comment_id: int) -> Response:
    _ = (owner, repo)
    for i, comment in enumerate(_comments):
        if comment["id"] == comment_id:
            del _comments[i]
            return Response(status_code=204)
    raise HTTPException(status_code=404, detail="Not Found")


@app.get("/__debug__/comments")
async def debug_comments() -> dict[str, object]:
    return {"count": len(_comments), "comments": _comments}


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9002)


if __name__ == "__main__":
    main()
