from __future__ import annotations

import json

import httpx
import pytest

from pr_summarizer.github.client import PER_PAGE
from pr_summarizer.github.client import GitHubAPIError
from pr_summarizer.github.client import GitHubClient


def _client(handler) -> GitHubClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubClient(api_base_url="https://api.github.test/", token="tkn", http_client=http_client)


@pytest.mark.anyio
async def test_list_pull_request_files_fetches_all_pages() -> None:
    pages: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/octo/demo/pulls/7/files"
        assert request.headers["Authorization"] == "Bearer tkn"
        page = int(request.url.params["page"])
        pages.append(page)
        count = PER_PAGE if page == 1 else 1
        items = [
            {"filename": f"p{page}-{i}.py", "status": "modified", "sha": "a" * 40, "patch": "@@ -1 +1 @@"}
            for i in range(count)
        ]
        return httpx.Response(200, json=items)

    files = await _client(handler).list_pull_request_files(owner="octo", repo="demo", pull_number=7)

    assert pages == [1, 2]
    assert len(files) == PER_PAGE + 1
    assert files[-1].filename == "p2-0.py"


@pytest.mark.anyio
async def test_get_pull_request_and_tree() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/octo/demo/pulls/7":
            return httpx.Response(
                200,
                json={"number": 7, "head": {"sha": "h", "ref": "f"}, "base": {"sha": "b", "ref": "main"}, "title": "x"},
            )
        if request.url.path == "/repos/octo/demo/git/trees/b":
            assert request.url.params["recursive"] == "true"
            return httpx.Response(
                200,
                json={"sha": "b", "truncated": False, "tree": [{"path": "a.py", "type": "blob", "sha": "1" * 40}]},
            )
        return httpx.Response(404, json={"message": "Not Found"})

    client = _client(handler)
    pr = await client.get_pull_request(owner="octo", repo="demo", pull_number=7)
    tree = await client.get_tree(owner="octo", repo="demo", tree_sha=pr.base.sha)

    assert (pr.base.sha, pr.head.sha) == ("b", "h")
    assert tree.tree[0].path == "a.py"


@pytest.mark.anyio
async def test_list_review_comments_allows_null_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/octo/demo/pulls/7/comments"
        return httpx.Response(200, json=[{"id": 1, "body": None}, {"id": 2, "body": "hi", "path": "a.py"}])

    comments = await _client(handler).list_review_comments(owner="octo", repo="demo", pull_number=7)

    assert [(c.id, c.body) for c in comments] == [(1, None), (2, "hi")]


@pytest.mark.anyio
async def test_create_review_comment_payload() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["json"] = json.loads(request.content)
        return httpx.Response(201, json={"id": 99, "body": "b", "path": "a.py"})

    created = await _client(handler).create_review_comment(
        owner="octo",
        repo="demo",
        pull_number=7,
        commit_id="h" * 40,
        path="a.py",
        line=3,
        side="RIGHT",
        body="b",
    )

    assert created.id == 99
    assert seen["method"] == "POST"
    assert seen["path"] == "/repos/octo/demo/pulls/7/comments"
    assert seen["json"] == {"commit_id": "h" * 40, "path": "a.py", "line": 3, "side": "RIGHT", "body": "b"}


@pytest.mark.anyio
async def test_delete_review_comment() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        assert request.url.path == "/repos/octo/demo/pulls/comments/42"
        return httpx.Response(204)

    await _client(handler).delete_review_comment(owner="octo", repo="demo", comment_id=42)


@pytest.mark.anyio
async def test_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="rate limited")

    with pytest.raises(GitHubAPIError) as excinfo:
        await _client(handler).get_pull_request(owner="octo", repo="demo", pull_number=7)

    assert excinfo.value.status_code == 403
    assert "rate limited" in str(excinfo.value)


@pytest.mark.anyio
async def test_unexpected_page_shape_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "not a list"})

    with pytest.raises(RuntimeError):
        await _client(handler).list_review_comments(owner="octo", repo="demo", pull_number=7)
