"""
本地 Mock OpenAI-compatible LLM server。

用途：
- 在没有真实 LLM 的情况下，本地跑通 file summary 闭环

启动：
  python -m pr_summarizer.dev.mock_openai_server
  LLM_BASE_URL=http://127.0.0.1:9001
"""

from __future__ import annotations

from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel, Field

from pr_summarizer.llm.client import ChatMessage


class ChatCompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage] = Field(default_factory=list)
    max_tokens: int | None = None
    temperature: float | None = None


def _extract_filename_from_prompt(prompt: str) -> str:
    """从 `THE GIT DIFF OF <filename> TO BE SUMMARIZED:` 里取出文件名。"""
    for line in prompt.splitlines():
        stripped = line.strip()
        if stripped.startswith("THE GIT DIFF OF ") and stripped.endswith(" TO BE SUMMARIZED:"):
            return stripped.removeprefix("THE GIT DIFF OF ").removesuffix(" TO BE SUMMARIZED:")
    raise ValueError("Cannot find `THE GIT DIFF OF ...` in file summary prompt")


def _count_diff_lines(prompt: str) -> tuple[int, int]:
    added = 0
    removed = 0
    for line in prompt.splitlines():
        if line.startswith("+") and not line.startswith("+++"):
            added += 1
        elif line.startswith("-") and not line.startswith("---"):
            removed += 1
    return added, removed


def _decide_mock_response(messages: Sequence[ChatMessage]) -> str:
    user_texts = [m.content for m in messages if m.role == "user"]
    if not user_texts:
        raise ValueError("Mock server expects at least one user message")
    prompt = "\n".join(user_texts)

    filename = _extract_filename_from_prompt(prompt=prompt)
    added, removed = _count_diff_lines(prompt=prompt)
    return (
        "SUMMARY:\n"
        f"* [MOCK] Updated `{filename}`\n"
        f"* [MOCK] {added} line(s) added, {removed} line(s) removed"
    )


app = FastAPI(title="Mock OpenAI-compatible LLM", version="0.1.0")


@app.post("/v1/chat/completions")
async def chat_completions(req: ChatCompletionRequest) -> dict[str, object]:
    content = _decide_mock_response(messages=req.messages)
    return {
        "id": "chatcmpl-mock",
        "object": "chat.completion",
        "created": 0,
        "model": req.model,
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9001)


if __name__ == "__main__":
    main()
