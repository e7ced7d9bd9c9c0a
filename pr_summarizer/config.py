"""
应用配置加载。

设计目标：
- **严格**：缺少必要环境变量就直接报错（避免“看起来跑了其实没配置好”）
- **类型安全**：使用 Pydantic 校验 URL/数字等，减少运行时踩坑
- **可测试**：核心加载函数接收 `environ` 显式输入，便于单元测试
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field, HttpUrl

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_GITHUB_HTML_BASE_URL = "https://github.com"
DEFAULT_LLM_BASE_URL = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL = "gpt-3.5-turbo"
DEFAULT_LLM_MAX_TOKENS = 512
DEFAULT_LLM_TEMPERATURE = 0.5
DEFAULT_LLM_MAX_PROMPT_CHARS = 20000
DEFAULT_MAX_FILES_TO_SUMMARIZE = 20


class GitHubConfig(BaseModel):
    """GitHub 侧配置。webhook_secret 为空时不挂载 webhook 路由（例如只在 CI 里跑 runner）。"""

    api_base_url: HttpUrl
    html_base_url: HttpUrl
    token: str
    webhook_secret: str | None = None


class LLMConfig(BaseModel):
    """OpenAI-compatible completion 服务配置。"""

    base_url: HttpUrl
    api_key: str
    model: str
    max_tokens: int = Field(gt=0)
    temperature: float = Field(ge=0.0, le=2.0)
    max_prompt_chars: int = Field(gt=0)


class AppConfig(BaseModel):
    """应用运行所需的配置集合。"""

    github: GitHubConfig
    llm: LLMConfig
    max_files_to_summarize: int = Field(gt=0)


def load_config_from_env(environ: Mapping[str, str]) -> AppConfig:
    """
    从环境变量加载并校验配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`AppConfig`
    - **失败**：必填项缺失/为空则抛 `ValueError`；格式错误由 Pydantic 抛 `ValidationError`
    """

    required_keys: tuple[str, ...] = ("GITHUB_TOKEN", "LLM_API_KEY")

    missing: list[str] = [key for key in required_keys if key not in environ or not environ[key]]
    if missing:
        raise ValueError(f"Missing required env vars: {', '.join(missing)}")

    def _get(key: str, default: str) -> str:
        # 空字符串视为未设置（GitHub Actions 里未定义的 secret 会被展开成空串）
        return environ.get(key) or default

    # 交给 Pydantic 做类型校验（例如 URL 合法性、数字范围）
    return AppConfig(
        github=GitHubConfig(
            api_base_url=_get("GITHUB_API_BASE_URL", DEFAULT_GITHUB_API_BASE_URL),
            html_base_url=_get("GITHUB_HTML_BASE_URL", DEFAULT_GITHUB_HTML_BASE_URL),
            token=environ["GITHUB_TOKEN"],
            webhook_secret=environ.get("GITHUB_WEBHOOK_SECRET") or None,
        ),
        llm=LLMConfig(
            base_url=_get("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
            api_key=environ["LLM_API_KEY"],
            model=_get("LLM_MODEL", DEFAULT_LLM_MODEL),
            max_tokens=_get("LLM_MAX_TOKENS", str(DEFAULT_LLM_MAX_TOKENS)),
            temperature=_get("LLM_TEMPERATURE", str(DEFAULT_LLM_TEMPERATURE)),
            max_prompt_chars=_get("LLM_MAX_PROMPT_CHARS", str(DEFAULT_LLM_MAX_PROMPT_CHARS)),
        ),
        max_files_to_summarize=_get("MAX_FILES_TO_SUMMARIZE", str(DEFAULT_MAX_FILES_TO_SUMMARIZE)),
    )
