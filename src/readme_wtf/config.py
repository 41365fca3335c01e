from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_CONTEXT_TOKENS = 50_000  # estimated tokens of file content
MAX_TREE_FILES = 200  # paths kept in RepoContext.file_tree
MAX_MATCHES_PER_PATTERN = 3  # files taken per source pattern


class LLMConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LLM_", env_file=".env", extra="ignore")
    api_key: str | None = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    model_name: str = "gemini-2.5-flash"
    temperature: float = 0.3
    timeout: float = 120.0


class ContextConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CONTEXT_", env_file=".env", extra="ignore")
    max_context_tokens: int = MAX_CONTEXT_TOKENS
    max_tree_files: int = MAX_TREE_FILES
    max_matches_per_pattern: int = MAX_MATCHES_PER_PATTERN
    prompt_tree_files: int = 100  # paths rendered into the system prompt


class GitHubConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GITHUB_", env_file=".env", extra="ignore")
    api_url: str = "https://api.github.com"
    timeout: float = 30.0


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    llm: LLMConfig = Field(default_factory=LLMConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)


@lru_cache
def get_config() -> Config:
    return Config()


IGNORE_PATTERNS = (
    r"node_modules",
    r"(?:^|/)\.git(?:/|$)",
    r"(?:^|/)dist/",
    r"(?:^|/)build/",
    r"(?:^|/)\.next/",
    r"(?:^|/)\.cache(?:/|$)",
    r"(?:^|/)coverage/",
    r"\.min\.(?:js|css)$",
    r"package-lock\.json$",
    r"yarn\.lock$",
    r"pnpm-lock\.yaml$",
)

# Fetch order, not alphabetical
PRIORITY_FILES = (
    "package.json",
    "README.md",
    "tsconfig.json",
    "pyproject.toml",
    "Cargo.toml",
    "go.mod",
    "requirements.txt",
    ".env.example",
    "docker-compose.yml",
    "docker-compose.yaml",
    "Dockerfile",
)

SOURCE_PATTERNS = (
    r"^src/index\.(?:ts|tsx|js|jsx)$",
    r"^src/app/.*page\.(?:ts|tsx)$",
    r"^src/main\.(?:ts|tsx|js|jsx|py|rs|go)$",
    r"^lib/.*\.(?:ts|tsx|js|jsx)$",
    r"^app/.*\.(?:ts|tsx|js|jsx)$",
)

MANIFEST_FILENAME = "package.json"
README_FILENAME = "readme.md"
