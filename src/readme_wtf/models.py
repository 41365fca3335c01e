from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

ReadmeStyle = Literal["professional", "casual", "minimal"]


class FileContent(BaseModel):
    model_config = ConfigDict(frozen=True)
    path: str
    content: str


class RepoContext(BaseModel):
    model_config = ConfigDict(frozen=True)
    owner: str
    repo: str
    url: str
    file_tree: tuple[str, ...]
    package_manifest: dict[str, Any] | None = None
    key_files: tuple[FileContent, ...]
    existing_readme: str | None = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class AnalyzeRequest(BaseModel):
    repo_url: str = ""


class AnalyzeResponse(BaseModel):
    success: bool
    data: RepoContext | None = None
    message: str | None = None
    error: str | None = None


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []
    repo_context: RepoContext
    style: ReadmeStyle = "professional"


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
