import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse, StreamingResponse

from readme_wtf import core, github, llm, models, prompts

logger = logging.getLogger(__name__)


app = FastAPI(title="README.wtf")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=models.ErrorResponse(error=message).model_dump(),
    )


@app.exception_handler(github.GitHubError)
async def github_error_handler(request: Request, exc: github.GitHubError) -> JSONResponse:
    logger.error(f"GitHub error: {exc}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(core.AnalysisFailed)
async def analysis_error_handler(request: Request, exc: core.AnalysisFailed) -> JSONResponse:
    return _error(exc.status_code, exc.message)


@app.exception_handler(llm.LLMError)
async def llm_error_handler(request: Request, exc: llm.LLMError) -> JSONResponse:
    logger.error(f"LLM error: {exc}")
    return _error(502, f"Failed to generate response: {exc}")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
    )
    return _error(422, messages)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error")
    return _error(500, "Internal server error")


@app.get("/")
async def root():
    return {
        "service": "README.wtf",
        "usage": "POST /analyze with {\"repo_url\": \"https://github.com/owner/repo\"}, "
        "then POST /chat with the returned context",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/analyze", response_model=models.AnalyzeResponse)
async def analyze(request: models.AnalyzeRequest) -> models.AnalyzeResponse:
    ctx = await core.analyze_repo(request.repo_url)
    return models.AnalyzeResponse(
        success=True,
        data=ctx,
        message=prompts.build_initial_message(ctx),
    )


@app.post("/chat")
async def chat(request: models.ChatRequest) -> StreamingResponse:
    chunks = await core.stream_readme(request)
    return StreamingResponse(
        chunks,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
