"""
FastAPI application for the code runner.

This module configures the FastAPI application, registers routes for
running snippets and judging submissions against test cases, and
enforces authentication via an API key.  Configuration and the compiler
toolchain are resolved once, at import time, and shared read-only by
every request.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..config import Config
from ..executor import CodeExecutor, ExecutionRequest, TestCase, discover_toolchain, judge
from ..models import ExecuteRequest, ExecuteResponse, JudgeRequest, JudgeResponse, LanguageInfo


logger = logging.getLogger("coderunner")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[coderunner] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


config = Config.from_env()

logger.info(
    "Loaded config: temp_dir=%s, allowed_langs=%s, default_timeout_ms=%s, build_timeout_ms=%s",
    config.temp_dir,
    config.allowed_langs,
    config.default_timeout_ms,
    config.build_timeout_ms,
)

TEMP_DIR_BASE = Path(config.temp_dir)
TEMP_DIR_BASE.mkdir(parents=True, exist_ok=True)

toolchain = discover_toolchain(config.toolchain_probe, config.toolchain_path)

executor = CodeExecutor(
    temp_dir=TEMP_DIR_BASE,
    build_timeout_ms=config.build_timeout_ms,
    toolchain=toolchain,
    allowed_languages=config.allowed_langs,
)


app = FastAPI(title="Code Runner", version="0.1.0")


@app.middleware("http")
async def authenticate(request, call_next):
    """Middleware to enforce API key authentication on all requests.

    Request lines are left to the server's access log; only rejections
    are logged here.
    """
    path = request.url.path
    if config.api_key and path != "/health":
        provided_key = request.headers.get("x-api-key")
        if provided_key != config.api_key:
            client = getattr(request.client, "host", "unknown")
            logger.warning("Invalid API key for %s %s from %s", request.method, path, client)
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})

    return await call_next(request)


def _resolve_timeout(requested: int | None) -> int:
    if requested is None:
        return config.default_timeout_ms
    if requested > config.max_timeout_ms:
        raise HTTPException(
            status_code=400,
            detail=f"timeoutMs must not exceed {config.max_timeout_ms}",
        )
    return requested


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


@app.get("/languages", response_model=List[LanguageInfo])
async def languages() -> List[LanguageInfo]:
    """List the enabled languages and whether their toolchain is installed."""
    search_path = toolchain.environment().get("PATH")
    return [
        LanguageInfo.from_profile(
            profile,
            available=all(shutil.which(binary, path=search_path) for binary in profile.toolchain),
        )
        for profile in executor.supported_languages()
    ]


@app.post("/execute", response_model=ExecuteResponse, response_model_exclude_none=True)
async def execute(req: ExecuteRequest) -> ExecuteResponse:
    """Run one snippet.

    Execution failures (unsupported language, compile errors, timeouts,
    nonzero exits) are part of the normal response, not HTTP errors.
    """
    timeout_ms = _resolve_timeout(req.timeout_ms)
    try:
        result = await executor.execute(
            ExecutionRequest(
                code=req.code,
                language=req.language,
                input=req.input,
                timeout_ms=timeout_ms,
            )
        )
    except Exception as exc:
        logger.exception("[/execute] Unhandled error during execution: %s", exc)
        raise HTTPException(status_code=500, detail="Execution error")

    logger.info(
        "[/execute] %s finished: success=%s, execution_time_ms=%s",
        req.language,
        result.success,
        result.execution_time_ms,
    )
    return ExecuteResponse.from_result(result)


@app.post("/judge", response_model=JudgeResponse)
async def judge_submission(req: JudgeRequest) -> JudgeResponse:
    """Run a submission against every test case and report the verdict."""
    timeout_ms = _resolve_timeout(req.timeout_ms)
    cases = [
        TestCase(input=case.input, expected_output=case.expected_output, description=case.description)
        for case in req.test_cases
    ]
    try:
        report = await judge(executor, req.code, req.language, cases, timeout_ms=timeout_ms)
    except Exception as exc:
        logger.exception("[/judge] Unhandled error during execution: %s", exc)
        raise HTTPException(status_code=500, detail="Execution error")

    logger.info("[/judge] %s: %s/%s passed", req.language, report.passed, report.total)
    return JudgeResponse.from_report(report)
