"""
The code execution engine.

:class:`CodeExecutor` turns an :class:`ExecutionRequest` into exactly one
:class:`ExecutionResult`:

1. resolve the language profile (unknown languages fail before any file
   or process is created),
2. materialize the source, auto-wrapped for script languages when input
   is given,
3. run the build stage if the profile has a compile command,
4. run the program with the request's stdin and timeout,
5. remove every temporary file, whatever happened above.

Failures are reported in the result, never raised.  Compiler
diagnostics carry a ``Compilation error:`` prefix so that they can be
told apart from runtime errors.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import (
    TIMEOUT_MESSAGE,
    CodeRunnerError,
    CompilationError,
    FailureKind,
    UnsupportedLanguageError,
)
from .process import ProcessOutcome, run_process
from .profiles import PROFILES, LanguageProfile, render_command, resolve_profile
from .toolchain import DEFAULT_PROBE, Toolchain, discover_toolchain
from .workspace import ExecutionContext
from .wrapping import wrap_source

logger = logging.getLogger("coderunner.engine")

DEFAULT_TIMEOUT_MS = 10000
BUILD_TIMEOUT_MS = 30000


@dataclass(frozen=True)
class ExecutionRequest:
    code: str
    language: str
    input: str = ""
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass
class ExecutionResult:
    """Outcome of one execution.

    ``success`` is true only when the program ran and exited with status
    zero, in which case ``output`` holds the trimmed stdout.  Failed runs
    set ``error``; ``output`` may still hold stdout printed before a
    runtime failure.  ``execution_time_ms`` is only set when the program
    actually ran to completion.  ``failure`` classifies the failure for
    callers that need more than the message.
    """

    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: Optional[int] = None
    failure: Optional[FailureKind] = None

    @classmethod
    def from_error(cls, exc: CodeRunnerError) -> "ExecutionResult":
        return cls(success=False, error=exc.message, failure=exc.kind)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation: camelCase keys, unset fields omitted."""
        data: Dict[str, Any] = {"success": self.success}
        if self.output is not None:
            data["output"] = self.output
        if self.error is not None:
            data["error"] = self.error
        if self.execution_time_ms is not None:
            data["executionTimeMs"] = self.execution_time_ms
        return data


class CodeExecutor:
    """Execute source snippets in any configured language.

    One instance can serve many concurrent :meth:`execute` calls; it only
    holds read-only configuration.
    """

    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        build_timeout_ms: int = BUILD_TIMEOUT_MS,
        toolchain: Optional[Toolchain] = None,
        allowed_languages: Optional[Iterable[str]] = None,
        profiles: Mapping[str, LanguageProfile] = PROFILES,
    ) -> None:
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        self.build_timeout_ms = build_timeout_ms
        self.toolchain = toolchain or Toolchain(probe=DEFAULT_PROBE)
        self.allowed_languages = (
            frozenset(lang.lower() for lang in allowed_languages)
            if allowed_languages is not None
            else None
        )
        self.profiles = profiles

    def supported_languages(self) -> list[LanguageProfile]:
        return [
            profile
            for name, profile in self.profiles.items()
            if self.allowed_languages is None or name in self.allowed_languages
        ]

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        try:
            profile = resolve_profile(request.language, self.allowed_languages, self.profiles)
        except UnsupportedLanguageError as exc:
            logger.warning("Rejected execution: %s", exc.message)
            return ExecutionResult.from_error(exc)

        context = ExecutionContext.create(self.temp_dir)
        logger.info("Executing %s code (id=%s)", profile.language, context.execution_id)
        try:
            code = request.code
            if profile.wraps_entry_point and request.input:
                code = wrap_source(code, request.input)
            context.materialize(profile, code)
            env = self.toolchain.environment()
            if profile.needs_compilation:
                await self._build(profile, context, env)
            return await self._run(profile, context, env, request)
        except CodeRunnerError as exc:
            return ExecutionResult.from_error(exc)
        finally:
            context.cleanup()

    async def _build(
        self,
        profile: LanguageProfile,
        context: ExecutionContext,
        env: Mapping[str, str],
    ) -> None:
        argv = render_command(profile.compile_command or (), **context.command_fields())
        outcome = await run_process(
            argv,
            stdin_data=None,
            timeout_ms=self.build_timeout_ms,
            env=env,
            cwd=str(context.workdir),
        )
        if outcome.ok:
            logger.debug("Built %s in %sms", context.execution_id, outcome.duration_ms)
            return

        if outcome.timed_out:
            diagnostics = f"Compilation timed out after {self.build_timeout_ms}ms"
        elif outcome.spawn_error is not None:
            diagnostics = f"Failed to execute {argv[0]}: {outcome.spawn_error}"
        else:
            diagnostics = (
                outcome.stderr.strip()
                or outcome.stdout.strip()
                or f"Compiler exited with code {outcome.returncode}"
            )
        logger.info("Compilation failed for %s (id=%s)", profile.language, context.execution_id)
        raise CompilationError(diagnostics)

    async def _run(
        self,
        profile: LanguageProfile,
        context: ExecutionContext,
        env: Mapping[str, str],
        request: ExecutionRequest,
    ) -> ExecutionResult:
        argv = render_command(profile.run_command, **context.command_fields())
        context.mark_started()
        outcome = await run_process(
            argv,
            stdin_data=request.input or "",
            timeout_ms=max(1, int(request.timeout_ms)),
            env=env,
            cwd=str(context.workdir),
        )
        return self._classify(outcome, context.elapsed_ms())

    @staticmethod
    def _classify(outcome: ProcessOutcome, elapsed_ms: Optional[int]) -> ExecutionResult:
        if outcome.spawn_error is not None:
            return ExecutionResult(
                success=False,
                error=f"Failed to execute: {outcome.spawn_error}",
                failure=FailureKind.SPAWN,
            )
        if outcome.timed_out:
            return ExecutionResult(success=False, error=TIMEOUT_MESSAGE, failure=FailureKind.TIMEOUT)

        output = outcome.stdout.strip()
        if outcome.returncode == 0:
            return ExecutionResult(success=True, output=output, execution_time_ms=elapsed_ms)
        return ExecutionResult(
            success=False,
            output=output,
            error=outcome.stderr.strip() or f"Process exited with code {outcome.returncode}",
            execution_time_ms=elapsed_ms,
            failure=FailureKind.RUNTIME,
        )


_default_executor: Optional[CodeExecutor] = None


async def execute_code(
    code: str,
    language: str,
    input: str = "",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> ExecutionResult:
    """Run ``code`` with a process-wide default :class:`CodeExecutor`."""
    global _default_executor
    if _default_executor is None:
        _default_executor = CodeExecutor(toolchain=discover_toolchain())
    return await _default_executor.execute(
        ExecutionRequest(code=code, language=language, input=input, timeout_ms=timeout_ms)
    )
