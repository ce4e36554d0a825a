"""
Failure taxonomy for the execution engine.

Every failure an execution can end in is classified by a
:class:`FailureKind`.  The stages that abort an execution early
(resolving the language, writing the source, compiling) raise a
:class:`CodeRunnerError` subclass; the engine catches these and turns
them into an ``ExecutionResult`` so callers never see an exception.
Run-stage outcomes (timeouts, nonzero exits, spawn failures) are
classified directly from the process outcome.
"""

from __future__ import annotations

import enum

COMPILATION_PREFIX = "Compilation error:"
TIMEOUT_MESSAGE = "Execution timed out"


class FailureKind(str, enum.Enum):
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    MATERIALIZATION = "materialization"
    COMPILATION = "compilation"
    TIMEOUT = "timeout"
    RUNTIME = "runtime"
    SPAWN = "spawn"


class CodeRunnerError(Exception):
    """Base class for errors that end an execution before it completes."""

    kind: FailureKind = FailureKind.RUNTIME

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnsupportedLanguageError(CodeRunnerError):
    kind = FailureKind.UNSUPPORTED_LANGUAGE

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class MaterializationError(CodeRunnerError):
    kind = FailureKind.MATERIALIZATION


class CompilationError(CodeRunnerError):
    """Raised when the build stage exits nonzero, times out or cannot start.

    The message always starts with :data:`COMPILATION_PREFIX` so a UI can
    tell compiler diagnostics apart from runtime errors.
    """

    kind = FailureKind.COMPILATION

    def __init__(self, diagnostics: str) -> None:
        super().__init__(f"{COMPILATION_PREFIX}\n{diagnostics}")
        self.diagnostics = diagnostics
