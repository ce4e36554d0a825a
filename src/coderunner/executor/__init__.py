"""
Execution engine for the code runner.

The engine is data driven: every supported language is described by a
``LanguageProfile`` in ``profiles.py``, and ``CodeExecutor`` interprets
those profiles generically (materialize the source, build if the
profile has a compile command, run, clean up).  New languages are added
by adding a profile, not by subclassing.
"""

from .engine import (
    BUILD_TIMEOUT_MS,
    DEFAULT_TIMEOUT_MS,
    CodeExecutor,
    ExecutionRequest,
    ExecutionResult,
    execute_code,
)
from .errors import (
    CodeRunnerError,
    CompilationError,
    FailureKind,
    MaterializationError,
    UnsupportedLanguageError,
)
from .judge import CaseResult, JudgeReport, TestCase, judge
from .profiles import PROFILES, LanguageProfile, resolve_profile
from .toolchain import Toolchain, discover_toolchain

__all__ = [
    "BUILD_TIMEOUT_MS",
    "DEFAULT_TIMEOUT_MS",
    "CodeExecutor",
    "ExecutionRequest",
    "ExecutionResult",
    "execute_code",
    "CodeRunnerError",
    "CompilationError",
    "FailureKind",
    "MaterializationError",
    "UnsupportedLanguageError",
    "CaseResult",
    "JudgeReport",
    "TestCase",
    "judge",
    "PROFILES",
    "LanguageProfile",
    "resolve_profile",
    "Toolchain",
    "discover_toolchain",
]
