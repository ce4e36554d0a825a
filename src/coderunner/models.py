"""Pydantic models for request and response bodies.

Field names are snake_case in Python and camelCase on the wire
(``timeoutMs``, ``executionTimeMs``, ``expectedOutput``) to match the
desktop client.  Both spellings are accepted on input.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .executor import CaseResult, ExecutionResult, JudgeReport, LanguageProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecuteRequest(_CamelModel):
    """Request body for running a snippet."""

    code: str = Field(..., description="Source code to execute.")
    language: str = Field(
        ...,
        description="One of: javascript, typescript, python, cpp, java, go, rust.",
    )
    input: str = Field(default="", description="Standard input passed to the program.")
    timeout_ms: Optional[int] = Field(
        default=None,
        gt=0,
        description="Run timeout in milliseconds. Uses the server default if omitted.",
    )


class ExecuteResponse(_CamelModel):
    """Response body for code execution."""

    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: Optional[int] = None

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "ExecuteResponse":
        return cls(
            success=result.success,
            output=result.output,
            error=result.error,
            execution_time_ms=result.execution_time_ms,
        )


class TestCaseModel(_CamelModel):
    input: str = ""
    expected_output: str
    description: Optional[str] = None


class JudgeRequest(_CamelModel):
    """Request body for running a submission against test cases."""

    code: str
    language: str
    test_cases: List[TestCaseModel] = Field(..., min_length=1)
    timeout_ms: Optional[int] = Field(default=None, gt=0)


class CaseResultModel(_CamelModel):
    index: int
    passed: bool
    input: str
    expected: str
    actual: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: Optional[int] = None
    summary: str

    @classmethod
    def from_case(cls, case: CaseResult) -> "CaseResultModel":
        return cls(
            index=case.index,
            passed=case.passed,
            input=case.input,
            expected=case.expected,
            actual=case.actual,
            error=case.error,
            execution_time_ms=case.execution_time_ms,
            summary=case.summary(),
        )


class JudgeResponse(_CamelModel):
    """Aggregated verdict for a submission."""

    status: str
    passed: int
    total: int
    all_passed: bool
    total_time_ms: int
    cases: List[CaseResultModel] = Field(default_factory=list)
    lines: List[str] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: JudgeReport) -> "JudgeResponse":
        return cls(
            status=report.status,
            passed=report.passed,
            total=report.total,
            all_passed=report.all_passed,
            total_time_ms=report.total_time_ms,
            cases=[CaseResultModel.from_case(case) for case in report.cases],
            lines=report.summary_lines(),
        )


class LanguageInfo(_CamelModel):
    language: str
    compiled: bool
    toolchain: List[str]
    available: bool

    @classmethod
    def from_profile(cls, profile: LanguageProfile, available: bool) -> "LanguageInfo":
        return cls(
            language=profile.language,
            compiled=profile.needs_compilation,
            toolchain=list(profile.toolchain),
            available=available,
        )
