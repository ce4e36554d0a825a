"""
Run a submission against a problem's test cases.

Each test case is executed on its own, one after another, with the case
input as stdin (and as auto-wrap arguments for script languages).  A
case passes when the program succeeded and its trimmed output equals
the trimmed expected output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .engine import DEFAULT_TIMEOUT_MS, CodeExecutor, ExecutionRequest


@dataclass(frozen=True)
class TestCase:
    input: str
    expected_output: str
    description: Optional[str] = None

    __test__ = False  # keep pytest from collecting this class


@dataclass
class CaseResult:
    index: int
    passed: bool
    input: str
    expected: str
    actual: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: Optional[int] = None

    def summary(self) -> str:
        label = f"Test {self.index + 1}"
        if self.passed:
            return f"{label}: Passed ✓"
        if self.error is not None:
            return f"{label}: Failed ✗\n  Error: {self.error}"
        return (
            f"{label}: Failed ✗\n"
            f"  Input: {self.input}\n"
            f"  Expected: {self.expected}\n"
            f"  Got: {self.actual or '(no output)'}"
        )


@dataclass
class JudgeReport:
    cases: List[CaseResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and self.passed == self.total

    @property
    def total_time_ms(self) -> int:
        return sum(case.execution_time_ms or 0 for case in self.cases if case.error is None)

    @property
    def status(self) -> str:
        return "passed" if self.all_passed else "failed"

    def summary_lines(self) -> List[str]:
        lines: List[str] = []
        if self.total_time_ms > 0:
            lines.extend([f"Total execution time: {self.total_time_ms}ms", ""])
        lines.extend(case.summary() for case in self.cases)
        return lines


async def judge(
    executor: CodeExecutor,
    code: str,
    language: str,
    test_cases: Sequence[TestCase],
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> JudgeReport:
    report = JudgeReport()
    for index, case in enumerate(test_cases):
        result = await executor.execute(
            ExecutionRequest(code=code, language=language, input=case.input, timeout_ms=timeout_ms)
        )
        expected = case.expected_output.strip()
        if not result.success:
            report.cases.append(
                CaseResult(
                    index=index,
                    passed=False,
                    input=case.input,
                    expected=expected,
                    actual=result.output,
                    error=result.error or "Unknown error",
                    execution_time_ms=result.execution_time_ms,
                )
            )
            continue

        actual = (result.output or "").strip()
        report.cases.append(
            CaseResult(
                index=index,
                passed=actual == expected,
                input=case.input,
                expected=expected,
                actual=actual,
                execution_time_ms=result.execution_time_ms,
            )
        )
    return report
