"""
End-to-end runs against the real toolchains.

Each test is skipped when the language's binaries are not installed.
"""

from __future__ import annotations

import pytest

from coderunner.executor import ExecutionRequest, FailureKind
from conftest import requires_toolchain

HELLO = {
    "javascript": 'console.log("hello");\n',
    "typescript": 'const greeting: string = "hello";\nconsole.log(greeting);\n',
    "python": 'print("hello")\n',
    "cpp": '#include <iostream>\nint main() {\n    std::cout << "hello" << std::endl;\n    return 0;\n}\n',
    "java": (
        "public class Hello {\n"
        "    public static void main(String[] args) {\n"
        '        System.out.println("hello");\n'
        "    }\n"
        "}\n"
    ),
    "go": 'package main\n\nimport "fmt"\n\nfunc main() {\n\tfmt.Println("hello")\n}\n',
    "rust": 'fn main() {\n    println!("hello");\n}\n',
}

BROKEN = {
    "cpp": "int main() { return undefined_symbol }\n",
    "java": "public class Broken { public static void main(String[] args) { int x = ; } }\n",
    "rust": "fn main() { let x: i32 = \"nope\"; }\n",
}

ECHO = {
    "cpp": (
        "#include <iostream>\n#include <string>\n"
        "int main() { std::string line; while (std::getline(std::cin, line)) std::cout << line << '\\n'; }\n"
    ),
    "java": (
        "import java.util.Scanner;\n"
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "        Scanner in = new Scanner(System.in);\n"
        "        while (in.hasNextLine()) System.out.println(in.nextLine());\n"
        "    }\n"
        "}\n"
    ),
    "rust": (
        "use std::io::Read;\n"
        "fn main() { let mut s = String::new(); std::io::stdin().read_to_string(&mut s).unwrap(); print!(\"{}\", s); }\n"
    ),
}

SLOW_LANGUAGES = {"java", "go", "rust", "typescript"}


def _timeout(language: str) -> int:
    return 60000 if language in SLOW_LANGUAGES else 10000


@pytest.mark.parametrize(
    "language",
    [pytest.param(lang, marks=requires_toolchain(lang)) for lang in HELLO],
)
@pytest.mark.asyncio
async def test_hello_in_every_language(executor, run_dir, language):
    result = await executor.execute(
        ExecutionRequest(code=HELLO[language], language=language, timeout_ms=_timeout(language))
    )

    assert result.error is None
    assert result.success is True
    assert result.output == "hello"
    assert list(run_dir.iterdir()) == []


@pytest.mark.parametrize(
    "language",
    [pytest.param(lang, marks=requires_toolchain(lang)) for lang in BROKEN],
)
@pytest.mark.asyncio
async def test_compile_errors(executor, run_dir, language):
    result = await executor.execute(
        ExecutionRequest(code=BROKEN[language], language=language, timeout_ms=_timeout(language))
    )

    assert result.success is False
    assert result.failure is FailureKind.COMPILATION
    assert result.error.startswith("Compilation error:\n")
    assert len(result.error) > len("Compilation error:\n")
    assert result.execution_time_ms is None
    assert list(run_dir.iterdir()) == []


@pytest.mark.parametrize(
    "language",
    [pytest.param(lang, marks=requires_toolchain(lang)) for lang in ECHO],
)
@pytest.mark.asyncio
async def test_compiled_programs_read_stdin(executor, run_dir, language):
    result = await executor.execute(
        ExecutionRequest(
            code=ECHO[language],
            language=language,
            input="3 4\nfive\n",
            timeout_ms=_timeout(language),
        )
    )

    assert result.success is True
    assert result.output == "3 4\nfive"
    assert list(run_dir.iterdir()) == []


@requires_toolchain("java")
@pytest.mark.asyncio
async def test_java_without_public_class_uses_main(executor):
    code = "class Main { public static void main(String[] a) { System.out.println(7); } }\n"
    result = await executor.execute(ExecutionRequest(code=code, language="java", timeout_ms=60000))

    assert result.success is True
    assert result.output == "7"


@requires_toolchain("go")
@pytest.mark.asyncio
async def test_go_compile_error_is_a_runtime_failure(executor, run_dir):
    code = "package main\n\nfunc main() {\n\tundefinedCall()\n}\n"
    result = await executor.execute(ExecutionRequest(code=code, language="go", timeout_ms=60000))

    assert result.success is False
    assert result.failure is FailureKind.RUNTIME
    assert "undefined" in result.error
    assert list(run_dir.iterdir()) == []


@requires_toolchain("javascript")
@pytest.mark.asyncio
async def test_javascript_function_is_auto_wrapped(executor):
    code = "function add(a, b) { return a + b }"
    result = await executor.execute(ExecutionRequest(code=code, language="javascript", input="a = 2, b = 3"))

    assert result.success is True
    assert result.output == "5"


@requires_toolchain("javascript")
@pytest.mark.asyncio
async def test_javascript_structured_result_is_json(executor):
    code = (
        "function twoSum(nums, target) {\n"
        "  const seen = new Map();\n"
        "  for (let i = 0; i < nums.length; i++) {\n"
        "    if (seen.has(target - nums[i])) return [seen.get(target - nums[i]), i];\n"
        "    seen.set(nums[i], i);\n"
        "  }\n"
        "  return null;\n"
        "}\n"
    )
    result = await executor.execute(
        ExecutionRequest(code=code, language="javascript", input="nums = [2,7,11,15], target = 9")
    )

    assert result.success is True
    assert result.output == "[0,1]"


@requires_toolchain("javascript")
@pytest.mark.asyncio
async def test_javascript_without_input_runs_unmodified(executor):
    code = "function add(a, b) { return a + b }\nconsole.log('plain');\n"
    result = await executor.execute(ExecutionRequest(code=code, language="javascript"))

    assert result.success is True
    assert result.output == "plain"


@requires_toolchain("typescript")
@pytest.mark.asyncio
async def test_typescript_function_is_auto_wrapped(executor):
    code = "function isValid(s: string): boolean {\n  return s.length % 2 === 0;\n}\n"
    result = await executor.execute(
        ExecutionRequest(code=code, language="typescript", input='s = "()"', timeout_ms=60000)
    )

    assert result.success is True
    assert result.output == "true"
