"""Multi-language code runner.

This package runs source snippets in JavaScript, TypeScript, Python,
C++, Java, Go and Rust as local child processes, with compile-then-run
semantics for compiled languages, a wall-clock timeout, and guaranteed
removal of temporary files.  It backs the practice view of a study
application: each run returns a pass/fail result with trimmed output,
error text and elapsed time.

The top-level modules include:

* ``config`` – configuration handling for environment variables.
* ``models`` – Pydantic models defining request and response schemas.
* ``executor`` – language profiles and the execution engine.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

from .executor import CodeExecutor, ExecutionRequest, ExecutionResult, execute_code

__all__ = ["CodeExecutor", "ExecutionRequest", "ExecutionResult", "execute_code"]
