"""
Auto-wrapping of script sources.

Practice problems give their input as ``name = value`` assignments, for
example ``nums = [1, 2, 3], target = 6``.  For the script languages a
submission is usually just a function, so before running it the source
is extended with a call to that function using the right-hand sides of
the assignments as arguments, and a print of the result.

This is a heuristic, not a parser.  The function is the first
``function <name>(`` declaration in the source, and arguments are split
at top-level commas that start a new ``name =`` assignment.  Quotes and
brackets are respected when splitting, but an expression such as
``f(a = 1, b = 2)`` inside a value is not understood.
"""

from __future__ import annotations

import re
from typing import List, Optional

_FUNCTION_PATTERN = re.compile(
    r"\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)\s*(?:<[^>()]*>)?\s*\("
)
_ASSIGNMENT_PATTERN = re.compile(r"^\s*[A-Za-z_$][\w$]*\s*=(?!=)\s*(.*)$", re.DOTALL)
_NEXT_ASSIGNMENT_PATTERN = re.compile(r"\s*[A-Za-z_$][\w$]*\s*=(?!=)")

_OPENERS = "([{"
_CLOSERS = ")]}"
_QUOTES = "\"'`"

_RUNNER_TEMPLATE = """
{code}

// Auto-generated test runner
Promise.resolve({name}({args})).then((__result__) => {{
  console.log(typeof __result__ === 'object' ? JSON.stringify(__result__) : String(__result__));
}});
"""


def find_entry_function(code: str) -> Optional[str]:
    match = _FUNCTION_PATTERN.search(code)
    return match.group(1) if match else None


def _split_top_level(text: str) -> List[str]:
    """Split ``text`` before every top-level ``name =`` assignment."""
    segments: List[str] = []
    current: List[str] = []
    depth = 0
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is not None:
            current.append(ch)
            if ch == "\\" and i + 1 < len(text):
                current.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
            current.append(ch)
        elif ch in _OPENERS:
            depth += 1
            current.append(ch)
        elif ch in _CLOSERS:
            depth = max(0, depth - 1)
            current.append(ch)
        elif ch in ",\n" and depth == 0 and _NEXT_ASSIGNMENT_PATTERN.match(text, i + 1):
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    segments.append("".join(current))
    return segments


def parse_arguments(input_text: str) -> List[str]:
    """Turn ``a = 2, b = [1, 2]`` into ``["2", "[1, 2]"]``.

    Input without any ``name =`` assignment is passed through as a single
    argument, so ``[1, 2, 3]`` becomes ``["[1, 2, 3]"]``.
    """
    text = input_text.strip()
    if not text:
        return []

    args: List[str] = []
    named = False
    for segment in _split_top_level(text):
        match = _ASSIGNMENT_PATTERN.match(segment)
        if match:
            named = True
            value = match.group(1).strip()
        else:
            value = segment.strip()
        if value:
            args.append(value)

    if not named:
        return [text]
    return args


def wrap_source(code: str, input_text: str) -> str:
    """Append a call to the entry function, or return ``code`` unchanged."""
    if not input_text or not input_text.strip():
        return code
    name = find_entry_function(code)
    if name is None:
        return code
    args = ", ".join(parse_arguments(input_text))
    return _RUNNER_TEMPLATE.format(code=code, name=name, args=args)
