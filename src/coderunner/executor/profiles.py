"""
Language profiles.

A :class:`LanguageProfile` describes how one language is executed:
which file extension the source gets, whether a build step precedes
the run, and the argv templates for both steps.  The engine treats
these as data, so adding a language means adding a table entry rather
than touching control flow.

Command templates may contain the following placeholders, substituted
per execution by :func:`render_command`:

``{source}``
    Path of the materialized source file.
``{artifact}``
    Path of the compiled binary (native languages only).
``{workdir}``
    Directory owned by the execution (class-directory languages).
``{class_name}``
    Entry class extracted from the source (class-directory languages).
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .errors import UnsupportedLanguageError

EXECUTABLE_SUFFIX = ".exe" if sys.platform == "win32" else ""
DEFAULT_CLASS_NAME = "Main"

_PUBLIC_CLASS_PATTERN = re.compile(r"public\s+class\s+(\w+)")

_PYTHON = "python" if sys.platform == "win32" else "python3"

_CPP_FLAGS: Tuple[str, ...] = ("-std=c++17", "-static-libgcc", "-static-libstdc++")
if sys.platform == "win32":
    # MinGW builds otherwise depend on DLLs that may not be on PATH at run time.
    _CPP_FLAGS += ("-Wl,-Bstatic", "-lstdc++", "-lpthread", "-Wl,-Bdynamic")


@dataclass(frozen=True)
class LanguageProfile:
    """Static execution strategy for one language."""

    language: str
    file_extension: str
    run_command: Tuple[str, ...]
    toolchain: Tuple[str, ...]
    compile_command: Optional[Tuple[str, ...]] = None
    wraps_entry_point: bool = False
    uses_class_directory: bool = False

    @property
    def needs_compilation(self) -> bool:
        return self.compile_command is not None

    @property
    def produces_artifact(self) -> bool:
        """Whether the build writes a native binary at ``{artifact}``."""
        templates = (self.compile_command or ()) + self.run_command
        return any("{artifact}" in part for part in templates)


def _build_profiles(profiles: Iterable[LanguageProfile]) -> Mapping[str, LanguageProfile]:
    return MappingProxyType({profile.language: profile for profile in profiles})


PROFILES: Mapping[str, LanguageProfile] = _build_profiles(
    [
        LanguageProfile(
            language="javascript",
            file_extension=".js",
            run_command=("node", "{source}"),
            toolchain=("node",),
            wraps_entry_point=True,
        ),
        LanguageProfile(
            language="typescript",
            file_extension=".ts",
            run_command=("tsx", "{source}"),
            toolchain=("tsx",),
            wraps_entry_point=True,
        ),
        LanguageProfile(
            language="python",
            file_extension=".py",
            run_command=(_PYTHON, "{source}"),
            toolchain=(_PYTHON,),
        ),
        LanguageProfile(
            language="cpp",
            file_extension=".cpp",
            compile_command=("g++", "{source}", "-o", "{artifact}") + _CPP_FLAGS,
            run_command=("{artifact}",),
            toolchain=("g++",),
        ),
        LanguageProfile(
            language="java",
            file_extension=".java",
            compile_command=("javac", "-d", "{workdir}", "{source}"),
            run_command=("java", "-cp", "{workdir}", "{class_name}"),
            toolchain=("javac", "java"),
            uses_class_directory=True,
        ),
        # `go run` compiles and executes in one step, so there is no build stage.
        LanguageProfile(
            language="go",
            file_extension=".go",
            run_command=("go", "run", "{source}"),
            toolchain=("go",),
        ),
        LanguageProfile(
            language="rust",
            file_extension=".rs",
            compile_command=("rustc", "{source}", "-o", "{artifact}"),
            run_command=("{artifact}",),
            toolchain=("rustc",),
        ),
    ]
)


def resolve_profile(
    language: str,
    allowed: Optional[Iterable[str]] = None,
    profiles: Mapping[str, LanguageProfile] = PROFILES,
) -> LanguageProfile:
    """Return the profile for ``language``.

    Raises
    ------
    UnsupportedLanguageError
        If the language is unknown or not in ``allowed``.
    """
    key = (language or "").strip().lower()
    profile = profiles.get(key)
    if profile is None:
        raise UnsupportedLanguageError(language)
    if allowed is not None and key not in set(allowed):
        raise UnsupportedLanguageError(language)
    return profile


def render_command(template: Iterable[str], **fields: str) -> list[str]:
    return [part.format(**fields) for part in template]


def extract_class_name(code: str, default: str = DEFAULT_CLASS_NAME) -> str:
    """Best-effort lookup of the ``public class <Name>`` declaration."""
    match = _PUBLIC_CLASS_PATTERN.search(code)
    return match.group(1) if match else default
