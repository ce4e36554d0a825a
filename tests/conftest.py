from __future__ import annotations

import shutil
import sys
from pathlib import Path
from types import MappingProxyType

import pytest

from coderunner.executor import PROFILES, CodeExecutor, LanguageProfile

PY = sys.executable

# Python stands in for a compiler: the "build" syntax-checks the source and
# copies it to the artifact path, the "run" executes the artifact.
PY_COMPILED = LanguageProfile(
    language="pycompiled",
    file_extension=".py",
    compile_command=(
        PY,
        "-c",
        "import shutil, sys; "
        "compile(open(sys.argv[1]).read(), sys.argv[1], 'exec'); "
        "shutil.copyfile(sys.argv[1], sys.argv[2])",
        "{source}",
        "{artifact}",
    ),
    run_command=(PY, "{artifact}"),
    toolchain=(PY,),
)

SLOW_COMPILER = LanguageProfile(
    language="slowbuild",
    file_extension=".py",
    compile_command=(PY, "-c", "import time; time.sleep(10)", "{source}"),
    run_command=(PY, "{source}"),
    toolchain=(PY,),
)

MISSING_COMPILER = LanguageProfile(
    language="nocompiler",
    file_extension=".txt",
    compile_command=("coderunner-missing-compiler", "{source}"),
    run_command=(PY, "{source}"),
    toolchain=("coderunner-missing-compiler",),
)

MISSING_RUNTIME = LanguageProfile(
    language="noruntime",
    file_extension=".txt",
    run_command=("coderunner-missing-interpreter", "{source}"),
    toolchain=("coderunner-missing-interpreter",),
)

TEST_PROFILES = MappingProxyType(
    {
        **PROFILES,
        **{
            profile.language: profile
            for profile in (PY_COMPILED, SLOW_COMPILER, MISSING_COMPILER, MISSING_RUNTIME)
        },
    }
)


def toolchain_missing(language: str) -> bool:
    return not all(shutil.which(binary) for binary in PROFILES[language].toolchain)


def requires_toolchain(language: str):
    return pytest.mark.skipif(
        toolchain_missing(language),
        reason=f"{language} toolchain not installed",
    )


@pytest.fixture
def run_dir(tmp_path: Path) -> Path:
    """Base directory for materialized sources; must be empty after every run."""
    path = tmp_path / "runs"
    path.mkdir()
    return path


@pytest.fixture
def executor(run_dir: Path) -> CodeExecutor:
    return CodeExecutor(temp_dir=run_dir, profiles=TEST_PROFILES)
