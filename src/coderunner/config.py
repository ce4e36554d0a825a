"""Configuration loader.

The code runner reads its configuration from environment variables so
the same install can run as a local desktop helper or as a service.
Defaults are chosen so that local development works out of the box.

Environment variables:

``CODERUNNER_API_KEY``
    Shared secret checked against the ``x-api-key`` header.  Empty
    disables the check.

``CODERUNNER_TEMP_DIR``
    Base directory for materialized sources and build artifacts.
    Defaults to the system temp directory.

``CODERUNNER_ALLOWED_LANGS``
    Comma-separated list of languages permitted for execution.  Defaults
    to every language with a profile.

``CODERUNNER_DEFAULT_TIMEOUT_MS``
    Run timeout used when a request does not give one.  Default 10000.

``CODERUNNER_BUILD_TIMEOUT_MS``
    Fixed ceiling for the compile step.  Default 30000.

``CODERUNNER_MAX_TIMEOUT_MS``
    Largest run timeout a client may request.  Default 60000.

``CODERUNNER_TOOLCHAIN_PROBE``
    Compiler binary located at startup to find the toolchain directory
    that is added to ``PATH``.  Defaults to ``g++``.

``CODERUNNER_TOOLCHAIN_PATH``
    Extra directories (``os.pathsep`` separated) searched for the probe,
    e.g. a MinGW ``bin`` directory that is not on ``PATH``.

``PORT``
    The port on which the API server listens.  Defaults to 8080.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from .executor.engine import BUILD_TIMEOUT_MS, DEFAULT_TIMEOUT_MS
from .executor.profiles import PROFILES
from .executor.toolchain import DEFAULT_PROBE


@dataclass
class Config:
    """Centralised configuration object."""

    api_key: str
    temp_dir: str
    allowed_langs: List[str]
    default_timeout_ms: int
    build_timeout_ms: int
    max_timeout_ms: int
    toolchain_probe: str
    toolchain_path: Optional[str]
    port: int

    @classmethod
    def load(cls) -> "Config":
        # API key may be empty in local development but should be set when exposed.
        api_key = os.getenv("CODERUNNER_API_KEY", "")
        temp_dir = os.getenv("CODERUNNER_TEMP_DIR") or tempfile.gettempdir()

        allowed_langs_env = os.getenv("CODERUNNER_ALLOWED_LANGS")
        if allowed_langs_env:
            allowed_langs = [lang.strip().lower() for lang in allowed_langs_env.split(",") if lang.strip()]
            unknown = [lang for lang in allowed_langs if lang not in PROFILES]
            if unknown:
                raise ValueError(f"Invalid CODERUNNER_ALLOWED_LANGS entries: {', '.join(unknown)}")
        else:
            allowed_langs = list(PROFILES)

        def _int_var(name: str, default: int) -> int:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                parsed = int(val)
            except ValueError:
                raise ValueError(f"Invalid integer for {name}: {val}")
            if parsed <= 0:
                raise ValueError(f"{name} must be positive, got {parsed}")
            return parsed

        default_timeout_ms = _int_var("CODERUNNER_DEFAULT_TIMEOUT_MS", DEFAULT_TIMEOUT_MS)
        build_timeout_ms = _int_var("CODERUNNER_BUILD_TIMEOUT_MS", BUILD_TIMEOUT_MS)
        max_timeout_ms = _int_var("CODERUNNER_MAX_TIMEOUT_MS", 60000)
        if default_timeout_ms > max_timeout_ms:
            raise ValueError(
                "CODERUNNER_DEFAULT_TIMEOUT_MS must not exceed CODERUNNER_MAX_TIMEOUT_MS"
            )
        port = _int_var("PORT", 8080)

        return cls(
            api_key=api_key,
            temp_dir=temp_dir,
            allowed_langs=allowed_langs,
            default_timeout_ms=default_timeout_ms,
            build_timeout_ms=build_timeout_ms,
            max_timeout_ms=max_timeout_ms,
            toolchain_probe=os.getenv("CODERUNNER_TOOLCHAIN_PROBE", DEFAULT_PROBE),
            toolchain_path=os.getenv("CODERUNNER_TOOLCHAIN_PATH") or None,
            port=port,
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        """
        return cls.load()
