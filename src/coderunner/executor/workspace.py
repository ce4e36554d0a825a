"""
Per-execution workspace.

Each execution owns an :class:`ExecutionContext`: a unique identifier
and the paths derived from it inside a shared base directory (the
system temp dir by default).  Concurrent executions never touch each
other's files because every path embeds the identifier.  The context
removes everything it created in :meth:`ExecutionContext.cleanup`,
which is safe to call more than once.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import MaterializationError
from .profiles import EXECUTABLE_SUFFIX, LanguageProfile, extract_class_name

logger = logging.getLogger("coderunner.workspace")


def new_execution_id() -> str:
    """Millisecond timestamp plus a random suffix, e.g. ``1718000000000_3f9a1c2b7d4e``."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"


@dataclass
class ExecutionContext:
    base_dir: Path
    execution_id: str = field(default_factory=new_execution_id)
    source_path: Optional[Path] = None
    artifact_path: Optional[Path] = None
    workdir: Optional[Path] = None
    class_name: Optional[str] = None
    start_time: Optional[float] = None
    owned_paths: List[Path] = field(default_factory=list)

    @classmethod
    def create(cls, base_dir: Optional[Path] = None) -> "ExecutionContext":
        return cls(base_dir=Path(base_dir or tempfile.gettempdir()))

    def materialize(self, profile: LanguageProfile, code: str) -> Path:
        """Write ``code`` to a uniquely named file for ``profile``.

        Class-directory languages get a fresh ``java_<id>`` directory with
        ``<ClassName><ext>`` inside it, since the compiler requires the
        file name to match the public class.
        """
        try:
            if profile.uses_class_directory:
                self.class_name = extract_class_name(code)
                self.workdir = self.base_dir / f"{profile.language}_{self.execution_id}"
                self.workdir.mkdir()
                self.owned_paths.append(self.workdir)
                self.source_path = self.workdir / f"{self.class_name}{profile.file_extension}"
            else:
                self.workdir = self.base_dir
                self.source_path = self.base_dir / f"code_{self.execution_id}{profile.file_extension}"
                self.owned_paths.append(self.source_path)
            self.source_path.write_text(code, encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise MaterializationError(f"Failed to write source file: {exc}") from exc

        if profile.produces_artifact:
            self.artifact_path = self.base_dir / f"code_{self.execution_id}{EXECUTABLE_SUFFIX}"
            self.owned_paths.append(self.artifact_path)
        return self.source_path

    def command_fields(self) -> dict:
        return {
            "source": str(self.source_path or ""),
            "artifact": str(self.artifact_path or ""),
            "workdir": str(self.workdir or self.base_dir),
            "class_name": self.class_name or "",
        }

    def mark_started(self) -> None:
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return int((time.perf_counter() - self.start_time) * 1000)

    def cleanup(self) -> None:
        """Remove every owned path.  Failures are logged, never raised."""
        for path in self.owned_paths:
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                elif path.exists():
                    path.unlink()
            except OSError as exc:
                logger.debug("Unable to remove %s: %s", path, exc)
        # Some linkers leave side files next to the binary (.pdb on Windows).
        for leftover in self.base_dir.glob(f"code_{self.execution_id}.*"):
            try:
                leftover.unlink()
            except OSError as exc:
                logger.debug("Unable to remove %s: %s", leftover, exc)
