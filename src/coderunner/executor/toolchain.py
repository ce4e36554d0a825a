"""
Compiler toolchain discovery.

Native builds need the compiler's directory on ``PATH`` so that the
compiler can find its linker and the resulting binaries can find the
toolchain's runtime libraries (MinGW installs on Windows are the usual
case).  The directory is looked up once at startup by locating a known
compiler binary; when it cannot be found the inherited environment is
used unchanged and a missing compiler surfaces as an ordinary
compilation error.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger("coderunner.toolchain")

DEFAULT_PROBE = "g++"


@dataclass(frozen=True)
class Toolchain:
    probe: str
    bin_dir: Optional[Path] = None

    def environment(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        env = dict(os.environ if base is None else base)
        if self.bin_dir is None:
            return env
        current = env.get("PATH", "")
        entries = [entry for entry in current.split(os.pathsep) if entry]
        if str(self.bin_dir) not in entries:
            env["PATH"] = os.pathsep.join([str(self.bin_dir), *entries])
        return env


def discover_toolchain(probe: str = DEFAULT_PROBE, search_path: Optional[str] = None) -> Toolchain:
    """Locate ``probe`` and return a :class:`Toolchain` for its directory.

    ``search_path`` lists extra directories (``os.pathsep`` separated) that
    are searched before the inherited ``PATH``.
    """
    path = os.environ.get("PATH", "")
    if search_path:
        path = os.pathsep.join([search_path, path]) if path else search_path
    found = shutil.which(probe, path=path or None)
    if found is None:
        logger.info("Toolchain probe %r not found; using inherited PATH", probe)
        return Toolchain(probe=probe)
    bin_dir = Path(found).absolute().parent
    logger.info("Using toolchain directory %s (found %s)", bin_dir, probe)
    return Toolchain(probe=probe, bin_dir=bin_dir)
