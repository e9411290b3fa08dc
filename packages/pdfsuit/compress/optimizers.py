"""External optimisation backend integration for :mod:`pdfsuit.compress`."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..core.utils import env_flag

_LOGGER = logging.getLogger("pdfsuit.compress")

_QPDF_EXECUTABLES: Sequence[str] = ("qpdf",)


@dataclass(frozen=True)
class Backend:
    """Represents an optimisation backend and its executable."""

    name: str
    executable: str


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            _LOGGER.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def detect_backend() -> Backend | None:
    """Return the ``qpdf`` backend when it is installed and not disabled."""

    if not env_flag("PDFSUIT_QPDF", True):
        return None
    executable = which(_QPDF_EXECUTABLES)
    if executable is None:
        return None
    return Backend("qpdf", executable)


def build_qpdf_command(executable: str, source: Path, output: Path) -> list[str]:
    """Construct the qpdf command writing cross-reference and object streams."""

    return [
        executable,
        "--object-streams=generate",
        "--compress-streams=y",
        "--recompress-flate",
        str(source),
        str(output),
    ]


def run_subprocess(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
    """Run *command* capturing output, raising on a non-zero exit status."""

    _LOGGER.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=True,
        text=True,
    )
    _LOGGER.debug("Command finished with exit code %s", completed.returncode)
    return completed


def write_object_streams(backend: Backend, data: bytes) -> bytes:
    """Re-serialise ``data`` through *backend* so objects are packed into object streams."""

    with tempfile.TemporaryDirectory(prefix="pdfsuit-") as temp_dir:
        source = Path(temp_dir) / "input.pdf"
        output = Path(temp_dir) / "output.pdf"
        source.write_bytes(data)
        _LOGGER.info("Running %s backend for object stream generation", backend.name)
        run_subprocess(build_qpdf_command(backend.executable, source, output))
        return output.read_bytes()


__all__ = ["Backend", "which", "detect_backend", "build_qpdf_command", "run_subprocess", "write_object_streams"]
