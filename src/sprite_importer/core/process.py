"""External process collaborator used to run exporter command-line tools."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from sprite_importer.core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)


class ProcessRunner(Protocol):
    """Runs an executable and reports its exit code."""

    def run(self, executable: Path, working_dir: Path, args: Sequence[str]) -> int:
        """Run *executable* with *args* inside *working_dir* and wait for it."""
        ...


class SubprocessRunner:
    """``ProcessRunner`` backed by :func:`subprocess.run`."""

    def run(self, executable: Path, working_dir: Path, args: Sequence[str]) -> int:
        """Run the executable and return its exit code.

        Raises:
            ExternalToolError: If the executable cannot be started.
        """
        command = [str(executable), *args]
        logger.info("Running %s in %s", " ".join(command), working_dir)
        try:
            completed = subprocess.run(command, cwd=working_dir, capture_output=True, check=False)
        except OSError as exc:
            msg = f"Could not start '{executable}'"
            raise ExternalToolError(msg) from exc

        if completed.returncode != 0:
            logger.warning(
                "'%s' exited with code %d: %s",
                executable.name,
                completed.returncode,
                completed.stderr.decode(errors="replace").strip(),
            )
        return completed.returncode
