"""Aseprite command-line invocation helpers."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

_STANDARD_PATH_WINDOWS = Path("C:/Program Files (x86)/Aseprite/Aseprite.exe")
_STANDARD_PATH_MACOS = Path("/Applications/Aseprite.app/Contents/MacOS/aseprite")
_STANDARD_PATH_LINUX = Path("/usr/bin/aseprite")


def standard_application_path(platform: str | None = None) -> Path:
    """Return the default Aseprite install location for *platform*.

    Args:
        platform: A ``sys.platform`` value; the running platform if ``None``.
    """
    platform = platform or sys.platform
    if platform.startswith("win"):
        return _STANDARD_PATH_WINDOWS
    if platform == "darwin":
        return _STANDARD_PATH_MACOS
    return _STANDARD_PATH_LINUX


def build_arguments(name: str, file_name: str, additional: Sequence[str] = ()) -> list[str]:
    """Build the batch-mode arguments that export ``NAME.json`` and ``NAME.png``.

    Args:
        name: Output base name (the source file name without extension).
        file_name: Source file name, relative to the working directory.
        additional: Extra arguments placed before the export options.

    Returns:
        The argument list, starting with ``-b``.
    """
    return [
        "-b",
        *additional,
        "--data",
        f"{name}.json",
        "--sheet",
        f"{name}.png",
        "--sheet-pack",
        "--list-tags",
        "--list-slices",
        "--format",
        "json-array",
        file_name,
    ]
