"""Output path resolution for converted tracks.

Generates ``{output_dir}/{YYYY-MM-DD} {track name}.kml`` with every
character that is illegal in common filesystems replaced by ``_`` and
surrounding whitespace trimmed.

Existing files are never overwritten: resolving a path that already
exists raises ``OutputCollisionError``. The existence check is repeated
on every run, so re-running over the same directory skips tracks that
were already converted.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from gpx_to_kml.core.constants import (
    FILENAME_REPLACEMENT,
    FORBIDDEN_FILENAME_CHARS,
    KML_EXTENSION,
)
from gpx_to_kml.core.exceptions import ErrorKind, PermanentError

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

_FORBIDDEN_RE = re.compile(f"[{re.escape(FORBIDDEN_FILENAME_CHARS)}]")


class OutputCollisionError(PermanentError):
    """Raised when the resolved output file already exists.

    Attributes:
        path: The existing file.
    """

    default_stage = "resolve_output_path"
    default_code = "OUTPUT_EXISTS"
    default_kind = ErrorKind.OUTPUT_COLLISION

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Output file already exists, skipping "{path}"')


class OutputPathError(PermanentError):
    """Raised when the resolved output path cannot be checked (e.g. name too long).

    Attributes:
        path: The resolved output path.
        detail: The underlying OS error text.
    """

    default_stage = "resolve_output_path"
    default_code = "OUTPUT_PATH_UNUSABLE"
    default_kind = ErrorKind.WRITE

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f'Failed writing to: "{path}" ({detail})')


def build_basename(name: str, track_date: date) -> str:
    """Return the unsanitised ``YYYY-MM-DD <name>`` stem.

    This is also the Placemark name in the written document.
    """
    return f"{track_date:%Y-%m-%d} {name}"


def sanitise_filename(filename: str) -> str:
    """Replace forbidden filename characters with ``_`` and trim whitespace.

    Args:
        filename: Raw filename, including its extension.

    Returns:
        A filename free of ``< > : " / \\ | ? *`` with no leading or
        trailing whitespace.
    """
    return _FORBIDDEN_RE.sub(FILENAME_REPLACEMENT, filename).strip()


def build_output_path(name: str, track_date: date, output_dir: Path) -> Path:
    """Build the sanitised output path without checking the filesystem."""
    filename = build_basename(name, track_date) + KML_EXTENSION
    return output_dir / sanitise_filename(filename)


def resolve_output_path(name: str, track_date: date, output_dir: Path) -> Path:
    """Build the output path and refuse it if the file already exists.

    Raises:
        OutputCollisionError: If a file (or anything else) already exists
            at the resolved path.
        OutputPathError: If the filesystem rejects the path itself.
    """
    output_path = build_output_path(name, track_date, output_dir)
    try:
        exists = output_path.exists()
    except OSError as exc:
        raise OutputPathError(output_path, exc.strerror or str(exc)) from exc
    if exists:
        raise OutputCollisionError(output_path)
    return output_path
