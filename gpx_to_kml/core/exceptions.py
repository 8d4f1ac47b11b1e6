"""Conversion error taxonomy.

Every failure the converter can report inherits from ``ConversionError``
and carries structured context fields, so the batch scheduler can turn
any stage failure into a single ``ConversionOutcome`` without inspecting
message text.

Taxonomy categories
-------------------
- ``ValidationError``: input documents or settings the converter rejects.
- ``PermanentError``: environment failures (existing files, I/O errors).

Error kinds
-----------
``ErrorKind`` names the reportable failure classes independently of the
Python class hierarchy:

- ``INVALID_DIRECTORY``: fatal pre-flight failure, aborts the whole run.
- ``PARSE``: per-file, the GPX document is missing data.
- ``OUTPUT_COLLISION``: per-file, the destination already exists.
- ``WRITE``: per-file, the KML document could not be saved.
- ``CONFIG``: fatal, a setting is out of range.
- ``UNEXPECTED``: per-file, anything not covered above.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """Reportable failure class of a conversion error."""

    INVALID_DIRECTORY = "invalid_directory"
    PARSE = "parse"
    OUTPUT_COLLISION = "output_collision"
    WRITE = "write"
    CONFIG = "config"
    UNEXPECTED = "unexpected"


class ConversionError(Exception):
    """Base exception for all converter errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"parse_gpx"``, ``"write_kml"``).
        code: Machine-readable error code (e.g. ``"GPX_PARSE_FAILED"``).
        kind: Reportable failure class.
        source_path: Input file being converted, when known.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""
    #: Default kind for subclasses.
    default_kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        kind: ErrorKind | None = None,
        source_path: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.kind = kind or self.default_kind
        self.source_path = source_path
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "unexpected"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "kind": self.kind.value,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "source_path": self.source_path,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(ConversionError):
    """Input document or setting rejected by the converter."""


class PermanentError(ConversionError):
    """Failure caused by the environment rather than the input document."""


# ---------------------------------------------------------------------------
# Pre-flight errors
# ---------------------------------------------------------------------------


class InvalidDirectoryError(ValidationError):
    """Raised when an input or output directory does not exist.

    Attributes:
        path: The offending directory path.
    """

    default_stage = "preflight"
    default_code = "INVALID_DIRECTORY"
    default_kind = ErrorKind.INVALID_DIRECTORY

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Not a directory: "{path}"')
