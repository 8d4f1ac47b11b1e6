"""Tests for the conversion error taxonomy.

Validates:
- ConversionError structured attributes and ``to_error_dict()``
- Category classification (validation, permanent)
- Every concrete error maps to the right ErrorKind
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gpx_to_kml.activities.parse_gpx import GpxParseError
from gpx_to_kml.activities.write_kml import KmlWriteError
from gpx_to_kml.core.config import ConfigValidationError
from gpx_to_kml.core.exceptions import (
    ConversionError,
    ErrorKind,
    InvalidDirectoryError,
    PermanentError,
    ValidationError,
)
from gpx_to_kml.utils.output_paths import OutputCollisionError, OutputPathError


class TestConversionErrorBase:
    def test_default_attributes(self) -> None:
        err = ConversionError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.kind is ErrorKind.UNEXPECTED
        assert err.source_path == ""
        assert err.category == "unexpected"

    def test_str_is_message(self) -> None:
        assert str(ConversionError("human-readable")) == "human-readable"

    def test_custom_attributes(self) -> None:
        err = ConversionError(
            "x", stage="s", code="C", kind=ErrorKind.WRITE, source_path="a.gpx"
        )
        assert err.to_error_dict() == {
            "category": "unexpected",
            "kind": "write",
            "code": "C",
            "stage": "s",
            "message": "x",
            "source_path": "a.gpx",
        }


class TestConcreteErrors:
    @pytest.mark.parametrize(
        ("error", "kind", "category", "stage"),
        [
            (GpxParseError("Missing ele element"), ErrorKind.PARSE, "validation", "parse_gpx"),
            (
                OutputCollisionError(Path("a.kml")),
                ErrorKind.OUTPUT_COLLISION,
                "permanent",
                "resolve_output_path",
            ),
            (KmlWriteError(Path("a.kml")), ErrorKind.WRITE, "permanent", "write_kml"),
            (
                InvalidDirectoryError("/nope"),
                ErrorKind.INVALID_DIRECTORY,
                "validation",
                "preflight",
            ),
            (ConfigValidationError("K", 0, "bad"), ErrorKind.CONFIG, "validation", "config"),
        ],
    )
    def test_taxonomy(
        self, error: ConversionError, kind: ErrorKind, category: str, stage: str
    ) -> None:
        assert isinstance(error, ConversionError)
        assert error.kind is kind
        assert error.category == category
        assert error.stage == stage
        assert error.code

    def test_parse_error_is_validation(self) -> None:
        assert issubclass(GpxParseError, ValidationError)

    def test_io_errors_are_permanent(self) -> None:
        assert issubclass(OutputCollisionError, PermanentError)
        assert issubclass(KmlWriteError, PermanentError)

    def test_invalid_directory_message(self) -> None:
        assert str(InvalidDirectoryError("/nope")) == 'Not a directory: "/nope"'

    def test_write_error_keeps_detail(self) -> None:
        err = KmlWriteError(Path("a.kml"), "No space left on device")
        assert err.detail == "No space left on device"
        assert err.message == 'Failed writing to: "a.kml" (No space left on device)'

    def test_write_error_without_detail(self) -> None:
        assert KmlWriteError(Path("a.kml")).message == 'Failed writing to: "a.kml"'

    def test_unusable_output_path_is_write_kind(self) -> None:
        err = OutputPathError(Path("a.kml"), "File name too long")
        assert err.kind is ErrorKind.WRITE
        assert err.category == "permanent"
        assert err.message == 'Failed writing to: "a.kml" (File name too long)'
