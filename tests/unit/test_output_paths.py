"""Tests for output path resolution.

Covers:
- build_basename: date format and separator
- sanitise_filename: forbidden characters, whitespace trimming
- resolve_output_path: joining, collision refusal
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from gpx_to_kml.core.constants import FORBIDDEN_FILENAME_CHARS
from gpx_to_kml.core.exceptions import ErrorKind
from gpx_to_kml.utils.output_paths import (
    OutputCollisionError,
    OutputPathError,
    build_basename,
    build_output_path,
    resolve_output_path,
    sanitise_filename,
)


class TestBuildBasename:
    def test_date_then_name(self) -> None:
        assert build_basename("Morning Run", date(2023, 6, 1)) == "2023-06-01 Morning Run"

    def test_zero_padded(self) -> None:
        assert build_basename("x", date(987, 1, 2)) == "0987-01-02 x"

    def test_empty_name_keeps_separator(self) -> None:
        assert build_basename("", date(2023, 6, 1)) == "2023-06-01 "

    def test_not_sanitised(self) -> None:
        assert build_basename("A/B", date(2023, 6, 1)) == "2023-06-01 A/B"


class TestSanitiseFilename:
    """Forbidden characters become underscores; surrounding whitespace goes."""

    def test_plain_name_unchanged(self) -> None:
        assert sanitise_filename("2023-06-01 Morning Run.kml") == "2023-06-01 Morning Run.kml"

    @pytest.mark.parametrize("char", list(FORBIDDEN_FILENAME_CHARS))
    def test_each_forbidden_char_replaced(self, char: str) -> None:
        assert sanitise_filename(f"a{char}b.kml") == "a_b.kml"

    def test_all_forbidden_chars(self) -> None:
        result = sanitise_filename('<>:"/\\|?*.kml')
        assert result == "_________.kml"

    def test_surrounding_whitespace_trimmed(self) -> None:
        assert sanitise_filename("  \t2023-06-01 Run.kml \n") == "2023-06-01 Run.kml"

    def test_inner_whitespace_kept(self) -> None:
        assert sanitise_filename("a   b.kml") == "a   b.kml"

    def test_unicode_kept(self) -> None:
        assert sanitise_filename("2023-06-01 Zürich – Üetliberg.kml") == (
            "2023-06-01 Zürich – Üetliberg.kml"
        )

    @pytest.mark.parametrize(
        "name",
        [
            'Lunch "Ride" ',
            "Up/Down\\Hill",
            "  What? Where: <here> | *there*  ",
            "???",
        ],
    )
    def test_result_never_contains_forbidden_chars(self, name: str) -> None:
        result = sanitise_filename(f"2023-06-01 {name}.kml")
        assert not set(result) & set(FORBIDDEN_FILENAME_CHARS)
        assert result == result.strip()


class TestResolveOutputPath:
    def test_joins_output_dir(self, output_dir: Path) -> None:
        path = resolve_output_path("Morning Run", date(2023, 6, 1), output_dir)
        assert path == output_dir / "2023-06-01 Morning Run.kml"

    def test_sanitises_track_name(self, output_dir: Path) -> None:
        path = resolve_output_path("Run: 5k / easy", date(2023, 6, 1), output_dir)
        assert path.name == "2023-06-01 Run_ 5k _ easy.kml"
        assert path.parent == output_dir

    def test_does_not_create_file(self, output_dir: Path) -> None:
        path = resolve_output_path("Morning Run", date(2023, 6, 1), output_dir)
        assert not path.exists()

    def test_existing_file_is_refused(self, output_dir: Path) -> None:
        existing = output_dir / "2023-06-01 Morning Run.kml"
        existing.write_text("keep me")

        with pytest.raises(OutputCollisionError, match="already exists") as exc_info:
            resolve_output_path("Morning Run", date(2023, 6, 1), output_dir)

        assert exc_info.value.path == existing
        assert exc_info.value.kind is ErrorKind.OUTPUT_COLLISION
        assert str(existing) in exc_info.value.message
        assert existing.read_text() == "keep me"

    def test_unusable_path_is_typed_error(self, output_dir: Path) -> None:
        with (
            patch.object(Path, "exists", side_effect=OSError(36, "File name too long")),
            pytest.raises(OutputPathError, match="File name too long") as exc_info,
        ):
            resolve_output_path("Morning Run", date(2023, 6, 1), output_dir)
        assert exc_info.value.kind is ErrorKind.WRITE
        assert exc_info.value.path == output_dir / "2023-06-01 Morning Run.kml"

    def test_build_output_path_ignores_existing(self, output_dir: Path) -> None:
        existing = output_dir / "2023-06-01 Morning Run.kml"
        existing.write_text("")
        assert build_output_path("Morning Run", date(2023, 6, 1), output_dir) == existing
