"""Shared pytest fixtures for the GPX to KML test suite."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"

Point = tuple[float | str, float | str, float | str]


# ---------------------------------------------------------------------------
# GPX document builder
# ---------------------------------------------------------------------------


def make_gpx(
    *,
    name: str | None = "Morning Run",
    time: str | None = "2023-06-01T07:15:00Z",
    points: Sequence[Point] = ((47.0, 8.0, 400.0), (47.0001, 8.0001, 405.0)),
    with_metadata: bool = True,
    with_track: bool = True,
    with_segment: bool = True,
    root: str = "gpx",
    namespace: str | None = GPX_NAMESPACE,
) -> bytes:
    """Build a GPX document; ``points`` are ``(lat, lon, ele)`` triples."""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    parts = [f'<?xml version="1.0" encoding="UTF-8"?>\n<{root} version="1.1"{xmlns}>']
    if with_metadata:
        parts.append("<metadata>")
        if time is not None:
            parts.append(f"<time>{time}</time>")
        parts.append("</metadata>")
    if with_track:
        parts.append("<trk>")
        if name is not None:
            parts.append(f"<name>{name}</name>")
        if with_segment:
            parts.append("<trkseg>")
            for lat, lon, ele in points:
                parts.append(f'<trkpt lat="{lat}" lon="{lon}"><ele>{ele}</ele></trkpt>')
            parts.append("</trkseg>")
        parts.append("</trk>")
    parts.append(f"</{root}>")
    return "\n".join(parts).encode("utf-8")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def input_dir(tmp_path: Path) -> Path:
    """An empty directory for GPX inputs."""
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    """An empty directory for KML outputs."""
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture()
def write_gpx(input_dir: Path) -> Callable[..., Path]:
    """Write a GPX file into ``input_dir``; keyword args go to ``make_gpx``."""

    def _write(filename: str = "activity1.gpx", content: bytes | None = None, **kwargs: object) -> Path:
        path = input_dir / filename
        path.write_bytes(content if content is not None else make_gpx(**kwargs))  # type: ignore[arg-type]
        return path

    return _write


@pytest.fixture()
def morning_run_gpx(write_gpx: Callable[..., Path]) -> Path:
    """``activity1.gpx``: "Morning Run" on 2023-06-01 with two points."""
    return write_gpx("activity1.gpx")


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so caplog sees records in later tests."""
    yield
    package_logger = logging.getLogger("gpx_to_kml")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
