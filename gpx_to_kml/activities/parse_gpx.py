"""GPX parsing activity.

Parses one GPX document into a ``Track``: the date of
``metadata/time``, and the name and points of the first track's first
segment. Any missing element, missing attribute or unparsable value
aborts the whole document; there is no best-effort mode.

Elements are matched on their local name, so GPX 1.0, GPX 1.1 and
documents without a namespace are all accepted.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import TYPE_CHECKING

from lxml import etree

from gpx_to_kml.core.constants import GPX_TIMESTAMP_FORMAT
from gpx_to_kml.core.exceptions import ErrorKind, ValidationError
from gpx_to_kml.models.track import Coordinate, Track

if TYPE_CHECKING:
    from pathlib import Path

    from lxml.etree import _Element

logger = logging.getLogger("gpx_to_kml.activities.parse_gpx")

# Plain decimal or scientific notation; no inf/nan, no digit separators.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class GpxParseError(ValidationError):
    """Raised when a GPX document cannot be turned into a Track.

    Attributes:
        field: The missing or invalid element/attribute (e.g. ``"trkseg"``).
        raw_value: The offending raw text, for unparsable values.
    """

    default_stage = "parse_gpx"
    default_code = "GPX_PARSE_FAILED"
    default_kind = ErrorKind.PARSE

    def __init__(self, message: str, *, field: str = "", raw_value: str | None = None) -> None:
        self.field = field
        self.raw_value = raw_value
        super().__init__(message)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_gpx_file(gpx_path: Path) -> Track:
    """Read and parse a GPX file.

    Raises:
        GpxParseError: If the file cannot be read or violates any rule
            of ``parse_gpx``.
    """
    try:
        content = gpx_path.read_bytes()
    except OSError as exc:
        msg = f"Failed reading XML file {exc}"
        raise GpxParseError(msg) from exc
    return parse_gpx(content)


def parse_gpx(content: bytes) -> Track:
    """Parse GPX document bytes into a Track.

    Rules, applied in order:
    1. The root element is ``gpx``.
    2. ``metadata/time`` exists and matches ``GPX_TIMESTAMP_FORMAT``.
    3. At least one ``trk`` exists; only the first is used.
    4. The track has a ``name``.
    5. The track has a ``trkseg``; it may contain no points.
    6. Every ``trkpt`` has ``lat``/``lon`` attributes and an ``ele`` child,
       all decimal numbers.

    Raises:
        GpxParseError: On the first rule violated.
    """
    if not content.strip():
        msg = "Failed reading XML file: document is empty"
        raise GpxParseError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root: _Element = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Failed reading XML file {exc}"
        raise GpxParseError(msg) from exc

    if _local_name(root) != "gpx":
        raise GpxParseError("Missing root element", field="gpx")

    track_date = _parse_time(root)

    track = _first_child(root, "trk")
    if track is None:
        raise GpxParseError("Missing trk element", field="trk")

    name = _parse_name(track)
    coordinates = _parse_coordinates(track)

    logger.debug("Parsed track %r (%s) with %d point(s)", name, track_date, len(coordinates))
    return Track(name=name, date=track_date, coordinates=coordinates)


def parse_timestamp_date(text: str, pattern: str = GPX_TIMESTAMP_FORMAT) -> date:
    """Parse a fixed-format UTC timestamp and keep only its date.

    Raises:
        GpxParseError: If ``text`` does not match ``pattern``.
    """
    try:
        return datetime.strptime(text, pattern).date()
    except ValueError as exc:
        msg = f'Invalid timestamp "{text}"'
        raise GpxParseError(msg, field="time", raw_value=text) from exc


def parse_decimal(text: str | None, field: str) -> float:
    """Parse a finite decimal number from attribute or element text.

    Raises:
        GpxParseError: If ``text`` is empty, not a number, or not finite.
    """
    raw = text if text is not None else ""
    stripped = raw.strip()
    if _DECIMAL_RE.fullmatch(stripped):
        value = float(stripped)
        if math.isfinite(value):
            return value
    msg = f'Invalid {field} value "{raw}"'
    raise GpxParseError(msg, field=field, raw_value=raw)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _local_name(element: _Element) -> str:
    return etree.QName(element).localname


def _first_child(parent: _Element, name: str) -> _Element | None:
    """Return the first child element whose local name is ``name``."""
    for child in parent:
        # Comments and processing instructions have non-string tags.
        if isinstance(child.tag, str) and _local_name(child) == name:
            return child
    return None


def _children(parent: _Element, name: str) -> list[_Element]:
    return [
        child for child in parent if isinstance(child.tag, str) and _local_name(child) == name
    ]


def _parse_time(root: _Element) -> date:
    metadata = _first_child(root, "metadata")
    if metadata is None:
        raise GpxParseError("Missing metadata element", field="metadata")
    time_elem = _first_child(metadata, "time")
    if time_elem is None:
        raise GpxParseError("Missing metadata time element", field="time")
    return parse_timestamp_date((time_elem.text or "").strip())


def _parse_name(track: _Element) -> str:
    name_elem = _first_child(track, "name")
    if name_elem is None:
        raise GpxParseError("Missing name element", field="name")
    return name_elem.text or ""


def _parse_coordinates(track: _Element) -> tuple[Coordinate, ...]:
    segment = _first_child(track, "trkseg")
    if segment is None:
        raise GpxParseError("Missing trkseg element", field="trkseg")

    coordinates: list[Coordinate] = []
    for point in _children(segment, "trkpt"):
        lat = point.get("lat")
        lon = point.get("lon")
        if lat is None or lon is None:
            raise GpxParseError("Missing lat/lon attributes", field="lat/lon")
        elevation = _first_child(point, "ele")
        if elevation is None:
            raise GpxParseError("Missing ele element", field="ele")
        coordinates.append(
            Coordinate(
                latitude=parse_decimal(lat, "lat"),
                longitude=parse_decimal(lon, "lon"),
                altitude=parse_decimal(elevation.text, "ele"),
            )
        )
    return tuple(coordinates)
