"""Write KML activity: render a Track as a styled KML line and save it.

The document layout is fixed: one red, 4 px ``Style``, a ``StyleMap``
pointing both the normal and highlight states at it, and a single
``Placemark`` holding the track as a ``LineString``. Downstream viewers
expect exactly these IDs, so the skeleton is kept as a template and
only the names and the coordinate string are filled in per track.

Coordinates are written ``lon,lat,alt`` with 7 fractional digits, each
point followed by a single space.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from lxml import etree

from gpx_to_kml.core.constants import (
    ATOM_NAMESPACE,
    COORDINATE_PRECISION,
    GX_NAMESPACE,
    KML_EXTENSION,
    KML_NAMESPACE,
    LINE_COLOR,
    LINE_STYLE_ID,
    LINE_WIDTH,
    STYLE_MAP_ID,
)
from gpx_to_kml.core.exceptions import ErrorKind, PermanentError
from gpx_to_kml.utils.output_paths import OutputCollisionError, build_basename

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from lxml.etree import _Element

    from gpx_to_kml.models.track import Coordinate, Track

logger = logging.getLogger("gpx_to_kml.activities.write_kml")

XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8"?>\n'
INDENT = "    "

# Declarations keep this order when parsed, so new elements resolve to the
# default namespace first and never to the ``kml`` prefix for the same URI.
_KML_SKELETON = f"""\
<kml xmlns="{KML_NAMESPACE}" xmlns:gx="{GX_NAMESPACE}" xmlns:kml="{KML_NAMESPACE}" xmlns:atom="{ATOM_NAMESPACE}">
<Document>
<name/>
<Style id="{LINE_STYLE_ID}"><LineStyle><color>{LINE_COLOR}</color><width>{LINE_WIDTH}</width></LineStyle></Style>
<StyleMap id="{STYLE_MAP_ID}">
<Pair><key>normal</key><styleUrl>{LINE_STYLE_ID}</styleUrl></Pair>
<Pair><key>highlight</key><styleUrl>{LINE_STYLE_ID}</styleUrl></Pair>
</StyleMap>
<Placemark>
<name/>
<styleUrl>#{STYLE_MAP_ID}</styleUrl>
<MultiGeometry><LineString><coordinates/></LineString></MultiGeometry>
</Placemark>
</Document>
</kml>
""".encode()

_NS = {"kml": KML_NAMESPACE}


class KmlWriteError(PermanentError):
    """Raised when the KML document cannot be saved.

    Attributes:
        path: The target file.
    """

    default_stage = "write_kml"
    default_code = "KML_WRITE_FAILED"
    default_kind = ErrorKind.WRITE

    def __init__(self, path: Path, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        message = f'Failed writing to: "{path}"'
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_coordinates(coordinates: Iterable[Coordinate]) -> str:
    """Render points as ``lon,lat,alt `` triples (note the trailing space)."""
    precision = COORDINATE_PRECISION
    return "".join(
        f"{c.longitude:.{precision}f},{c.latitude:.{precision}f},{c.altitude:.{precision}f} "
        for c in coordinates
    )


def build_kml_document(track: Track) -> _Element:
    """Build the KML element tree for one track.

    The document name is the unsanitised ``<basename>.kml``; the
    Placemark name is the unsanitised basename.
    """
    parser = etree.XMLParser(remove_blank_text=True)
    root: _Element = etree.fromstring(_KML_SKELETON, parser=parser)

    basename = build_basename(track.name, track.date)
    _find(root, "kml:Document/kml:name").text = basename + KML_EXTENSION
    _find(root, "kml:Document/kml:Placemark/kml:name").text = basename
    _find(
        root, "kml:Document/kml:Placemark/kml:MultiGeometry/kml:LineString/kml:coordinates"
    ).text = format_coordinates(track.coordinates)
    return root


def serialize_kml(track: Track) -> bytes:
    """Render a track to the bytes of a complete KML file."""
    root = build_kml_document(track)
    etree.indent(root, space=INDENT)
    body = etree.tostring(root, encoding="UTF-8", xml_declaration=False)
    return XML_DECLARATION + body + b"\n"


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_kml(track: Track, output_path: Path) -> Path:
    """Serialise ``track`` and save it to ``output_path``.

    The file is opened in exclusive-create mode, so a file created by a
    concurrent task after path resolution is never overwritten.

    Returns:
        ``output_path``.

    Raises:
        OutputCollisionError: If the file appeared since path resolution.
        KmlWriteError: If the file cannot be created or written. A
            partially written file is removed.
    """
    payload = serialize_kml(track)

    try:
        handle = output_path.open("xb")
    except FileExistsError as exc:
        raise OutputCollisionError(output_path) from exc
    except OSError as exc:
        raise KmlWriteError(output_path, exc.strerror or str(exc)) from exc

    logger.info("Writing: %s", output_path)
    try:
        with handle:
            handle.write(payload)
    except OSError as exc:
        with contextlib.suppress(OSError):
            output_path.unlink()
        raise KmlWriteError(output_path, exc.strerror or str(exc)) from exc

    return output_path


def _find(root: _Element, path: str) -> _Element:
    element = root.find(path, _NS)
    if element is None:  # pragma: no cover - skeleton is a constant
        msg = f"KML skeleton is missing {path}"
        raise RuntimeError(msg)
    return element
