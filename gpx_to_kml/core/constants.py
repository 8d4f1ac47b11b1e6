"""Shared converter constants.

Centralises the GPX element names, KML namespaces and the fixed style
identifiers that downstream viewers rely on.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Input format
# ---------------------------------------------------------------------------

GPX_EXTENSION: str = ".gpx"
"""Extension (compared case-insensitively) of files picked up by the scheduler."""

GPX_TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H:%M:%SZ"
"""Format of ``gpx/metadata/time``. Only the date portion is kept."""

# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------

KML_EXTENSION: str = ".kml"

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
GX_NAMESPACE = "http://www.google.com/kml/ext/2.2"
ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"

LINE_STYLE_ID = "style1"
LINE_COLOR = "ff0000ff"  # aabbggrr: opaque red
LINE_WIDTH = "4"
STYLE_MAP_ID = "stylemap_id00"

# Fractional digits for every coordinate component.
COORDINATE_PRECISION = 7

# Characters that are not allowed in filenames on common filesystems.
FORBIDDEN_FILENAME_CHARS = '<>:"/\\|?*'
FILENAME_REPLACEMENT = "_"

# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

DEFAULT_QUEUE_FACTOR = 2
"""Maximum in-flight tasks as a multiple of the worker count."""
