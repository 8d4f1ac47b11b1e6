"""Data model for a parsed GPX track.

A Track is the output of the ``parse_gpx`` activity and the input to
the ``write_kml`` activity. It is owned by the conversion task that
parsed it and is never shared between tasks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A single track point.

    Values are passed through unchanged: there is no WGS 84 range check.

    Attributes:
        latitude: Decimal degrees, from the ``lat`` attribute.
        longitude: Decimal degrees, from the ``lon`` attribute.
        altitude: Metres, from the ``ele`` element.
    """

    latitude: float
    longitude: float
    altitude: float


@dataclass(frozen=True, slots=True)
class Track:
    """A named, dated sequence of track points.

    Attributes:
        name: Text of ``trk/name``. May be empty.
        date: Calendar date of ``metadata/time``; time of day is discarded.
        coordinates: Points of the first ``trkseg`` in document order.
    """

    name: str
    date: date
    coordinates: tuple[Coordinate, ...] = field(default_factory=tuple)

    @property
    def point_count(self) -> int:
        """Number of track points."""
        return len(self.coordinates)
