"""Data models.

- Coordinate / Track: a parsed GPX track
- ConversionOutcome: the single reported result of converting one file
- BatchSummary: final tallies of a batch run
"""

from gpx_to_kml.models.outcome import (
    BatchSummary,
    ConversionOutcome,
    OutcomeStatus,
    TaskState,
)
from gpx_to_kml.models.track import Coordinate, Track

__all__ = [
    "BatchSummary",
    "ConversionOutcome",
    "Coordinate",
    "OutcomeStatus",
    "TaskState",
    "Track",
]
