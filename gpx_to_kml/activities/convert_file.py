"""Convert file activity: one GPX file in, one KML file (or one failure) out.

Composes the per-file pipeline:

    parse_gpx -> resolve_output_path -> write_kml

A ``ConversionTask`` runs the stages once and turns the first failure
into a failed ``ConversionOutcome``. Nothing raised by a stage escapes
``run()`` as long as it is a ``ConversionError``; the scheduler guards
against anything else.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gpx_to_kml.activities.parse_gpx import parse_gpx_file
from gpx_to_kml.activities.write_kml import write_kml
from gpx_to_kml.core.exceptions import ConversionError
from gpx_to_kml.models.outcome import ConversionOutcome, TaskState
from gpx_to_kml.utils.output_paths import resolve_output_path

logger = logging.getLogger("gpx_to_kml.activities.convert_file")


def annotate(message: str, source_path: Path | str) -> str:
    """Attach the source file to an error message."""
    return f'{message} while parsing "{source_path}"'


class ConversionTask:
    """Single-use conversion of one GPX file.

    States: ``ENQUEUED -> RUNNING -> SUCCEEDED | FAILED``.

    Attributes:
        source_path: The GPX file to convert.
        output_dir: Directory the KML file is written to.
        state: Current lifecycle state.
        outcome: The outcome, once terminal.
    """

    def __init__(self, source_path: Path | str, output_dir: Path | str) -> None:
        self.source_path = Path(source_path)
        self.output_dir = Path(output_dir)
        self.state = TaskState.ENQUEUED
        self.outcome: ConversionOutcome | None = None

    def __repr__(self) -> str:
        return f"ConversionTask({str(self.source_path)!r}, state={self.state.value})"

    def run(self) -> ConversionOutcome:
        """Run parse, resolve and write; return the single outcome.

        Raises:
            RuntimeError: If the task has already been started.
        """
        if self.state is not TaskState.ENQUEUED:
            msg = f"{self!r} has already been run"
            raise RuntimeError(msg)
        self.state = TaskState.RUNNING

        try:
            track = parse_gpx_file(self.source_path)
            output_path = resolve_output_path(track.name, track.date, self.output_dir)
            write_kml(track, output_path)
        except ConversionError as exc:
            exc.source_path = str(self.source_path)
            message = annotate(exc.message, self.source_path)
            logger.error("error: %s", message)
            return self._finish(ConversionOutcome.failed(self.source_path, exc.kind, message))

        logger.debug(
            "Converted %s -> %s (%d point(s))",
            self.source_path,
            output_path,
            track.point_count,
        )
        return self._finish(ConversionOutcome.succeeded(self.source_path, output_path))

    def _finish(self, outcome: ConversionOutcome) -> ConversionOutcome:
        self.outcome = outcome
        self.state = TaskState.SUCCEEDED if outcome.ok else TaskState.FAILED
        return outcome


def convert_file(source_path: Path | str, output_dir: Path | str) -> ConversionOutcome:
    """Convert one GPX file into ``output_dir``.

    Returns:
        A succeeded outcome with the written path, or a failed outcome
        naming the error kind and the annotated message.
    """
    return ConversionTask(source_path, output_dir).run()
