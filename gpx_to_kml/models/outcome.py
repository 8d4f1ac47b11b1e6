"""Conversion outcome and batch summary models.

``ConversionOutcome`` is the tagged result of one conversion task:
either *succeeded* with the written output path, or *failed* with an
``ErrorKind`` and the annotated error message. Exactly one outcome is
produced per input file.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from gpx_to_kml.core.exceptions import ErrorKind


class TaskState(enum.Enum):
    """Lifecycle state of a conversion task.

    Values:
        ENQUEUED:  Admitted past backpressure control, waiting for a worker.
        RUNNING:   Parser, resolver or serializer in progress.
        SUCCEEDED: Output document written.
        FAILED:    A stage failed; no output was produced.
    """

    ENQUEUED = "enqueued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.SUCCEEDED, TaskState.FAILED)


class OutcomeStatus(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """Result of converting one input file.

    Attributes:
        source_path: The input GPX file.
        status: ``SUCCEEDED`` or ``FAILED``.
        output_path: The written KML file (succeeded only).
        error_kind: Failure class (failed only).
        error_message: Error annotated with the source path (failed only).
    """

    source_path: Path
    status: OutcomeStatus
    output_path: Path | None = None
    error_kind: ErrorKind | None = None
    error_message: str = ""

    @classmethod
    def succeeded(cls, source_path: Path, output_path: Path) -> ConversionOutcome:
        return cls(
            source_path=source_path,
            status=OutcomeStatus.SUCCEEDED,
            output_path=output_path,
        )

    @classmethod
    def failed(cls, source_path: Path, kind: ErrorKind, message: str) -> ConversionOutcome:
        return cls(
            source_path=source_path,
            status=OutcomeStatus.FAILED,
            error_kind=kind,
            error_message=message,
        )

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict (e.g. for a JSON run report)."""
        return {
            "source_path": str(self.source_path),
            "status": self.status.value,
            "output_path": str(self.output_path) if self.output_path is not None else "",
            "error_kind": self.error_kind.value if self.error_kind is not None else "",
            "error_message": self.error_message,
        }


@dataclass(frozen=True, slots=True)
class BatchSummary:
    """Final tallies of a batch run.

    Attributes:
        succeeded: Files converted.
        failed: Files that produced a failed outcome.
        peak_in_flight: Highest number of simultaneously admitted tasks.
    """

    succeeded: int = 0
    failed: int = 0
    peak_in_flight: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def report_line(self) -> str:
        """The user-visible summary line."""
        return f"Succeeded: {self.succeeded} Failed: {self.failed}"
