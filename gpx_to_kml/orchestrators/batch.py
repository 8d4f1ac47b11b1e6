"""Bounded-concurrency batch conversion of a directory.

A single producer (the caller's thread) lists the input directory and
submits one ``ConversionTask`` per candidate file to a fixed-size
``ThreadPoolExecutor``. Before each submission the producer is admitted
through a ``BatchContext`` gate sized ``queue_factor * workers``; a
worker releases the gate as soon as its task reaches a terminal state.
The number of tasks that are enqueued or running therefore never
exceeds the gate size, however many files the directory holds.

When the listing is exhausted the pool is shut down with ``wait=True``,
so every admitted task finishes before the summary is built. A failed
file never stops the batch; only pre-flight checks raise.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from gpx_to_kml.activities.convert_file import ConversionTask, annotate
from gpx_to_kml.core.config import default_worker_count
from gpx_to_kml.core.constants import DEFAULT_QUEUE_FACTOR, GPX_EXTENSION
from gpx_to_kml.core.exceptions import ErrorKind, InvalidDirectoryError
from gpx_to_kml.models.outcome import BatchSummary, ConversionOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    OutcomeCallback = Callable[[ConversionOutcome], None]
    TaskFactory = Callable[[Path, Path], ConversionTask]

logger = logging.getLogger("gpx_to_kml.orchestrators.batch")


# ---------------------------------------------------------------------------
# Shared run state
# ---------------------------------------------------------------------------


class BatchContext:
    """Admission gate and run-wide counters shared by every task.

    ``admit()`` blocks while ``max_in_flight`` tasks are outstanding;
    ``complete()`` records an outcome and wakes one blocked producer.
    Counters are only mutated under ``_lock``.
    """

    def __init__(self, max_in_flight: int) -> None:
        if max_in_flight < 1:
            msg = f"max_in_flight must be >= 1, got {max_in_flight}"
            raise ValueError(msg)
        self.max_in_flight = max_in_flight
        self._gate = threading.BoundedSemaphore(max_in_flight)
        self._lock = threading.Lock()
        self._succeeded = 0
        self._failed = 0
        self._in_flight = 0
        self._peak_in_flight = 0

    def admit(self) -> None:
        """Block until a slot is free, then count the task as in flight."""
        self._gate.acquire()
        with self._lock:
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)

    def complete(self, outcome: ConversionOutcome) -> None:
        """Record a terminal outcome and free its slot."""
        with self._lock:
            self._in_flight -= 1
            if outcome.ok:
                self._succeeded += 1
            else:
                self._failed += 1
        self._gate.release()

    def withdraw(self) -> None:
        """Free a slot whose task was never dispatched."""
        with self._lock:
            self._in_flight -= 1
        self._gate.release()

    @property
    def succeeded(self) -> int:
        with self._lock:
            return self._succeeded

    @property
    def failed(self) -> int:
        with self._lock:
            return self._failed

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def snapshot(self) -> BatchSummary:
        """Return the current tallies as a ``BatchSummary``."""
        with self._lock:
            return BatchSummary(
                succeeded=self._succeeded,
                failed=self._failed,
                peak_in_flight=self._peak_in_flight,
            )


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def check_directory(path: Path) -> None:
    """Raise ``InvalidDirectoryError`` unless ``path`` is a directory."""
    if not path.is_dir():
        raise InvalidDirectoryError(str(path))


def discover_inputs(input_dir: Path, extension: str = GPX_EXTENSION) -> Iterator[Path]:
    """Yield regular files in ``input_dir`` with the given extension.

    The extension is compared case-insensitively and subdirectories are
    not descended into. Files are yielded in directory listing order,
    which is unspecified.
    """
    wanted = extension.lower()
    for path in input_dir.iterdir():
        if path.suffix.lower() == wanted and path.is_file():
            yield path


# ---------------------------------------------------------------------------
# Batch run
# ---------------------------------------------------------------------------


def run_batch(
    input_dir: Path | str,
    output_dir: Path | str | None = None,
    *,
    workers: int | None = None,
    queue_factor: int = DEFAULT_QUEUE_FACTOR,
    extension: str = GPX_EXTENSION,
    on_outcome: OutcomeCallback | None = None,
    task_factory: TaskFactory = ConversionTask,
) -> BatchSummary:
    """Convert every matching file in ``input_dir`` and return the tallies.

    Args:
        input_dir: Directory scanned (non-recursively) for input files.
        output_dir: Destination for KML files. Defaults to ``input_dir``.
        workers: Pool size. Defaults to the available hardware parallelism.
        queue_factor: In-flight limit as a multiple of ``workers``.
        extension: Input file extension, compared case-insensitively.
        on_outcome: Called from the worker thread with each outcome.
        task_factory: Builds the task for ``(source_path, output_dir)``.

    Returns:
        The final ``BatchSummary`` once every admitted task has finished.

    Raises:
        InvalidDirectoryError: If ``input_dir`` or ``output_dir`` is not a
            directory. Nothing is scheduled in that case.
        ValueError: If ``workers`` or ``queue_factor`` is below 1.
    """
    input_path = Path(input_dir)
    output_path = Path(output_dir) if output_dir is not None else input_path
    check_directory(input_path)
    check_directory(output_path)

    pool_size = workers if workers is not None else default_worker_count()
    if pool_size < 1:
        msg = f"workers must be >= 1, got {pool_size}"
        raise ValueError(msg)
    if queue_factor < 1:
        msg = f"queue_factor must be >= 1, got {queue_factor}"
        raise ValueError(msg)

    context = BatchContext(pool_size * queue_factor)
    logger.debug(
        "Starting batch | input=%s | output=%s | workers=%d | max_in_flight=%d",
        input_path,
        output_path,
        pool_size,
        context.max_in_flight,
    )

    with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="gpx-to-kml") as executor:
        for source_path in discover_inputs(input_path, extension):
            logger.info("Reading: %s", source_path)
            context.admit()
            try:
                task = task_factory(source_path, output_path)
                executor.submit(_run_task, task, context, on_outcome)
            except BaseException:
                context.withdraw()
                raise

    summary = context.snapshot()
    logger.debug(
        "Batch finished | succeeded=%d | failed=%d | peak_in_flight=%d",
        summary.succeeded,
        summary.failed,
        summary.peak_in_flight,
    )
    return summary


def _run_task(
    task: ConversionTask,
    context: BatchContext,
    on_outcome: OutcomeCallback | None,
) -> ConversionOutcome:
    """Worker body: run one task and always release its slot."""
    try:
        outcome = task.run()
    except Exception as exc:
        logger.exception('error: unexpected failure while parsing "%s"', task.source_path)
        outcome = ConversionOutcome.failed(
            task.source_path,
            ErrorKind.UNEXPECTED,
            annotate(str(exc) or type(exc).__name__, task.source_path),
        )

    context.complete(outcome)

    if on_outcome is not None:
        try:
            on_outcome(outcome)
        except Exception:
            logger.exception("Outcome callback failed for %s", task.source_path)
    return outcome
