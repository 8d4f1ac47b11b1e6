"""Converter configuration loaded from environment variables.

Every value has a default suitable for a one-off conversion on a
workstation; command-line flags override what is read here.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, before any file is scheduled.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from gpx_to_kml.core.constants import DEFAULT_QUEUE_FACTOR, GPX_EXTENSION
from gpx_to_kml.core.exceptions import ErrorKind, ValidationError

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def default_worker_count() -> int:
    """Return the available hardware parallelism (at least 1)."""
    return os.cpu_count() or 1


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"
    default_kind = ErrorKind.CONFIG

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ConverterConfig:
    """Immutable converter configuration.

    Attributes:
        workers: Number of worker threads in the conversion pool.
        queue_factor: In-flight task limit as a multiple of ``workers``.
        input_extension: File extension picked up from the input directory.
        log_level: Name of the root log level (``"INFO"``, ``"DEBUG"``, ...).
    """

    workers: int = field(default_factory=default_worker_count)
    queue_factor: int = DEFAULT_QUEUE_FACTOR
    input_extension: str = GPX_EXTENSION
    log_level: str = "INFO"

    @property
    def max_in_flight(self) -> int:
        """Upper bound on tasks that are enqueued or running at once."""
        return self.workers * self.queue_factor

    @classmethod
    def from_env(cls) -> ConverterConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``GPX_TO_KML_WORKERS=abc``).
        """
        config = cls(
            workers=int(os.getenv("GPX_TO_KML_WORKERS", str(default_worker_count()))),
            queue_factor=int(os.getenv("GPX_TO_KML_QUEUE_FACTOR", str(DEFAULT_QUEUE_FACTOR))),
            input_extension=os.getenv("GPX_TO_KML_INPUT_EXTENSION", GPX_EXTENSION),
            log_level=os.getenv("GPX_TO_KML_LOG_LEVEL", "INFO").upper(),
        )
        validate(config)
        return config


def validate(config: ConverterConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.workers < 1:
        raise ConfigValidationError("GPX_TO_KML_WORKERS", config.workers, "must be >= 1")

    if config.queue_factor < 1:
        raise ConfigValidationError(
            "GPX_TO_KML_QUEUE_FACTOR",
            config.queue_factor,
            "must be >= 1",
        )

    if not config.input_extension.startswith(".") or len(config.input_extension) < 2:
        raise ConfigValidationError(
            "GPX_TO_KML_INPUT_EXTENSION",
            config.input_extension,
            "must be a file extension such as '.gpx'",
        )

    if config.log_level not in _LOG_LEVELS:
        raise ConfigValidationError(
            "GPX_TO_KML_LOG_LEVEL",
            config.log_level,
            f"must be one of {', '.join(_LOG_LEVELS)}",
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a single line-oriented console handler on the package logger.

    ``logging.Handler`` serialises ``emit`` calls, so records from
    concurrent workers never interleave within a line.
    """
    package_logger = logging.getLogger("gpx_to_kml")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
