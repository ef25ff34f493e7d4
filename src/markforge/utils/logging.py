"""Logging utilities for Markforge."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_installed_handlers: list[logging.Handler] = []


@dataclass
class CustomizationStats:
    """Statistics from customization runs."""

    passes: int = 0
    devices_applied: int = 0
    devices_skipped: int = 0
    retries: int = 0
    skipped: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate customization duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging.

    Unlike a batch tool, the engine is mostly used as a library, so no log
    file is created unless one is requested.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Reconfiguring replaces the handlers installed by an earlier call
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("markforge")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class CustomizationLogger:
    """Logger for tracking device application and retries."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("markforge.customizer")
        self._stats = CustomizationStats()

    def log_pass_start(self, text: str, device_count: int, seed: str) -> None:
        """Log start of a customization pass."""
        if self._stats.start_time is None:
            self._stats.start_time = time.time()
        self._stats.passes += 1
        self._logger.debug("Customization started", text=text, devices=device_count, seed=seed)

    def log_device_applied(self, device: str, target: str, attempt: int) -> None:
        """Log a device that changed the geometry."""
        self._logger.debug("Device applied", device=device, target=target, attempt=attempt)
        self._stats.devices_applied += 1

    def log_device_skipped(self, device: str, target: str, reason: str, attempt: int) -> None:
        """Log a device that could not be applied."""
        self._logger.info(
            "Device skipped", device=device, target=target, reason=reason, attempt=attempt
        )
        self._stats.devices_skipped += 1
        self._stats.skipped.append((f"{device}:{target}", reason))

    def log_retry(self, visibility: float, font_risk: float) -> None:
        """Log that the intensified retry fired."""
        self._logger.info(
            "Low device visibility, retrying intensified",
            visibility=round(visibility, 2),
            font_risk=round(font_risk, 2),
        )
        self._stats.retries += 1

    def log_pass_complete(self, attempts: int, retried: bool, visibility: float) -> None:
        """Log the end of a customization pass."""
        self._stats.end_time = time.time()
        self._logger.info(
            "Customization complete",
            attempts=attempts,
            retried=retried,
            visibility=round(visibility, 2),
        )

    @property
    def stats(self) -> CustomizationStats:
        """Get current customization statistics."""
        return self._stats
