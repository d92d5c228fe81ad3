"""structlog configuration for the API process."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from advisor.config import Settings, settings

_LOG_LEVEL_MAP: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class _LogFile:
    """Append-only JSON-lines file shared by every logger.

    Once opening or writing fails the file is abandoned for the rest of the
    process; stdout logging is unaffected.
    """

    def __init__(self, file_path: str) -> None:
        self.path = file_path
        self._handle: IO[str] | None = None
        try:
            self._handle = open(file_path, "a")  # noqa: SIM115
        except OSError as exc:
            # structlog is not configured yet at this point
            self._abandon(f"cannot open log file {file_path!r}: {exc}")

    def _abandon(self, reason: str) -> None:
        self._handle = None
        print(f"WARNING: {reason}; logging to stdout only", file=sys.stderr)

    def append(self, line: str) -> None:
        if self._handle is None:
            return
        try:
            self._handle.write(line + "\n")
            self._handle.flush()
        except (OSError, ValueError) as exc:
            self._abandon(f"write to {self.path!r} failed: {exc}")


class _SplitRenderer:
    """Final processor: one rendering for stdout, a JSON line for the log file.

    Returns keyword arguments, which structlog hands to the logger method.
    """

    def __init__(self, stdout_renderer: Any) -> None:
        self._stdout_renderer = stdout_renderer
        self._json = structlog.processors.JSONRenderer()

    def __call__(self, logger: Any, method_name: str, event_dict: dict) -> dict[str, str]:
        # ConsoleRenderer pops keys, so it gets its own copy
        line = self._stdout_renderer(logger, method_name, dict(event_dict))
        return {"line": line, "json_line": self._json(logger, method_name, event_dict)}


class _MirrorLogger:
    def __init__(self, log_file: _LogFile) -> None:
        self._log_file = log_file

    def msg(self, line: str, json_line: str) -> None:
        print(line, file=sys.stdout, flush=True)
        self._log_file.append(json_line)

    log = debug = info = warn = warning = error = err = critical = exception = fatal = msg


def resolve_level(name: str) -> int:
    return _LOG_LEVEL_MAP.get(name.upper(), logging.INFO)


def configure_logging(config: Settings | None = None) -> None:
    """Console renderer in development, JSON everywhere else.

    When ``log_file`` is set, every event is also appended to that file as a
    JSON line, whatever the stdout renderer is.
    """
    config = config or settings
    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.environment == "development"
        else structlog.processors.JSONRenderer()
    )

    if config.log_file:
        log_file = _LogFile(config.log_file)
        final_processor: Any = _SplitRenderer(renderer)
        logger_factory: Any = lambda *args: _MirrorLogger(log_file)  # noqa: E731
    else:
        final_processor = renderer
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            final_processor,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(config.log_level)),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
