"""Log sink wiring for the broker's ``log`` namespace."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from logging.handlers import SysLogHandler
import os
from pathlib import Path
import socket
import sys

from anothermq.config.schema import Log, Syslog
from anothermq.config.variants import SyslogProtocol, syslog_handler_facility


ROOT_LOGGER_NAME = "anothermq"
DEFAULT_SYSLOG_PORT = 514
NILVALUE = "-"
RFC3164_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _local_syslog_address() -> str | tuple[str, int]:
    for candidate in ("/dev/log", "/var/run/syslog"):
        if os.path.exists(candidate):
            return candidate
    return ("localhost", DEFAULT_SYSLOG_PORT)


class JsonFormatter(logging.Formatter):
    def __init__(self, process_name: str = ROOT_LOGGER_NAME) -> None:
        super().__init__()
        self.process_name = process_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
        payload: dict[str, object] = {
            "@timestamp": timestamp,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname.lower(),
                "logger": record.name,
            },
            "process": {
                "name": self.process_name,
                "pid": record.process,
            },
        }
        if record.exc_info:
            payload["error"] = {"stack_trace": self.formatException(record.exc_info)}
        return json.dumps(payload, separators=(",", ":"))


class SyslogFormatter(logging.Formatter):
    """Message body for ``SysLogHandler``, which prepends the ``<PRI>`` part."""

    def __init__(self, protocol: SyslogProtocol, process: str = "", hostname: str | None = None) -> None:
        super().__init__()
        self.protocol = protocol
        self.process = process or ROOT_LOGGER_NAME
        self.hostname = hostname or socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.protocol is SyslogProtocol.RFC5424:
            timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
            return (
                f"1 {timestamp} {self.hostname or NILVALUE} {self.process} "
                f"{record.process or NILVALUE} {NILVALUE} {NILVALUE} {message}"
            )
        # RFC 3164 timestamps are local time without a year, day padded with a space.
        local = datetime.fromtimestamp(record.created)
        timestamp = f"{RFC3164_MONTHS[local.month - 1]} {local.day:>2} {local:%H:%M:%S}"
        return f"{timestamp} {self.hostname} {self.process}[{record.process}]: {message}"


def _syslog_handler(config: Syslog) -> logging.Handler:
    if config.host is not None:
        address: str | tuple[str, int] = (str(config.host), config.port or DEFAULT_SYSLOG_PORT)
    else:
        address = _local_syslog_address()
    handler = SysLogHandler(
        address=address,
        facility=syslog_handler_facility(config.facility),
    )
    handler.setFormatter(SyslogFormatter(config.protocol, process=config.process))
    return handler


def build_handlers(config: Log) -> list[logging.Handler]:
    formatter = JsonFormatter()
    handlers: list[logging.Handler] = []
    if config.file is not None:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    if config.syslog is not None:
        handlers.append(_syslog_handler(config.syslog))
    if not handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)
    return handlers


def configure_logging(config: Log, force: bool = False) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if getattr(root, "_anothermq_configured", False) and not force:
        return root

    root.setLevel(config.level)
    for existing in list(root.handlers):
        existing.close()
    root.handlers.clear()
    for handler in build_handlers(config):
        root.addHandler(handler)

    root.propagate = False
    setattr(root, "_anothermq_configured", True)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger below ``anothermq`` so :func:`configure_logging` covers it."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
