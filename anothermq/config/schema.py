"""Dataclasses for the broker configuration tree."""

from __future__ import annotations

from dataclasses import dataclass, field
import ipaddress
from typing import Any, Mapping

from anothermq.config.variants import (
    ConfigError,
    SyslogFacility,
    SyslogProtocol,
    parse_syslog_facility,
    parse_syslog_protocol,
)


IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LISTENER_HOSTNAME: IPAddress = ipaddress.IPv4Address("0.0.0.0")
DEFAULT_LISTENER_PORT = 5672

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "TRACE": "DEBUG"}


@dataclass(frozen=True, slots=True)
class Syslog:
    host: IPAddress | None = None
    port: int | None = None
    protocol: SyslogProtocol = SyslogProtocol.RFC3164
    facility: SyslogFacility = SyslogFacility.USER
    process: str = ""


@dataclass(frozen=True, slots=True)
class Log:
    """Log namespace. Entries go to stdout unless a file or syslog sink is set."""

    level: str = DEFAULT_LOG_LEVEL
    file: str | None = None
    syslog: Syslog | None = None


@dataclass(frozen=True, slots=True)
class Network:
    hostname: IPAddress = DEFAULT_LISTENER_HOSTNAME
    port: int = DEFAULT_LISTENER_PORT


@dataclass(frozen=True, slots=True)
class Queue:
    pass


@dataclass(frozen=True, slots=True)
class Config:
    log: Log = field(default_factory=Log)
    network: Network = field(default_factory=Network)
    queue: Queue = field(default_factory=Queue)


def _table(raw: Mapping[str, Any], key: str, *, field_name: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{field_name}' must be a table")
    return value


def _parse_string(raw: Any, *, field_name: str) -> str:
    if not isinstance(raw, str):
        raise ConfigError(f"'{field_name}' must be a string")
    return raw


def _parse_port(raw: Any, *, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError(f"'{field_name}' must be an integer")
    if raw < 0 or raw > 65535:
        raise ConfigError(f"'{field_name}' must be between 0 and 65535")
    return raw


def _parse_ip_address(raw: Any, *, field_name: str) -> IPAddress:
    text = _parse_string(raw, field_name=field_name)
    try:
        address = ipaddress.ip_address(text)
    except ValueError as exc:
        raise ConfigError(f"'{field_name}' must be an IP address, got '{text}'") from exc
    # Scoped IPv6 literals (fe80::1%eth0) name a local interface, not an address.
    if isinstance(address, ipaddress.IPv6Address) and address.scope_id is not None:
        raise ConfigError(f"'{field_name}' must not carry an IPv6 scope id, got '{text}'")
    return address


def _parse_log_level(raw: Any) -> str:
    level = _parse_string(raw, field_name="log.level").strip().upper()
    level = LOG_LEVEL_ALIASES.get(level, level)
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(f"invalid log level '{raw}'")
    return level


def _parse_syslog(raw: Mapping[str, Any]) -> Syslog:
    host = raw.get("host")
    port = raw.get("port")
    protocol = raw.get("protocol")
    facility = raw.get("facility")
    process = raw.get("process")
    return Syslog(
        host=None if host is None else _parse_ip_address(host, field_name="log.syslog.host"),
        port=None if port is None else _parse_port(port, field_name="log.syslog.port"),
        protocol=SyslogProtocol.RFC3164
        if protocol is None
        else parse_syslog_protocol(_parse_string(protocol, field_name="log.syslog.protocol")),
        facility=SyslogFacility.USER
        if facility is None
        else parse_syslog_facility(_parse_string(facility, field_name="log.syslog.facility")),
        process="" if process is None else _parse_string(process, field_name="log.syslog.process"),
    )


def parse_log(raw: Mapping[str, Any]) -> Log:
    level = raw.get("level")
    log_file = raw.get("file")
    syslog_raw = raw.get("syslog")
    if syslog_raw is not None and not isinstance(syslog_raw, Mapping):
        raise ConfigError("'log.syslog' must be a table")
    return Log(
        level=DEFAULT_LOG_LEVEL if level is None else _parse_log_level(level),
        file=None if log_file is None else _parse_string(log_file, field_name="log.file"),
        syslog=None if syslog_raw is None else _parse_syslog(syslog_raw),
    )


def parse_network(raw: Mapping[str, Any]) -> Network:
    hostname = raw.get("hostname")
    port = raw.get("port")
    return Network(
        hostname=DEFAULT_LISTENER_HOSTNAME
        if hostname is None
        else _parse_ip_address(hostname, field_name="network.hostname"),
        port=DEFAULT_LISTENER_PORT if port is None else _parse_port(port, field_name="network.port"),
    )


def parse_config(data: Mapping[str, Any]) -> Config:
    """Build a :class:`Config` from a decoded document.

    Every absent field receives its default, at every nesting level. Keys the
    schema does not know are ignored so newer documents still load.
    """
    if not isinstance(data, Mapping):
        raise ConfigError("configuration document must be a table")
    _table(data, "queue", field_name="queue")
    return Config(
        log=parse_log(_table(data, "log", field_name="log")),
        network=parse_network(_table(data, "network", field_name="network")),
        queue=Queue(),
    )


def config_to_dict(config: Config) -> dict[str, Any]:
    """Render a :class:`Config` in document form; ``None`` fields are left out."""
    log: dict[str, Any] = {"level": config.log.level}
    if config.log.file is not None:
        log["file"] = config.log.file
    syslog = config.log.syslog
    if syslog is not None:
        syslog_doc: dict[str, Any] = {}
        if syslog.host is not None:
            syslog_doc["host"] = str(syslog.host)
        if syslog.port is not None:
            syslog_doc["port"] = syslog.port
        syslog_doc["protocol"] = syslog.protocol.value
        syslog_doc["facility"] = syslog.facility.value
        syslog_doc["process"] = syslog.process
        log["syslog"] = syslog_doc
    return {
        "log": log,
        "network": {
            "hostname": str(config.network.hostname),
            "port": config.network.port,
        },
        "queue": {},
    }
