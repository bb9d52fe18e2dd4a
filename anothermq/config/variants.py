"""Syslog protocol and facility variants."""

from __future__ import annotations

from enum import Enum
from logging.handlers import SysLogHandler


class ConfigError(ValueError):
    """Raised when a configuration document does not match the schema."""


class UnrecognizedValueError(ConfigError):
    def __init__(self, field_name: str, value: str, expected: tuple[str, ...]) -> None:
        self.field_name = field_name
        self.value = value
        self.expected = expected
        super().__init__(
            f"unrecognized value '{value}' for '{field_name}', expected one of: {', '.join(expected)}"
        )


class SyslogProtocol(Enum):
    RFC3164 = "rfc3164"
    RFC5424 = "rfc5424"


class SyslogFacility(Enum):
    KERN = "kern"
    USER = "user"
    MAIL = "mail"
    DAEMON = "daemon"
    AUTH = "auth"
    SYSLOG = "syslog"
    LPR = "lpr"
    NEWS = "news"
    UUCP = "uucp"
    CRON = "cron"
    AUTHPRIV = "authpriv"
    FTP = "ftp"
    LOCAL0 = "local0"
    LOCAL1 = "local1"
    LOCAL2 = "local2"
    LOCAL3 = "local3"
    LOCAL4 = "local4"
    LOCAL5 = "local5"
    LOCAL6 = "local6"
    LOCAL7 = "local7"


SYSLOG_PROTOCOL_TOKENS = tuple(member.value for member in SyslogProtocol)
SYSLOG_FACILITY_TOKENS = tuple(member.value for member in SyslogFacility)

_HANDLER_FACILITIES: dict[SyslogFacility, int] = {
    SyslogFacility.KERN: SysLogHandler.LOG_KERN,
    SyslogFacility.USER: SysLogHandler.LOG_USER,
    SyslogFacility.MAIL: SysLogHandler.LOG_MAIL,
    SyslogFacility.DAEMON: SysLogHandler.LOG_DAEMON,
    SyslogFacility.AUTH: SysLogHandler.LOG_AUTH,
    SyslogFacility.SYSLOG: SysLogHandler.LOG_SYSLOG,
    SyslogFacility.LPR: SysLogHandler.LOG_LPR,
    SyslogFacility.NEWS: SysLogHandler.LOG_NEWS,
    SyslogFacility.UUCP: SysLogHandler.LOG_UUCP,
    SyslogFacility.CRON: SysLogHandler.LOG_CRON,
    SyslogFacility.AUTHPRIV: SysLogHandler.LOG_AUTHPRIV,
    SyslogFacility.FTP: SysLogHandler.LOG_FTP,
    SyslogFacility.LOCAL0: SysLogHandler.LOG_LOCAL0,
    SyslogFacility.LOCAL1: SysLogHandler.LOG_LOCAL1,
    SyslogFacility.LOCAL2: SysLogHandler.LOG_LOCAL2,
    SyslogFacility.LOCAL3: SysLogHandler.LOG_LOCAL3,
    SyslogFacility.LOCAL4: SysLogHandler.LOG_LOCAL4,
    SyslogFacility.LOCAL5: SysLogHandler.LOG_LOCAL5,
    SyslogFacility.LOCAL6: SysLogHandler.LOG_LOCAL6,
    SyslogFacility.LOCAL7: SysLogHandler.LOG_LOCAL7,
}


def parse_syslog_protocol(value: str, *, field_name: str = "log.syslog.protocol") -> SyslogProtocol:
    """Match a protocol token, ignoring case (``rfc3164`` and ``RFC3164`` are equal)."""
    try:
        return SyslogProtocol(value.lower())
    except ValueError:
        raise UnrecognizedValueError(field_name, value, SYSLOG_PROTOCOL_TOKENS) from None


def parse_syslog_facility(value: str, *, field_name: str = "log.syslog.facility") -> SyslogFacility:
    """Match a facility token exactly.

    Unlike :func:`parse_syslog_protocol` the match is case-sensitive, so
    ``LOCAL7`` is rejected while ``local7`` is accepted.
    """
    try:
        return SyslogFacility(value)
    except ValueError:
        raise UnrecognizedValueError(field_name, value, SYSLOG_FACILITY_TOKENS) from None


def syslog_handler_facility(facility: SyslogFacility) -> int:
    """Translate a facility into the code expected by ``SysLogHandler``."""
    return _HANDLER_FACILITIES[facility]
