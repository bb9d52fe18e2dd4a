from datetime import datetime
import ipaddress
import json
import logging
from logging.handlers import SysLogHandler

from anothermq.config.schema import Log, Syslog
from anothermq.config.variants import SyslogFacility, SyslogProtocol
from anothermq.core.logging import (
    JsonFormatter,
    SyslogFormatter,
    build_handlers,
    configure_logging,
    get_logger,
)


def _record(message: str = "broker started") -> logging.LogRecord:
    return logging.LogRecord(
        name="anothermq.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def test_json_log_output_to_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "broker.log"
    configure_logging(Log(level="DEBUG", file=str(log_file)), force=True)
    get_logger("test.logging").debug("listener bound on %s", "0.0.0.0:5672")

    record = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert record["@timestamp"]
    assert record["message"] == "listener bound on 0.0.0.0:5672"
    assert record["log"]["level"] == "debug"
    assert record["log"]["logger"] == "anothermq.test.logging"
    assert record["process"]["name"] == "anothermq"


def test_level_threshold_filters_records(tmp_path) -> None:
    log_file = tmp_path / "broker.log"
    configure_logging(Log(level="WARNING", file=str(log_file)), force=True)
    logger = get_logger("anothermq.threshold")
    logger.info("hidden")
    logger.warning("shown")

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert [json.loads(line)["message"] for line in lines] == ["shown"]


def test_configure_logging_is_idempotent_without_force(tmp_path) -> None:
    first = configure_logging(Log(file=str(tmp_path / "a.log")), force=True)
    handlers = list(first.handlers)
    second = configure_logging(Log(file=str(tmp_path / "b.log")))
    assert second.handlers == handlers


def test_stdout_is_used_without_sinks() -> None:
    handlers = build_handlers(Log())
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert isinstance(handlers[0].formatter, JsonFormatter)


def test_file_and_syslog_handlers_together(tmp_path) -> None:
    handlers = build_handlers(
        Log(
            file=str(tmp_path / "broker.log"),
            syslog=Syslog(host=ipaddress.ip_address("127.0.0.1"), port=5514, facility=SyslogFacility.LOCAL4),
        )
    )
    try:
        assert isinstance(handlers[0], logging.FileHandler)
        syslog_handler = handlers[1]
        assert isinstance(syslog_handler, SysLogHandler)
        assert syslog_handler.address == ("127.0.0.1", 5514)
        assert syslog_handler.facility == SysLogHandler.LOG_LOCAL4
    finally:
        for handler in handlers:
            handler.close()


def test_remote_syslog_defaults_to_standard_port() -> None:
    handlers = build_handlers(Log(syslog=Syslog(host=ipaddress.ip_address("127.0.0.1"))))
    try:
        assert handlers[0].address == ("127.0.0.1", 514)
        assert handlers[0].facility == SysLogHandler.LOG_USER
    finally:
        handlers[0].close()


def test_rfc3164_syslog_body() -> None:
    formatter = SyslogFormatter(SyslogProtocol.RFC3164, process="another-mq", hostname="mq01")
    record = _record()
    record.created = datetime(2024, 1, 1, 9, 5, 7).timestamp()
    body = formatter.format(record)
    assert body.startswith("Jan  1 09:05:07 mq01 another-mq[")
    assert " mq01 another-mq[" in body
    assert body.endswith("]: broker started")


def test_rfc5424_syslog_body() -> None:
    formatter = SyslogFormatter(SyslogProtocol.RFC5424, process="", hostname="mq01")
    body = formatter.format(_record())
    parts = body.split(" ", 7)
    assert parts[0] == "1"
    assert parts[2] == "mq01"
    assert parts[3] == "anothermq"
    assert parts[5:7] == ["-", "-"]
    assert parts[7] == "broker started"


def test_get_logger_nests_under_package_logger() -> None:
    assert get_logger("anothermq").name == "anothermq"
    assert get_logger("anothermq.config").name == "anothermq.config"
    assert get_logger("listener").name == "anothermq.listener"
