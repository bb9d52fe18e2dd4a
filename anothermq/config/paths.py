"""Platform-specific location of the broker configuration file.

| Platform   | Default configuration file path                     |
| ---------- | --------------------------------------------------- |
| Windows    | ``%APPDATA%/another-mq/another-mq.toml``            |
| macOS      | ``$(brew --prefix)/etc/another-mq/another-mq.toml`` |
| Linux/Unix | ``$ANOTHERMQ_HOME/etc/another-mq/another-mq.toml``  |

``ANOTHERMQ_HOME`` is empty unless set. On macOS a failing ``brew`` falls back
to the Linux/Unix rule. ``APPDATA`` is mandatory on Windows.
"""

from __future__ import annotations

from enum import Enum
import os
import subprocess
import sys
from typing import Callable, Mapping

from anothermq.core.logging import get_logger


HOME_ENV_VAR = "ANOTHERMQ_HOME"
APPDATA_ENV_VAR = "APPDATA"
WINDOWS_CONFIG_SUFFIX = "/another-mq/another-mq.toml"
PREFIX_CONFIG_SUFFIX = "/etc/another-mq/another-mq.toml"
INSTALL_PREFIX_COMMAND = ["brew", "--prefix"]

PrefixQuery = Callable[[], str | None]

logger = get_logger("anothermq.config.paths")


class EnvironmentNotConfiguredError(RuntimeError):
    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"environment variable '{variable}' is not defined on this system")


class Platform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    UNIX = "unix"


def detect_platform(platform_name: str | None = None) -> Platform:
    name = sys.platform if platform_name is None else platform_name
    if name.startswith("win"):
        return Platform.WINDOWS
    if name == "darwin":
        return Platform.MACOS
    return Platform.UNIX


def query_install_prefix(runner: Callable[..., subprocess.CompletedProcess[bytes]] = subprocess.run) -> str | None:
    try:
        proc = runner(INSTALL_PREFIX_COMMAND, check=False, capture_output=True)
    except OSError as exc:
        logger.debug("install prefix query failed: %s", exc)
        return None
    if proc.returncode != 0:
        logger.debug("install prefix query exited with %s", proc.returncode)
        return None
    try:
        return proc.stdout.decode("utf-8").rstrip()
    except UnicodeDecodeError:
        logger.debug("install prefix query returned non utf-8 output")
        return None


def resolve_config_path(
    platform: Platform | None = None,
    environ: Mapping[str, str] | None = None,
    prefix_query: PrefixQuery | None = None,
) -> str:
    """Return the default configuration path for ``platform``.

    ``environ`` defaults to ``os.environ`` and ``prefix_query`` to
    :func:`query_install_prefix`; both are only consulted by the branches that
    need them. No file is touched.
    """
    target = detect_platform() if platform is None else platform
    env = os.environ if environ is None else environ

    if target is Platform.WINDOWS:
        appdata = env.get(APPDATA_ENV_VAR)
        if appdata is None:
            raise EnvironmentNotConfiguredError(APPDATA_ENV_VAR)
        return appdata + WINDOWS_CONFIG_SUFFIX

    if target is Platform.MACOS:
        query = query_install_prefix if prefix_query is None else prefix_query
        prefix = query()
        if prefix is None:
            prefix = env.get(HOME_ENV_VAR, "")
        return prefix + PREFIX_CONFIG_SUFFIX

    return env.get(HOME_ENV_VAR, "") + PREFIX_CONFIG_SUFFIX
