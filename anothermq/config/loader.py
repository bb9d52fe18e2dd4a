"""Config loading and initialization."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
import shutil
import tomllib
from typing import Any, Mapping

import tomli_w
import yaml

from anothermq.config.paths import Platform, PrefixQuery, resolve_config_path
from anothermq.config.schema import Config, config_to_dict, parse_config
from anothermq.config.variants import ConfigError


DEFAULT_CONFIG_PATH = Path(__file__).with_name("defaults.toml")
YAML_SUFFIXES = {".yml", ".yaml"}
DUMP_FORMATS = ("toml", "yaml", "json")


@dataclass(frozen=True, slots=True)
class LoadResult:
    config: Config
    path: Path
    error: Exception | None = None

    @property
    def used_defaults(self) -> bool:
        return self.error is not None


def read_document(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            document = yaml.safe_load(raw)
        except (yaml.YAMLError, RecursionError) as exc:
            raise ConfigError(f"malformed YAML document {path}: {exc}") from exc
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ConfigError(f"configuration document must be a table: {path}")
        return document
    try:
        return tomllib.loads(raw)
    except (tomllib.TOMLDecodeError, RecursionError) as exc:
        raise ConfigError(f"malformed TOML document {path}: {exc}") from exc


def load_config_result(path: str | Path) -> LoadResult:
    """Load ``path`` and keep the reason when defaults had to be used."""
    config_path = Path(path)
    try:
        config = parse_config(read_document(config_path))
    except (OSError, ValueError) as exc:
        return LoadResult(config=Config(), path=config_path, error=exc)
    return LoadResult(config=config, path=config_path)


def load_config(path: str | Path) -> Config:
    """Load the configuration at ``path``.

    A missing, unreadable or invalid file yields the default configuration;
    the caller is never told which of these happened.
    """
    return load_config_result(path).config


def load_default_config(
    platform: Platform | None = None,
    environ: Mapping[str, str] | None = None,
    prefix_query: PrefixQuery | None = None,
) -> Config:
    """Load the configuration from the platform's default location.

    Raises :class:`~anothermq.config.paths.EnvironmentNotConfiguredError` when
    the location cannot be computed (``APPDATA`` unset on Windows).
    """
    return load_config(resolve_config_path(platform, environ, prefix_query))


def initialize_config(path: Path, force: bool = False) -> Path:
    if path.exists() and not force:
        raise FileExistsError(f"config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(DEFAULT_CONFIG_PATH, path)
    return path


def dump_config(config: Config, fmt: str = "toml") -> str:
    document = config_to_dict(config)
    if fmt == "toml":
        return tomli_w.dumps(document)
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False)
    if fmt == "json":
        return json.dumps(document, indent=2)
    raise ValueError(f"unsupported dump format '{fmt}'")
