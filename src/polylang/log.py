"""Logging setup for the polylang loggers."""

import os
import logging
import logging.config
from typing import Any, Mapping
from pathlib import Path
from threading import RLock

import yaml

_CONFIG_LOCK = RLock()
_CONFIGURED = False

_DEFAULT_CONFIG: dict[str, Any] = {
  "version": 1,
  "disable_existing_loggers": False,
  "formatters": {
    "standard": {
      "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    }
  },
  "handlers": {
    "console": {
      "class": "logging.StreamHandler",
      "stream": "ext://sys.stderr",
      "formatter": "standard",
    }
  },
  "loggers": {
    "polylang": {
      "level": "WARNING",
      "handlers": ["console"],
      "propagate": False,
    }
  },
}

_KEYS = ("version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers")


def _load_config(path: Path | None) -> dict[str, Any]:
  config = dict(_DEFAULT_CONFIG)
  if path is None or not path.exists():
    return config
  try:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
  except yaml.YAMLError as exc:
    logging.getLogger("polylang").warning("failed to parse %s: %s", path, exc)
    return config
  if not isinstance(data, Mapping):
    return config
  config.update({k: v for k, v in data.items() if k in _KEYS})
  return config


def configure(level: str | None = None, force: bool = False) -> None:
  """Configure logging once; a YAML file in POLYLANG_LOGGING_CONFIG replaces the defaults."""
  global _CONFIGURED
  with _CONFIG_LOCK:
    if not _CONFIGURED or force:
      raw_path = os.environ.get("POLYLANG_LOGGING_CONFIG")
      logging.config.dictConfig(_load_config(Path(raw_path) if raw_path else None))
      _CONFIGURED = True
    if level is not None:
      logging.getLogger("polylang").setLevel(level.upper())
