"""Runtime settings, resolved from POLYLANG_* environment variables."""

import os
import logging
from dataclasses import dataclass, replace

from .environment import SCOPE_POLICIES

_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(var: str, default: bool) -> bool:
  raw = os.environ.get(var)
  if raw is None or not raw.strip():
    return default
  return raw.strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class Settings:
  """How a program is run.

  scope: 'static' (callees see only their parameters) or 'dynamic'
    (callees see a copy of the caller's variables).
  check: run the type checker before evaluating.
  log_level: level name for the polylang loggers.
  """

  scope: str = "static"
  check: bool = True
  log_level: str = "WARNING"

  def __post_init__(self) -> None:
    if self.scope not in SCOPE_POLICIES:
      raise ValueError(f"Unknown scope policy '{self.scope}', expected one of: {', '.join(SCOPE_POLICIES)}")
    # getLevelName maps known level names to their numeric value
    if not isinstance(logging.getLevelName(self.log_level.upper()), int):
      raise ValueError(f"Unknown log level '{self.log_level}'")

  @classmethod
  def from_env(cls) -> "Settings":
    return cls(
      scope=os.environ.get("POLYLANG_SCOPE", "static").strip().lower() or "static",
      check=_env_flag("POLYLANG_CHECK", True),
      log_level=os.environ.get("POLYLANG_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )

  def override(self, **changes) -> "Settings":
    """Return a copy with the non-None values in `changes` applied."""
    return replace(self, **{k: v for k, v in changes.items() if v is not None})
