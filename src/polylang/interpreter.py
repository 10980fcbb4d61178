"""Interpreter pipeline for the Polylang language: load, check, evaluate."""

import logging
from typing import Any, TextIO
from pathlib import Path
from dataclasses import dataclass

from .ast import Program
from .types import Type, TypeVarSupply, type_to_str
from .config import Settings
from .errors import PolyError
from .loader import load_program
from .checker import check_program
from .evaluator import Evaluator
from .environment import scope_policy

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
  """Outcome of running a program. On failure, `stage` names where it stopped."""

  success: bool
  value: Any = None
  type: Type | None = None
  error: str | None = None
  error_kind: str | None = None
  stage: str | None = None


def _failure(stage: str, e: Exception) -> RunResult:
  if isinstance(e, PolyError):
    label = {"load": "Load error", "check": "Type error", "eval": "Runtime error"}[stage]
    return RunResult(success=False, error=f"{label}: {e}", error_kind=e.kind, stage=stage)
  return RunResult(success=False, error=f"Internal error: {e}", error_kind="internal", stage=stage)


class Interpreter:
  """Orchestrates the pipeline. The checker, when enabled, gates evaluation."""

  def __init__(
    self,
    settings: Settings | None = None,
    stdout: TextIO | None = None,
    stdin: TextIO | None = None,
    supply: TypeVarSupply | None = None,
  ) -> None:
    self.settings = settings if settings is not None else Settings()
    self.stdout = stdout
    self.stdin = stdin
    self.supply = supply

  def check(self, program: Program) -> RunResult:
    """Type check only."""
    try:
      static_type = check_program(program, self.supply)
    except Exception as e:
      logger.debug("type check failed: %s", e)
      return _failure("check", e)
    return RunResult(success=True, type=static_type)

  def run(self, program: Program) -> RunResult:
    """Type check (unless disabled), then evaluate."""
    static_type = None
    if self.settings.check:
      checked = self.check(program)
      if not checked.success:
        return checked
      static_type = checked.type
      logger.info("type check passed: %s", type_to_str(static_type))

    evaluator = Evaluator(scope_policy(self.settings.scope), self.stdout, self.stdin)
    logger.info("evaluating with %s scope", self.settings.scope)
    try:
      value = evaluator.run(program)
    except Exception as e:
      logger.debug("evaluation failed: %s", e)
      return _failure("eval", e)
    return RunResult(success=True, value=value, type=static_type)

  def load(self, text: str) -> Program | RunResult:
    try:
      return load_program(text)
    except Exception as e:
      return _failure("load", e)

  def run_json(self, text: str, check_only: bool = False) -> RunResult:
    """Translate a JSON program, then check and/or run it."""
    program = self.load(text)
    if isinstance(program, RunResult):
      return program
    return self.check(program) if check_only else self.run(program)


def run_program(program: Program, settings: Settings | None = None) -> RunResult:
  """Convenience function to check and evaluate a program."""
  return Interpreter(settings).run(program)


def run_file(path: Path, settings: Settings | None = None) -> RunResult:
  """Run a JSON program file."""
  return Interpreter(settings).run_json(Path(path).read_text(encoding="utf-8"))
