"""Runtime environments and the scoping policies used when calling functions.

An Environment holds the bindings of one activation: the top level of a
program, or one function call. A ScopePolicy decides what a callee's new
environment starts with:

- StaticScope: only the callee's formal parameters. The caller's bindings are
  invisible inside the callee.
- DynamicScope: a copy of the caller's whole environment plus the formals, so a
  callee can read variables its caller assigned. Assignments in the callee
  never leak back into the caller.
"""

from typing import Any, Iterable, Protocol
from collections.abc import Sequence

from .errors import UndefinedVariableError


class Environment:
  """Mapping from variable names to runtime values for one activation."""

  __slots__ = ("vars",)

  def __init__(self, bindings: Iterable[tuple[str, Any]] | dict[str, Any] | None = None) -> None:
    self.vars: dict[str, Any] = dict(bindings or {})

  def __contains__(self, name: str) -> bool:
    return name in self.vars

  def lookup(self, name: str) -> Any:
    try:
      return self.vars[name]
    except KeyError:
      raise UndefinedVariableError(f"Variable {name} is not defined") from None

  def define(self, name: str, value: Any) -> None:
    self.vars[name] = value

  def copy(self) -> "Environment":
    return Environment(self.vars)

  def __repr__(self) -> str:
    return f"Environment({self.vars!r})"


class ScopePolicy(Protocol):
  name: str

  def enter(self, caller: Environment, params: Sequence[str], args: Sequence[Any]) -> Environment:
    """Build the environment a callee's body runs in."""
    ...


class StaticScope:
  name = "static"

  def enter(self, caller: Environment, params: Sequence[str], args: Sequence[Any]) -> Environment:
    return Environment(zip(params, args))


class DynamicScope:
  name = "dynamic"

  def enter(self, caller: Environment, params: Sequence[str], args: Sequence[Any]) -> Environment:
    env = caller.copy()
    for param, arg in zip(params, args):
      env.define(param, arg)
    return env


SCOPE_POLICIES: dict[str, type] = {
  StaticScope.name: StaticScope,
  DynamicScope.name: DynamicScope,
}


def scope_policy(name: str) -> ScopePolicy:
  """Return a policy instance by name ('static' or 'dynamic')."""
  try:
    return SCOPE_POLICIES[name]()
  except KeyError:
    raise ValueError(f"Unknown scope policy '{name}', expected one of: {', '.join(SCOPE_POLICIES)}") from None
