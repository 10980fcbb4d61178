"""Runtime values: function entries, value kinds and rendering."""

import math
from typing import Any, Callable
from dataclasses import dataclass

from .ast import FunctionDef
from .types import FunctionType, TypeVariable


@dataclass(frozen=True, slots=True)
class UserFunction:
  """A user-defined function as it appears in the evaluator's function table."""

  definition: FunctionDef

  @property
  def name(self) -> str:
    return self.definition.name

  @property
  def param_names(self) -> tuple[str, ...]:
    return tuple(p.name for p in self.definition.params)


@dataclass(frozen=True, slots=True, eq=False)
class BuiltinFunction:
  """A native function with a declared (possibly generic) type.

  `impl` receives the evaluated arguments and the CallContext of the call site.
  A variadic builtin declares a single parameter type that every argument must match.
  """

  name: str
  impl: Callable[[list[Any], Any], Any]
  type: FunctionType
  type_params: tuple[TypeVariable, ...] = ()
  variadic: bool = False


FunctionValue = UserFunction | BuiltinFunction


def is_number(value: Any) -> bool:
  # bool is a subclass of int, so it has to be excluded explicitly
  return isinstance(value, (int, float)) and not isinstance(value, bool)


def kind_of(value: Any) -> str:
  """Name the run-time kind of a value, mirroring the static type names."""
  if value is None:
    return "Void"
  if isinstance(value, bool):
    return "Boolean"
  if is_number(value):
    return "Number"
  if isinstance(value, str):
    return "String"
  if isinstance(value, list):
    return "List"
  if isinstance(value, dict):
    return "Dict"
  if isinstance(value, (UserFunction, BuiltinFunction)):
    return "Function"
  return type(value).__name__


def truthy(value: Any) -> bool:
  """Falsy values are None, false, 0, "" and NaN. Collections and functions are always truthy."""
  if value is None or value is False or value == "":
    return False
  if is_number(value):
    return value != 0 and not math.isnan(value)
  return True


def values_equal(a: Any, b: Any) -> bool:
  """Strict equality: values of different kinds are never equal."""
  if kind_of(a) != kind_of(b):
    return False
  if isinstance(a, list):
    return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
  if isinstance(a, dict):
    return a.keys() == b.keys() and all(values_equal(a[k], b[k]) for k in a)
  return a == b


def format_value(value: Any, nested: bool = False) -> str:
  """Render a value the way print shows it."""
  if value is None:
    return "null"
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, float):
    if math.isnan(value):
      return "NaN"
    if math.isinf(value):
      return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
      return str(int(value))
    return repr(value)
  if isinstance(value, int):
    return str(value)
  if isinstance(value, str):
    return f'"{value}"' if nested else value
  if isinstance(value, list):
    return "[" + ", ".join(format_value(v, nested=True) for v in value) + "]"
  if isinstance(value, dict):
    items = ", ".join(f"{format_value(k, nested=True)}: {format_value(v, nested=True)}" for k, v in value.items())
    return "{" + items + "}"
  if isinstance(value, (UserFunction, BuiltinFunction)):
    return f"<function {value.name}>"
  return repr(value)
