"""Tree-walking evaluator for the Polylang language.

The evaluator never looks at declared types. It trusts that the checker ran
first when the caller wants that guarantee, and otherwise defends itself with
run-time kind checks on every operator and built-in.
"""

import sys
import math
import logging
from typing import Any, TextIO
from dataclasses import dataclass

from .ast import (
  If,
  Seq,
  Call,
  Expr,
  While,
  VarRef,
  Program,
  BinaryOp,
  Assignment,
  DictLiteral,
  ListLiteral,
  NumberLiteral,
  StringLiteral,
  BooleanLiteral,
)
from .values import (
  FunctionValue,
  UserFunction,
  BuiltinFunction,
  truthy,
  kind_of,
  is_number,
  format_value,
  values_equal,
)
from .errors import (
  ArityError,
  UndefinedFunctionError,
  UndefinedVariableError,
  UnsupportedOperandError,
  UnsupportedOperatorError,
)
from .builtins import BUILTINS
from .environment import Environment, ScopePolicy, StaticScope, DynamicScope

logger = logging.getLogger(__name__)

# Callbacks run by map, filter and reduce
CALLBACK_SCOPE = DynamicScope()


@dataclass
class CallContext:
  """What a built-in sees of its call site: the evaluator and the caller's environment."""

  evaluator: "Evaluator"
  env: Environment

  @property
  def functions(self) -> dict[str, FunctionValue]:
    return self.evaluator.functions

  @property
  def stdout(self) -> TextIO:
    return self.evaluator.stdout

  @property
  def stdin(self) -> TextIO:
    return self.evaluator.stdin

  def call(self, fn: FunctionValue, args: list[Any]) -> Any:
    """Invoke a function value on behalf of a higher-order built-in.

    A callback sees the variables of the built-in's call site with its own
    parameters bound over them, whatever the evaluator's scope policy.
    """
    return self.evaluator.apply(fn, args, self.env, CALLBACK_SCOPE)


class Evaluator:
  """Executes programs against runtime environments under a pluggable scope policy."""

  def __init__(
    self,
    scope: ScopePolicy | None = None,
    stdout: TextIO | None = None,
    stdin: TextIO | None = None,
  ) -> None:
    self.scope = scope if scope is not None else StaticScope()
    self.stdout = stdout if stdout is not None else sys.stdout
    self.stdin = stdin if stdin is not None else sys.stdin
    # Function table: built-ins overridden by user definitions of the same name
    self.functions: dict[str, FunctionValue] = dict(BUILTINS)

  def run(self, program: Program) -> Any:
    """Evaluate every top-level expression in order and return the last value."""
    for func in program.defs:
      self.functions[func.name] = UserFunction(func)

    env = Environment()
    result = None
    for expr in program.expressions:
      result = self.evaluate(expr, env)
    return result

  def evaluate(self, expr: Expr, env: Environment) -> Any:
    """Evaluate an expression and return its value."""
    match expr:
      case NumberLiteral(value) | StringLiteral(value) | BooleanLiteral(value):
        return value

      case VarRef(name):
        if name in env:
          return env.lookup(name)
        if name in self.functions:
          return self.functions[name]
        raise UndefinedVariableError(f"Variable {name} is not defined")

      case Assignment(name, value_expr):
        value = self.evaluate(value_expr, env)
        env.define(name, value)
        return value

      case BinaryOp(op, left, right):
        left_value = self.evaluate(left, env)
        right_value = self.evaluate(right, env)
        return binary_op(op, left_value, right_value)

      case If(condition, then_expr, else_expr):
        if truthy(self.evaluate(condition, env)):
          return self.evaluate(then_expr, env)
        return self.evaluate(else_expr, env)

      case While(condition, body):
        while truthy(self.evaluate(condition, env)):
          self.evaluate(body, env)
        return None

      case Seq(bodies):
        result = None
        for body in bodies:
          result = self.evaluate(body, env)
        return result

      case Call(name, args):
        fn = self._lookup_function(name, env)
        values = [self.evaluate(arg, env) for arg in args]
        return self.apply(fn, values, env)

      case ListLiteral(elements):
        return [self.evaluate(elem, env) for elem in elements]

      case DictLiteral(entries):
        result = {}
        for key_expr, value_expr in entries:
          key = self.evaluate(key_expr, env)
          value = self.evaluate(value_expr, env)
          try:
            result[key] = value
          except TypeError:
            raise UnsupportedOperandError(f"Cannot use a {kind_of(key)} as a dictionary key") from None
        return result

    raise UnsupportedOperatorError(f"Unknown expression type: {type(expr).__name__}")

  def _lookup_function(self, name: str, env: Environment) -> FunctionValue:
    fn = self.functions.get(name)
    if fn is not None:
      return fn
    if name in env:
      value = env.lookup(name)
      if isinstance(value, (UserFunction, BuiltinFunction)):
        return value
    raise UndefinedFunctionError(f"Function {name} is not defined")

  def apply(
    self,
    fn: FunctionValue,
    args: list[Any],
    caller_env: Environment,
    scope: ScopePolicy | None = None,
  ) -> Any:
    """Call a function value with already-evaluated arguments, under `scope` if given."""
    match fn:
      case BuiltinFunction():
        return fn.impl(args, CallContext(self, caller_env))
      case UserFunction(definition):
        params = fn.param_names
        if len(args) != len(params):
          raise ArityError(f"Function {definition.name} expects {len(params)} arguments, got {len(args)}")
        logger.debug("call %s(%s)", definition.name, ", ".join(format_value(a, nested=True) for a in args))
        callee_env = (scope if scope is not None else self.scope).enter(caller_env, params, args)
        return self.evaluate(definition.body, callee_env)
    raise UnsupportedOperandError(f"Cannot call a value of kind {kind_of(fn)}")


def _unsupported(op: str, left: Any, right: Any) -> UnsupportedOperandError:
  return UnsupportedOperandError(f"Unsupported operand types for {op}: {kind_of(left)} and {kind_of(right)}")


def binary_op(op: str, left: Any, right: Any) -> Any:
  """Apply a binary operator, overloaded on the run-time kinds of its operands."""
  match op:
    case "+":
      if is_number(left) and is_number(right):
        return left + right
      if isinstance(left, str) or isinstance(right, str):
        return format_value(left) + format_value(right)
      if isinstance(left, list) and isinstance(right, list):
        return left + right
      raise _unsupported(op, left, right)

    case "-" | "*" | "/" | "%":
      if not (is_number(left) and is_number(right)):
        raise _unsupported(op, left, right)
      if op == "-":
        return left - right
      if op == "*":
        return left * right
      if op == "/":
        return _divide(left, right)
      return _remainder(left, right)

    case "==":
      return values_equal(left, right)
    case "!=":
      return not values_equal(left, right)

    case "<" | ">" | "<=" | ">=":
      if not _comparable(left, right):
        return False
      if op == "<":
        return left < right
      if op == ">":
        return left > right
      if op == "<=":
        return left <= right
      return left >= right

  raise UnsupportedOperatorError(f"Unsupported operator: {op}")


def _divide(left: int | float, right: int | float) -> int | float:
  if right != 0:
    return left / right
  # x / 0 is signed infinity, 0 / 0 is NaN
  if left == 0 or math.isnan(left):
    return math.nan
  return math.inf if (left > 0) == (math.copysign(1, right) > 0) else -math.inf


def _remainder(left: int | float, right: int | float) -> int | float:
  """Truncated remainder: the result takes the sign of the dividend."""
  if right == 0 or math.isinf(left):
    return math.nan
  if isinstance(left, int) and isinstance(right, int):
    result = abs(left) % abs(right)
    return -result if left < 0 else result
  return math.fmod(left, right)


def _comparable(left: Any, right: Any) -> bool:
  # Booleans order as numbers; any other mix of kinds is unordered
  numeric = isinstance(left, (int, float)) and isinstance(right, (int, float))
  return numeric or (isinstance(left, str) and isinstance(right, str))


def eval_program(
  program: Program,
  scope: ScopePolicy | None = None,
  stdout: TextIO | None = None,
  stdin: TextIO | None = None,
) -> Any:
  """Evaluate a program and return the value of its last top-level expression."""
  return Evaluator(scope, stdout, stdin).run(program)
