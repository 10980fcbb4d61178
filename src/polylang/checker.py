"""Type checker for the Polylang language."""

import logging
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
  FunctionDef,
  DictLiteral,
  ListLiteral,
  NumberLiteral,
  StringLiteral,
  BooleanLiteral,
)
from .types import (
  VOID,
  NUMBER,
  STRING,
  BOOLEAN,
  Type,
  DictType,
  ListType,
  FunctionType,
  TypeVariable,
  TypeVarSupply,
  DEFAULT_SUPPLY,
  type_to_str,
  types_equal,
)
from .unify import Substitution, instantiate, match_function_types, substitute_type_variables
from .errors import (
  ArityError,
  TypeMismatchError,
  UndefinedFunctionError,
  UndefinedVariableError,
  UnsupportedOperatorError,
)
from .builtins import BUILTINS

logger = logging.getLogger(__name__)

ARITHMETIC_OPS = ("+", "-", "*", "/", "%")
COMPARISON_OPS = ("<", ">", "<=", ">=", "==", "!=")


@dataclass
class FunctionInfo:
  """Signature of a callable name: built-in, user definition or function-typed variable."""

  type: FunctionType
  type_params: tuple[TypeVariable, ...] = ()
  definition: FunctionDef | None = None
  variadic: bool = False


class TypeChecker:
  """Checks a program against its annotations, instantiating generic signatures per call site."""

  def __init__(self, supply: TypeVarSupply | None = None) -> None:
    # Fresh type variables for instantiation and empty collection literals
    self.supply = supply if supply is not None else DEFAULT_SUPPLY
    # Function signatures: name -> FunctionInfo (built once, before any body is checked)
    self.functions: dict[str, FunctionInfo] = {}
    # Top-level variable types, mutated by assignments
    self.globals: dict[str, Type] = {}

  def check(self, program: Program) -> Type:
    """Type check an entire program and return the type of its last expression."""
    # First: built-ins
    for name, builtin in BUILTINS.items():
      self.functions[name] = FunctionInfo(builtin.type, builtin.type_params, None, builtin.variadic)

    # Second: user signatures, so bodies may reference each other
    for func in program.defs:
      self.functions[func.name] = FunctionInfo(self._signature(func), func.type_params, func)
      logger.debug("registered %s :: %s", func.name, type_to_str(self.functions[func.name].type))

    # Third: function bodies, each checked independently
    for func in program.defs:
      self._check_function(func)

    # Fourth: top-level expressions, in order
    result: Type = VOID
    for expr in program.expressions:
      result = self._check_expr(expr, self.globals)
    return result

  def _signature(self, func: FunctionDef) -> FunctionType:
    if not func.typed:
      raise TypeMismatchError(f"Function {func.name} is missing type annotations")
    return FunctionType(tuple(p.type_ann for p in func.params), func.return_type)

  def _check_function(self, func: FunctionDef) -> None:
    """Type check a function body against its declared return type."""
    env: dict[str, Type] = {p.name: p.type_ann for p in func.params}
    body_type = self._check_expr(func.body, env)
    if not types_equal(body_type, func.return_type):
      raise TypeMismatchError(
        f"Return type mismatch in function {func.name}: declared {type_to_str(func.return_type)}, body has {type_to_str(body_type)}"
      )

  def _lookup_function(self, name: str, env: dict[str, Type]) -> FunctionInfo:
    info = self.functions.get(name)
    if info is not None:
      return info
    # A variable holding a function value can be called by name
    var_type = env.get(name)
    if isinstance(var_type, FunctionType):
      return FunctionInfo(var_type)
    raise UndefinedFunctionError(f"Function {name} is not defined")

  def _check_expr(self, expr: Expr, env: dict[str, Type]) -> Type:
    """Type check an expression and return its type."""
    match expr:
      case NumberLiteral(_):
        return NUMBER

      case StringLiteral(_):
        return STRING

      case BooleanLiteral(_):
        return BOOLEAN

      case VarRef(name):
        if name in env:
          return env[name]
        if name in self.functions:
          info = self.functions[name]
          if info.type_params:
            return instantiate(info.type, info.type_params, self.supply)
          return info.type
        raise UndefinedVariableError(f"Variable {name} is not defined")

      case Assignment(name, value):
        value_type = self._check_expr(value, env)
        env[name] = value_type
        return value_type

      case BinaryOp(op, left, right):
        left_type = self._check_expr(left, env)
        right_type = self._check_expr(right, env)
        return self._check_binary(op, left_type, right_type)

      case If(condition, then_expr, else_expr):
        self._expect_condition(condition, env)
        then_type = self._check_expr(then_expr, env)
        else_type = self._check_expr(else_expr, env)
        if not types_equal(then_type, else_type):
          raise TypeMismatchError(
            f"Types of then and else branches must be the same: {type_to_str(then_type)} vs {type_to_str(else_type)}"
          )
        return then_type

      case While(condition, body):
        self._expect_condition(condition, env)
        self._check_expr(body, env)
        return VOID

      case Seq(bodies):
        result: Type = VOID
        for body in bodies:
          result = self._check_expr(body, env)
        return result

      case Call(name, args):
        return self._check_call(name, args, env)

      case ListLiteral(elements):
        if not elements:
          return ListType(self.supply.fresh("E"))
        first_type = self._check_expr(elements[0], env)
        for i, elem in enumerate(elements[1:], 2):
          elem_type = self._check_expr(elem, env)
          if not types_equal(elem_type, first_type):
            raise TypeMismatchError(
              f"All elements of the list must have the same type: element {i} has type {type_to_str(elem_type)}, expected {type_to_str(first_type)}"
            )
        return ListType(first_type)

      case DictLiteral(entries):
        if not entries:
          return DictType(self.supply.fresh("K"), self.supply.fresh("V"))
        key_types = []
        value_types = []
        for key, value in entries:
          key_types.append(self._check_expr(key, env))
          value_types.append(self._check_expr(value, env))
        for t in key_types[1:]:
          if not types_equal(t, key_types[0]):
            raise TypeMismatchError(
              f"All keys of the dictionary must have the same type: {type_to_str(t)} vs {type_to_str(key_types[0])}"
            )
        for t in value_types[1:]:
          if not types_equal(t, value_types[0]):
            raise TypeMismatchError(
              f"All values of the dictionary must have the same type: {type_to_str(t)} vs {type_to_str(value_types[0])}"
            )
        return DictType(key_types[0], value_types[0])

    raise TypeMismatchError(f"Unknown expression type: {type(expr).__name__}")

  def _expect_condition(self, condition: Expr, env: dict[str, Type]) -> None:
    cond_type = self._check_expr(condition, env)
    if not types_equal(cond_type, BOOLEAN):
      raise TypeMismatchError(f"Condition expression must be Boolean, got {type_to_str(cond_type)}")

  def _check_binary(self, op: str, left_type: Type, right_type: Type) -> Type:
    if op in ARITHMETIC_OPS:
      if types_equal(left_type, NUMBER) and types_equal(right_type, NUMBER):
        return NUMBER
      if op == "+" and types_equal(left_type, STRING) and types_equal(right_type, STRING):
        return STRING
      if (
        op == "+"
        and isinstance(left_type, ListType)
        and isinstance(right_type, ListType)
        and types_equal(left_type.element_type, right_type.element_type)
      ):
        return ListType(left_type.element_type)
      raise TypeMismatchError(f"Unsupported operand types for {op}: {type_to_str(left_type)} and {type_to_str(right_type)}")
    if op in COMPARISON_OPS:
      return BOOLEAN
    raise UnsupportedOperatorError(f"Unsupported operator: {op}")

  def _check_call(self, name: str, args: tuple[Expr, ...], env: dict[str, Type]) -> Type:
    info = self._lookup_function(name, env)
    func_type = info.type
    if info.type_params:
      func_type = instantiate(func_type, info.type_params, self.supply)
      logger.debug("instantiated %s as %s", name, type_to_str(func_type))
    if not isinstance(func_type, FunctionType):
      raise TypeMismatchError(f"{name} is not a function: {type_to_str(func_type)}")

    arg_types = [self._check_expr(arg, env) for arg in args]

    if info.variadic:
      # Every argument must match the single declared parameter type
      func_type = FunctionType((func_type.param_types[0],) * len(arg_types), func_type.return_type)
    elif len(func_type.param_types) != len(arg_types):
      raise ArityError(f"Function {name} expects {len(func_type.param_types)} arguments, got {len(arg_types)}")

    subst: Substitution = {}
    if not match_function_types(func_type, arg_types, subst):
      expected = ", ".join(type_to_str(t) for t in func_type.param_types)
      actual = ", ".join(type_to_str(t) for t in arg_types)
      raise TypeMismatchError(f"Argument types do not match for function {name}: expected ({expected}), got ({actual})")
    return substitute_type_variables(func_type.return_type, subst)


def check_program(program: Program, supply: TypeVarSupply | None = None) -> Type:
  """Type check a program, raising on the first violation.

  Returns:
    The static type of the last top-level expression (Void when there is none).
  """
  return TypeChecker(supply).check(program)
