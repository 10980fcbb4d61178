"""Translate JSON array-of-arrays programs into Polylang ASTs.

An expression is either a scalar literal or an array whose first element is
the opcode, followed by its operands:

  ["+", 1, 2]                    arithmetic and comparison operators
  ["seq", e1, e2, ...]
  ["if", cond, then, else]
  ["while", cond, body]
  ["<-", "x", expr]              assignment
  ["ref", "x"]
  ["call", "f", arg1, ...]
  ["list", e1, ...]
  ["dict", [k1, v1], ...]

A program is an object:

  {"functions": [[name, params, body, returnType?, typeParams?], ...],
   "body": expr}                  or  "expressions": [expr, ...]

A parameter is "x" (untyped) or ["x", "Number"]. Untyped functions can be
evaluated but not type checked.
"""

import json
from typing import Any
from pathlib import Path

from .ast import (
  If,
  Seq,
  Call,
  Expr,
  While,
  VarRef,
  Program,
  BinaryOp,
  Parameter,
  Assignment,
  DictLiteral,
  FunctionDef,
  ListLiteral,
  NumberLiteral,
  StringLiteral,
  BooleanLiteral,
)
from .types import TypeVariable, parse_type
from .errors import TranslationError

BINARY_OPCODES = ("+", "-", "*", "/", "%", "<", ">", "<=", ">=", "==", "!=")


def _expect_len(obj: list[Any], count: int) -> None:
  if len(obj) != count:
    raise TranslationError(f"'{obj[0]}' expects {count - 1} operands, got {len(obj) - 1}: {json.dumps(obj)}")


def _expect_name(value: Any, opcode: str) -> str:
  if not isinstance(value, str):
    raise TranslationError(f"'{opcode}' expects a name, got {json.dumps(value)}")
  return value


def translate_expr(obj: Any) -> Expr:
  """Translate one JSON value into an expression."""
  # bool before numbers: True is an int in Python
  if isinstance(obj, bool):
    return BooleanLiteral(obj)
  if isinstance(obj, (int, float)):
    return NumberLiteral(obj)
  if isinstance(obj, str):
    return StringLiteral(obj)
  if not isinstance(obj, list) or not obj:
    raise TranslationError(f"Not implemented for: {json.dumps(obj)}")

  opcode = obj[0]
  if opcode in BINARY_OPCODES:
    _expect_len(obj, 3)
    return BinaryOp(opcode, translate_expr(obj[1]), translate_expr(obj[2]))

  match opcode:
    case "seq":
      return Seq(tuple(translate_expr(e) for e in obj[1:]))
    case "if":
      _expect_len(obj, 4)
      return If(translate_expr(obj[1]), translate_expr(obj[2]), translate_expr(obj[3]))
    case "while":
      _expect_len(obj, 3)
      return While(translate_expr(obj[1]), translate_expr(obj[2]))
    case "<-":
      _expect_len(obj, 3)
      return Assignment(_expect_name(obj[1], opcode), translate_expr(obj[2]))
    case "ref":
      _expect_len(obj, 2)
      return VarRef(_expect_name(obj[1], opcode))
    case "call":
      if len(obj) < 2:
        raise TranslationError("'call' expects a function name")
      return Call(_expect_name(obj[1], opcode), tuple(translate_expr(a) for a in obj[2:]))
    case "list":
      return ListLiteral(tuple(translate_expr(e) for e in obj[1:]))
    case "dict":
      entries = []
      for entry in obj[1:]:
        if not isinstance(entry, list) or len(entry) != 2:
          raise TranslationError(f"'dict' entries must be [key, value] pairs, got {json.dumps(entry)}")
        entries.append((translate_expr(entry[0]), translate_expr(entry[1])))
      return DictLiteral(tuple(entries))

  raise TranslationError(f"Not implemented for: {json.dumps(obj)}")


def _translate_param(param: Any, type_params: list[str]) -> Parameter:
  if isinstance(param, str):
    return Parameter(param)
  if isinstance(param, list) and len(param) == 2 and all(isinstance(p, str) for p in param):
    return Parameter(param[0], parse_type(param[1], type_params))
  raise TranslationError(f"Invalid parameter: {json.dumps(param)}")


def translate_function(entry: Any) -> FunctionDef:
  """Translate [name, params, body, returnType?, typeParams?] into a FunctionDef."""
  if not isinstance(entry, list) or not 3 <= len(entry) <= 5:
    raise TranslationError(f"Invalid function definition: {json.dumps(entry)}")
  name, params, body = entry[0], entry[1], entry[2]
  if not isinstance(name, str) or not isinstance(params, list):
    raise TranslationError(f"Invalid function definition: {json.dumps(entry)}")

  type_params = entry[4] if len(entry) > 4 else []
  if not isinstance(type_params, list) or not all(isinstance(t, str) for t in type_params):
    raise TranslationError(f"Type parameters of {name} must be a list of names")

  return_type = None
  if len(entry) > 3 and entry[3] is not None:
    return_type = parse_type(entry[3], type_params)

  return FunctionDef(
    name,
    tuple(_translate_param(p, type_params) for p in params),
    return_type,
    translate_expr(body),
    tuple(TypeVariable(t) for t in type_params),
  )


def translate_program(obj: Any) -> Program:
  """Translate a decoded JSON program object."""
  if not isinstance(obj, dict):
    raise TranslationError("A program must be a JSON object")
  functions = obj.get("functions", [])
  if not isinstance(functions, list):
    raise TranslationError("'functions' must be a list")
  defs = tuple(translate_function(f) for f in functions)

  if "expressions" in obj:
    if not isinstance(obj["expressions"], list):
      raise TranslationError("'expressions' must be a list")
    expressions = tuple(translate_expr(e) for e in obj["expressions"])
  elif "body" in obj:
    expressions = (translate_expr(obj["body"]),)
  else:
    expressions = ()
  return Program(defs, expressions)


def load_program(text: str) -> Program:
  """Parse JSON text and translate it into a Program."""
  try:
    obj = json.loads(text)
  except json.JSONDecodeError as e:
    raise TranslationError(f"Invalid JSON: {e}") from e
  return translate_program(obj)


def load_file(path: Path) -> Program:
  return load_program(Path(path).read_text(encoding="utf-8"))
