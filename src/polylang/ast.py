"""AST node definitions for the Polylang language."""

from dataclasses import dataclass

from .types import Type, TypeVariable

# === Expressions ===


@dataclass(frozen=True, slots=True)
class NumberLiteral:
  """Number literal like 42 or 2.5."""

  value: int | float


@dataclass(frozen=True, slots=True)
class StringLiteral:
  """String literal like "hello"."""

  value: str


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
  """Boolean literal: true or false."""

  value: bool


@dataclass(frozen=True, slots=True)
class VarRef:
  """Variable reference. Also names a function when used as a value."""

  name: str


@dataclass(frozen=True, slots=True)
class Assignment:
  """Variable assignment: x <- expr. Evaluates to the assigned value."""

  name: str
  expr: "Expr"


@dataclass(frozen=True, slots=True)
class BinaryOp:
  """Binary expression like a + b or x < y."""

  op: str
  left: "Expr"
  right: "Expr"


@dataclass(frozen=True, slots=True)
class Call:
  """Function call like map(xs, double)."""

  name: str
  args: tuple["Expr", ...] = ()


@dataclass(frozen=True, slots=True)
class If:
  """Conditional expression. Exactly one branch is evaluated."""

  condition: "Expr"
  then_expr: "Expr"
  else_expr: "Expr"


@dataclass(frozen=True, slots=True)
class While:
  """While loop. Evaluates to nothing."""

  condition: "Expr"
  body: "Expr"


@dataclass(frozen=True, slots=True)
class Seq:
  """Sequence of expressions; the last one gives the value."""

  bodies: tuple["Expr", ...]


@dataclass(frozen=True, slots=True)
class ListLiteral:
  """List literal like [1, 2, 3]."""

  elements: tuple["Expr", ...]


@dataclass(frozen=True, slots=True)
class DictLiteral:
  """Dictionary literal: {key: value, ...}."""

  entries: tuple[tuple["Expr", "Expr"], ...]  # (key, value) pairs


# Expression union type
Expr = (
  NumberLiteral
  | StringLiteral
  | BooleanLiteral
  | VarRef
  | Assignment
  | BinaryOp
  | Call
  | If
  | While
  | Seq
  | ListLiteral
  | DictLiteral
)


# === Top-level Definitions ===


@dataclass(frozen=True, slots=True)
class Parameter:
  """Function parameter with name and declared type (None when untyped)."""

  name: str
  type_ann: Type | None = None


@dataclass(frozen=True, slots=True)
class FunctionDef:
  """Function definition, polymorphic over type_params."""

  name: str
  params: tuple[Parameter, ...]
  return_type: Type | None
  body: Expr
  type_params: tuple[TypeVariable, ...] = ()

  @property
  def typed(self) -> bool:
    return self.return_type is not None and all(p.type_ann is not None for p in self.params)


@dataclass(frozen=True, slots=True)
class Program:
  """Root node: function definitions plus top-level expressions run in order."""

  defs: tuple[FunctionDef, ...]
  expressions: tuple[Expr, ...]
