"""Type model for the Polylang language."""

import threading
from dataclasses import dataclass

from .errors import TranslationError


@dataclass(frozen=True, slots=True)
class PrimitiveType:
  """Primitive type like Number, String or Boolean."""

  name: str


@dataclass(frozen=True, slots=True)
class FunctionType:
  """Function type: (Number, Number) -> Number."""

  param_types: tuple["Type", ...]
  return_type: "Type"


@dataclass(frozen=True, slots=True)
class ListType:
  """Homogeneous list type: List<T>."""

  element_type: "Type"


@dataclass(frozen=True, slots=True)
class DictType:
  """Dictionary type: Dict<K, V>."""

  key_type: "Type"
  value_type: "Type"


@dataclass(frozen=True, slots=True)
class TypeVariable:
  """Placeholder type, bound only within a single match or instantiation.

  Two variables are the same variable iff their names match.
  """

  name: str


Type = PrimitiveType | FunctionType | ListType | DictType | TypeVariable


NUMBER = PrimitiveType("Number")
STRING = PrimitiveType("String")
BOOLEAN = PrimitiveType("Boolean")
VOID = PrimitiveType("Void")


def types_equal(a: Type, b: Type) -> bool:
  """Structural equality. Variables compare by name only, never through bindings."""
  match a, b:
    case PrimitiveType(x), PrimitiveType(y):
      return x == y
    case TypeVariable(x), TypeVariable(y):
      return x == y
    case ListType(x), ListType(y):
      return types_equal(x, y)
    case DictType(ak, av), DictType(bk, bv):
      return types_equal(ak, bk) and types_equal(av, bv)
    case FunctionType(a_params, a_ret), FunctionType(b_params, b_ret):
      if len(a_params) != len(b_params):
        return False
      for x, y in zip(a_params, b_params):
        if not types_equal(x, y):
          return False
      return types_equal(a_ret, b_ret)
  return False


def type_to_str(t: Type | None) -> str:
  """Render a type in the same syntax parse_type accepts."""
  match t:
    case None:
      return "Void"
    case PrimitiveType(name) | TypeVariable(name):
      return name
    case ListType(elem):
      return f"List<{type_to_str(elem)}>"
    case DictType(key, value):
      return f"Dict<{type_to_str(key)}, {type_to_str(value)}>"
    case FunctionType(params, ret):
      param_strs = ", ".join(type_to_str(p) for p in params)
      return f"({param_strs}) -> {type_to_str(ret)}"
  raise TypeError(f"Unknown type: {t!r}")


class TypeVarSupply:
  """Source of fresh type variables.

  The counter is monotonic for the lifetime of the supply; reset() exists for
  starting independent sessions (tests), never for use mid-program.
  """

  def __init__(self, start: int = 0) -> None:
    self._start = start
    self._next = start
    self._lock = threading.Lock()

  def fresh(self, prefix: str = "T") -> TypeVariable:
    with self._lock:
      n = self._next
      self._next += 1
    return TypeVariable(f"{prefix}{n}")

  def reset(self) -> None:
    with self._lock:
      self._next = self._start

  @property
  def issued(self) -> int:
    """Number of variables handed out since the last reset."""
    return self._next - self._start


# Process-wide supply used when no explicit supply is injected
DEFAULT_SUPPLY = TypeVarSupply()


def fresh_variable(prefix: str = "T") -> TypeVariable:
  return DEFAULT_SUPPLY.fresh(prefix)


def reset_fresh_variables() -> None:
  DEFAULT_SUPPLY.reset()


# === Textual type syntax ===

_PRIMITIVES = {"Number": NUMBER, "String": STRING, "Boolean": BOOLEAN, "Void": VOID}


class _TypeParser:
  """Recursive-descent parser for type strings like Dict<String, List<T>>."""

  def __init__(self, text: str, type_params: frozenset[str]) -> None:
    self.text = text
    self.pos = 0
    self.type_params = type_params

  def _skip_ws(self) -> None:
    while self.pos < len(self.text) and self.text[self.pos].isspace():
      self.pos += 1

  def _peek(self) -> str:
    self._skip_ws()
    return self.text[self.pos] if self.pos < len(self.text) else ""

  def _expect(self, s: str) -> None:
    self._skip_ws()
    if not self.text.startswith(s, self.pos):
      raise TranslationError(f"Expected '{s}' at position {self.pos} in type '{self.text}'")
    self.pos += len(s)

  def _ident(self) -> str:
    self._skip_ws()
    start = self.pos
    while self.pos < len(self.text) and (self.text[self.pos].isalnum() or self.text[self.pos] == "_"):
      self.pos += 1
    if start == self.pos:
      raise TranslationError(f"Expected type name at position {start} in type '{self.text}'")
    return self.text[start : self.pos]

  def parse(self) -> Type:
    t = self._type()
    self._skip_ws()
    if self.pos != len(self.text):
      raise TranslationError(f"Unexpected trailing input in type '{self.text}'")
    return t

  def _type(self) -> Type:
    if self._peek() == "(":
      self._expect("(")
      params: list[Type] = []
      if self._peek() != ")":
        params.append(self._type())
        while self._peek() == ",":
          self._expect(",")
          params.append(self._type())
      self._expect(")")
      self._expect("->")
      return FunctionType(tuple(params), self._type())

    name = self._ident()
    if name == "List":
      self._expect("<")
      elem = self._type()
      self._expect(">")
      return ListType(elem)
    if name == "Dict":
      self._expect("<")
      key = self._type()
      self._expect(",")
      value = self._type()
      self._expect(">")
      return DictType(key, value)
    if name in self.type_params:
      return TypeVariable(name)
    if name in _PRIMITIVES:
      return _PRIMITIVES[name]
    raise TranslationError(f"Unknown type '{name}' in '{self.text}'")


def parse_type(text: str, type_params: tuple[str, ...] | list[str] = ()) -> Type:
  """Parse a type string. Names listed in type_params become type variables."""
  return _TypeParser(text, frozenset(type_params)).parse()
