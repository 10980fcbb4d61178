"""Built-in functions: declared types plus native implementations."""

from typing import TYPE_CHECKING, Any

from .types import NUMBER, STRING, BOOLEAN, ListType, DictType, FunctionType, TypeVariable
from .errors import ArityError, UnsupportedOperandError
from .values import BuiltinFunction, is_number, kind_of, truthy, format_value, UserFunction

if TYPE_CHECKING:
  from .evaluator import CallContext

T = TypeVariable("T")
U = TypeVariable("U")
K = TypeVariable("K")
V = TypeVariable("V")


def _expect_arity(name: str, args: list[Any], count: int) -> None:
  if len(args) != count:
    noun = "argument" if count == 1 else "arguments"
    raise ArityError(f"{name} expects exactly {count} {noun}, got {len(args)}")


def _expect_list(name: str, value: Any, position: str = "first") -> list[Any]:
  if not isinstance(value, list):
    raise UnsupportedOperandError(f"{name} expects a list as the {position} argument, got {kind_of(value)}")
  return value


def _expect_dict(name: str, value: Any, position: str = "first") -> dict[Any, Any]:
  if not isinstance(value, dict):
    raise UnsupportedOperandError(f"{name} expects a dictionary as the {position} argument, got {kind_of(value)}")
  return value


def _expect_function(name: str, value: Any) -> Any:
  if not isinstance(value, (UserFunction, BuiltinFunction)):
    raise UnsupportedOperandError(f"{name} expects a function as the second argument, got {kind_of(value)}")
  return value


def _expect_key(name: str, key: Any) -> Any:
  try:
    hash(key)
  except TypeError:
    raise UnsupportedOperandError(f"{name} cannot use a {kind_of(key)} as a dictionary key") from None
  return key


# === Output and input ===


def _print(args: list[Any], ctx: "CallContext") -> Any:
  _expect_arity("print", args, 1)
  ctx.stdout.write(format_value(args[0]) + "\n")
  return args[0]


def _input(args: list[Any], ctx: "CallContext") -> str:
  _expect_arity("input", args, 0)
  return ctx.stdin.readline().rstrip("\n")


# === Arithmetic ===


def _add(args: list[Any], ctx: "CallContext") -> int | float:
  total: int | float = 0
  for arg in args:
    if not is_number(arg):
      raise UnsupportedOperandError(f"add expects numbers, got {kind_of(arg)}")
    total += arg
  return total


def _mul(args: list[Any], ctx: "CallContext") -> int | float:
  product: int | float = 1
  for arg in args:
    if not is_number(arg):
      raise UnsupportedOperandError(f"mul expects numbers, got {kind_of(arg)}")
    product *= arg
  return product


def _len(args: list[Any], ctx: "CallContext") -> int:
  _expect_arity("len", args, 1)
  value = args[0]
  if not isinstance(value, (str, list)):
    raise UnsupportedOperandError(f"len expects a string or list, got {kind_of(value)}")
  return len(value)


# === Higher-order list functions ===


def _map(args: list[Any], ctx: "CallContext") -> list[Any]:
  _expect_arity("map", args, 2)
  items = _expect_list("map", args[0])
  fn = _expect_function("map", args[1])
  return [ctx.call(fn, [item]) for item in items]


def _filter(args: list[Any], ctx: "CallContext") -> list[Any]:
  _expect_arity("filter", args, 2)
  items = _expect_list("filter", args[0])
  fn = _expect_function("filter", args[1])
  return [item for item in items if truthy(ctx.call(fn, [item]))]


def _reduce(args: list[Any], ctx: "CallContext") -> Any:
  _expect_arity("reduce", args, 3)
  items = _expect_list("reduce", args[0])
  fn = _expect_function("reduce", args[1])
  acc = args[2]
  for item in items:
    acc = ctx.call(fn, [acc, item])
  return acc


# === Strings ===


def _to_upper_case(args: list[Any], ctx: "CallContext") -> str:
  _expect_arity("toUpperCase", args, 1)
  if not isinstance(args[0], str):
    raise UnsupportedOperandError(f"toUpperCase expects a string, got {kind_of(args[0])}")
  return args[0].upper()


def _split(args: list[Any], ctx: "CallContext") -> list[str]:
  _expect_arity("split", args, 2)
  text, separator = args
  if not isinstance(text, str) or not isinstance(separator, str):
    raise UnsupportedOperandError("split expects strings as arguments")
  if separator == "":
    return list(text)
  return text.split(separator)


def _join(args: list[Any], ctx: "CallContext") -> str:
  _expect_arity("join", args, 2)
  items, separator = args
  if not isinstance(items, list) or not isinstance(separator, str):
    raise UnsupportedOperandError("join expects a list and a string")
  return separator.join(format_value(item) for item in items)


# === Dictionaries ===


def _keys(args: list[Any], ctx: "CallContext") -> list[Any]:
  _expect_arity("keys", args, 1)
  return list(_expect_dict("keys", args[0]).keys())


def _values(args: list[Any], ctx: "CallContext") -> list[Any]:
  _expect_arity("values", args, 1)
  return list(_expect_dict("values", args[0]).values())


def _get(args: list[Any], ctx: "CallContext") -> Any:
  # An absent key yields None rather than an error
  _expect_arity("get", args, 2)
  mapping = _expect_dict("get", args[0])
  return mapping.get(_expect_key("get", args[1]))


def _has_key(args: list[Any], ctx: "CallContext") -> bool:
  _expect_arity("hasKey", args, 2)
  mapping = _expect_dict("hasKey", args[0])
  return _expect_key("hasKey", args[1]) in mapping


def _merge(args: list[Any], ctx: "CallContext") -> dict[Any, Any]:
  _expect_arity("merge", args, 2)
  first = _expect_dict("merge", args[0])
  second = _expect_dict("merge", args[1], "second")
  return {**first, **second}


# === Booleans ===


def _and(args: list[Any], ctx: "CallContext") -> bool:
  _expect_arity("and", args, 2)
  a, b = args
  if not isinstance(a, bool) or not isinstance(b, bool):
    raise UnsupportedOperandError("and expects booleans")
  return a and b


def _or(args: list[Any], ctx: "CallContext") -> bool:
  _expect_arity("or", args, 2)
  a, b = args
  if not isinstance(a, bool) or not isinstance(b, bool):
    raise UnsupportedOperandError("or expects booleans")
  return a or b


def _not(args: list[Any], ctx: "CallContext") -> bool:
  _expect_arity("not", args, 1)
  if not isinstance(args[0], bool):
    raise UnsupportedOperandError("not expects a boolean")
  return not args[0]


def _fn(*params, ret) -> FunctionType:
  return FunctionType(tuple(params), ret)


BUILTINS: dict[str, BuiltinFunction] = {
  b.name: b
  for b in (
    # print :: forall T. (T) -> T
    BuiltinFunction("print", _print, _fn(T, ret=T), (T,)),
    BuiltinFunction("input", _input, _fn(ret=STRING)),
    BuiltinFunction("add", _add, _fn(NUMBER, ret=NUMBER), variadic=True),
    BuiltinFunction("mul", _mul, _fn(NUMBER, ret=NUMBER), variadic=True),
    # len :: forall T. (T) -> Number, checked at run time for strings and lists
    BuiltinFunction("len", _len, _fn(T, ret=NUMBER), (T,)),
    # map :: forall T, U. (List<T>, (T) -> U) -> List<U>
    BuiltinFunction("map", _map, _fn(ListType(T), _fn(T, ret=U), ret=ListType(U)), (T, U)),
    # filter :: forall T. (List<T>, (T) -> Boolean) -> List<T>
    BuiltinFunction("filter", _filter, _fn(ListType(T), _fn(T, ret=BOOLEAN), ret=ListType(T)), (T,)),
    # reduce :: forall T, U. (List<T>, (U, T) -> U, U) -> U
    BuiltinFunction("reduce", _reduce, _fn(ListType(T), _fn(U, T, ret=U), U, ret=U), (T, U)),
    BuiltinFunction("toUpperCase", _to_upper_case, _fn(STRING, ret=STRING)),
    BuiltinFunction("split", _split, _fn(STRING, STRING, ret=ListType(STRING))),
    BuiltinFunction("join", _join, _fn(ListType(STRING), STRING, ret=STRING)),
    # keys :: forall K, V. (Dict<K, V>) -> List<K>
    BuiltinFunction("keys", _keys, _fn(DictType(K, V), ret=ListType(K)), (K, V)),
    BuiltinFunction("values", _values, _fn(DictType(K, V), ret=ListType(V)), (K, V)),
    BuiltinFunction("get", _get, _fn(DictType(K, V), K, ret=V), (K, V)),
    BuiltinFunction("hasKey", _has_key, _fn(DictType(K, V), K, ret=BOOLEAN), (K, V)),
    BuiltinFunction("merge", _merge, _fn(DictType(K, V), DictType(K, V), ret=DictType(K, V)), (K, V)),
    BuiltinFunction("and", _and, _fn(BOOLEAN, BOOLEAN, ret=BOOLEAN)),
    BuiltinFunction("or", _or, _fn(BOOLEAN, BOOLEAN, ret=BOOLEAN)),
    BuiltinFunction("not", _not, _fn(BOOLEAN, ret=BOOLEAN)),
  )
}
