"""Matching, substitution and instantiation over Polylang types.

Matching is one-directional: a pattern (which may mention type variables) is
compared against a concrete type and the substitution is extended in place.
The first binding of a variable wins; later occurrences are only reconciled
by looking the binding up and matching it again. There is no occurs-check,
which keeps this a lightweight "check with instantiation" rather than full
Hindley-Milner inference.
"""

from collections.abc import Sequence

from .types import Type, ListType, DictType, FunctionType, TypeVariable, PrimitiveType, TypeVarSupply, DEFAULT_SUPPLY
from .errors import SubstitutionCycleError

# Type variable name -> bound type. Built during one matching episode, then discarded.
Substitution = dict[str, Type]


def _refers_to(t: Type, name: str, subst: Substitution) -> bool:
  """Check whether t is the variable `name`, directly or through a chain of bound variables."""
  seen: set[str] = set()
  while isinstance(t, TypeVariable):
    if t.name == name:
      return True
    if t.name not in subst or t.name in seen:
      return False
    seen.add(t.name)
    t = subst[t.name]
  return False


def match_types(pattern: Type, concrete: Type, subst: Substitution) -> bool:
  """Match `pattern` against `concrete`, extending `subst`. Returns False on mismatch."""
  return _match(pattern, concrete, subst, frozenset())


def _match(pattern: Type, concrete: Type, subst: Substitution, resolving: frozenset[str]) -> bool:
  match pattern, concrete:
    case TypeVariable(name), _:
      if name in subst:
        if name in resolving:
          raise SubstitutionCycleError(f"Type variable '{name}' is bound in a cycle")
        return _match(subst[name], concrete, subst, resolving | {name})
      # Binding a variable to itself would make later lookups loop forever
      if not _refers_to(concrete, name, subst):
        subst[name] = concrete
      return True

    case _, TypeVariable(_):
      return _match(concrete, pattern, subst, resolving)

    case PrimitiveType(a), PrimitiveType(b):
      return a == b

    case ListType(a), ListType(b):
      return _match(a, b, subst, resolving)

    case DictType(ak, av), DictType(bk, bv):
      return _match(ak, bk, subst, resolving) and _match(av, bv, subst, resolving)

    case FunctionType(a_params, a_ret), FunctionType(b_params, b_ret):
      if len(a_params) != len(b_params):
        return False
      for a, b in zip(a_params, b_params):
        if not _match(a, b, subst, resolving):
          return False
      return _match(a_ret, b_ret, subst, resolving)

  return False


def substitute_type_variables(t: Type, subst: Substitution) -> Type:
  """Return a copy of `t` with every bound variable replaced by its (recursively substituted) binding."""
  return _substitute(t, subst, frozenset())


def _substitute(t: Type, subst: Substitution, expanding: frozenset[str]) -> Type:
  match t:
    case TypeVariable(name):
      if name not in subst:
        return t
      if name in expanding:
        raise SubstitutionCycleError(f"Type variable '{name}' occurs in its own binding")
      return _substitute(subst[name], subst, expanding | {name})
    case ListType(elem):
      return ListType(_substitute(elem, subst, expanding))
    case DictType(key, value):
      return DictType(_substitute(key, subst, expanding), _substitute(value, subst, expanding))
    case FunctionType(params, ret):
      return FunctionType(
        tuple(_substitute(p, subst, expanding) for p in params),
        _substitute(ret, subst, expanding),
      )
  return t


def instantiate(
  function_type: Type,
  type_params: Sequence[TypeVariable | str],
  supply: TypeVarSupply = DEFAULT_SUPPLY,
) -> Type:
  """Give each type parameter a fresh variable so call sites never share bindings."""
  fresh: Substitution = {}
  for param in type_params:
    name = param.name if isinstance(param, TypeVariable) else param
    fresh[name] = supply.fresh(name)
  return substitute_type_variables(function_type, fresh)


def match_function_types(function_type: FunctionType, arg_types: Sequence[Type], subst: Substitution) -> bool:
  """Match argument types against parameter types in order. The return type is not checked."""
  if len(function_type.param_types) != len(arg_types):
    return False
  for param_type, arg_type in zip(function_type.param_types, arg_types):
    if not match_types(param_type, arg_type, subst):
      return False
  return True
