"""Property tests for types, matching and instantiation."""

from hypothesis import given, strategies as st

from polylang.types import (
  NUMBER,
  STRING,
  BOOLEAN,
  DictType,
  ListType,
  FunctionType,
  TypeVariable,
  TypeVarSupply,
  parse_type,
  type_to_str,
  types_equal,
)
from polylang.unify import instantiate, match_types, substitute_type_variables


def _types(leaves):
  return st.recursive(
    leaves,
    lambda children: st.one_of(
      st.builds(ListType, children),
      st.builds(DictType, children, children),
      st.builds(FunctionType, st.lists(children, max_size=3).map(tuple), children),
    ),
    max_leaves=10,
  )


primitive_strat = st.sampled_from([NUMBER, STRING, BOOLEAN])
ground_strat = _types(primitive_strat)
generic_strat = _types(st.one_of(primitive_strat, st.sampled_from([TypeVariable("A"), TypeVariable("B")])))

GROUNDING = {"A": NUMBER, "B": STRING}


def variables(t):
  match t:
    case TypeVariable(name):
      return {name}
    case ListType(elem):
      return variables(elem)
    case DictType(key, value):
      return variables(key) | variables(value)
    case FunctionType(params, ret):
      return set().union(*(variables(p) for p in params), variables(ret))
  return set()


def erase(t):
  return substitute_type_variables(t, {name: TypeVariable("_") for name in variables(t)})


@given(generic_strat)
def test_types_equal_is_reflexive(t):
  assert types_equal(t, t)


@given(generic_strat)
def test_type_syntax_round_trip(t):
  assert parse_type(type_to_str(t), ["A", "B"]) == t


@given(generic_strat)
def test_empty_substitution_is_identity(t):
  assert substitute_type_variables(t, {}) == t


@given(ground_strat)
def test_variable_matches_anything(t):
  subst = {}
  assert match_types(TypeVariable("T"), t, subst)
  assert substitute_type_variables(TypeVariable("T"), subst) == t


@given(ground_strat)
def test_ground_types_match_themselves_without_bindings(t):
  subst = {}
  assert match_types(t, t, subst)
  assert subst == {}


@given(generic_strat)
def test_instantiations_never_share_variables(t):
  supply = TypeVarSupply()
  first = instantiate(t, ["A", "B"], supply)
  second = instantiate(t, ["A", "B"], supply)
  assert not variables(first) & variables(second)
  assert not variables(first) & {"A", "B"}
  assert types_equal(erase(first), erase(second))


@given(generic_strat)
def test_instantiated_pattern_matches_its_grounding(t):
  ground = substitute_type_variables(t, GROUNDING)
  pattern = instantiate(t, ["A", "B"], TypeVarSupply())
  subst = {}
  assert match_types(pattern, ground, subst)
  assert substitute_type_variables(pattern, subst) == ground
