"""Error taxonomy shared by the checker, the evaluator and the loader."""


class PolyError(Exception):
  """Base class for all Polylang errors."""

  kind = "error"


class UndefinedVariableError(PolyError):
  """Raised when a name is bound in neither the variable nor the function table."""

  kind = "UndefinedVariable"


class UndefinedFunctionError(PolyError):
  """Raised when a call names a function that does not exist."""

  kind = "UndefinedFunction"


class ArityError(PolyError):
  """Raised when a call supplies the wrong number of arguments."""

  kind = "ArityMismatch"


class TypeMismatchError(PolyError):
  """Raised when static types disagree (operands, branches, collections, returns)."""

  kind = "TypeMismatch"


class SubstitutionCycleError(TypeMismatchError):
  """Raised when applying a substitution would expand a variable inside itself."""


class UnsupportedOperatorError(PolyError):
  """Raised for an operator the language does not define."""

  kind = "UnsupportedOperator"


class UnsupportedOperandError(PolyError):
  """Raised at run time when a value has the wrong kind for an operation."""

  kind = "UnsupportedOperandKind"


class TranslationError(PolyError):
  """Raised when a JSON program or a type string cannot be translated."""

  kind = "Translation"
