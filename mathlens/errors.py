"""Exception taxonomy for the evaluation engine.

Three categories cover every mathematical failure the engine can report:

- ``DomainError``: an input parameter lies outside the domain of the
  operation (negative standard deviation, probability outside [0, 1],
  Simpson's rule with an odd partition count).
- ``UndefinedResult``: the inputs are valid but the quantity does not exist
  (correlation of a constant series, a vertical regression line, a limit at a
  point the function cannot be evaluated around).
- ``NonConvergence``: an iterative procedure exhausted its iteration cap
  without meeting tolerance.

Wrong input shapes or types are not part of this taxonomy; they raise plain
``TypeError`` or ``ValueError`` and signal a caller bug.
"""


class MathEngineError(Exception):
    """Base class for expected mathematical failure conditions."""


class DomainError(MathEngineError, ValueError):
    """Raised when a parameter lies outside the valid domain."""


class UndefinedResult(MathEngineError, ArithmeticError):
    """Raised when the requested quantity is mathematically undefined."""


class NonConvergence(MathEngineError, ArithmeticError):
    """Raised when an iterative procedure fails to meet its tolerance."""
