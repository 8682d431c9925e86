"""Tagged results for hosts that render engine output.

Engine functions raise the exceptions in :mod:`mathlens.errors` where a
condition is detected. A host that recomputes on every input change wants an
explanatory state instead of a traceback, so :func:`evaluate` runs a call and
folds the three mathematical failure categories into an :class:`Outcome`.
Contract violations (``TypeError``, plain ``ValueError``) still propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .errors import DomainError, NonConvergence, UndefinedResult


class OutcomeKind(str, Enum):
    OK = "ok"
    DOMAIN_ERROR = "domain_error"
    UNDEFINED = "undefined"
    NON_CONVERGENCE = "non_convergence"


@dataclass(frozen=True)
class Outcome:
    """Result of an engine call: either a value or an explanatory failure."""

    kind: OutcomeKind
    value: Any = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    def unwrap(self) -> Any:
        """Return the value, or raise the matching engine exception."""
        if self.kind is OutcomeKind.OK:
            return self.value
        if self.kind is OutcomeKind.DOMAIN_ERROR:
            raise DomainError(self.message)
        if self.kind is OutcomeKind.UNDEFINED:
            raise UndefinedResult(self.message)
        raise NonConvergence(self.message)


def evaluate(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
    """Call ``func(*args, **kwargs)`` and wrap the result in an :class:`Outcome`.

    Args:
        func: Any engine operation.
        *args: Positional arguments forwarded to ``func``.
        **kwargs: Keyword arguments forwarded to ``func``.

    Returns:
        Outcome: ``OK`` with the return value, or the failure category with
        the exception message.

    Raises:
        TypeError: Propagated unchanged from ``func``.
        ValueError: Propagated unchanged unless it is a ``DomainError``.
    """
    try:
        value = func(*args, **kwargs)
    except DomainError as exc:
        return Outcome(OutcomeKind.DOMAIN_ERROR, message=str(exc))
    except UndefinedResult as exc:
        return Outcome(OutcomeKind.UNDEFINED, message=str(exc))
    except NonConvergence as exc:
        return Outcome(OutcomeKind.NON_CONVERGENCE, message=str(exc))
    return Outcome(OutcomeKind.OK, value=value)
