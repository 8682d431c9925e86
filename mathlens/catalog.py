"""
Preset function catalog consumed by the calculus engines.

Functions are grouped by topic (``"limits"``, ``"derivatives"``,
``"integrals"``). Each entry pairs an evaluation mapping with its display
forms, an optional exact derivative and antiderivative, a domain predicate,
and labeled interesting points where interactive views start exploring.

The catalog is built once per process by :func:`default_catalog` and passed
by reference to consumers.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, Optional, Tuple

from .numerics import safe_eval

Mapping1D = Callable[[float], float]


def _everywhere(x: float) -> bool:
    return True


@dataclass(frozen=True)
class InterestingPoint:
    x: float
    label: str = ""


@dataclass(frozen=True)
class EvaluableFunction:
    """A named real function with optional calculus companions.

    Calling the instance evaluates the mapping and returns ``nan`` outside
    the domain predicate. Arithmetic failures inside the domain still raise;
    engines sample through :func:`mathlens.numerics.safe_eval`.
    """

    id: str
    name: str
    latex: str
    fn: Mapping1D
    description: str = ""
    derivative: Optional[Mapping1D] = None
    derivative_latex: str = ""
    antiderivative: Optional[Mapping1D] = None
    domain: Callable[[float], bool] = _everywhere
    view: Tuple[float, float] = (-5.0, 5.0)
    interesting_points: Tuple[InterestingPoint, ...] = ()
    default_bounds: Optional[Tuple[float, float]] = None
    poles: Tuple[float, ...] = ()

    def __call__(self, x: float) -> float:
        if not self.domain(x):
            return math.nan
        return float(self.fn(x))

    def in_domain(self, x: float) -> bool:
        return bool(self.domain(x))

    def exact_derivative(self, x: float) -> Optional[float]:
        if self.derivative is None or not self.domain(x):
            return None
        return float(self.derivative(x))

    def exact_integral(self, a: float, b: float) -> Optional[float]:
        """Return F(b) - F(a) when an antiderivative is known.

        Returns None when [a, b] is not inside the domain or crosses a pole.
        An antiderivative that is not finite at an endpoint also gives None.
        """
        if self.antiderivative is None:
            return None
        if not (self.domain(a) and self.domain(b)):
            return None
        lo, hi = min(a, b), max(a, b)
        if any(lo <= pole <= hi for pole in self.poles):
            return None
        value = safe_eval(self.antiderivative, b) - safe_eval(self.antiderivative, a)
        return value if math.isfinite(value) else None


@dataclass(frozen=True)
class FunctionCatalog:
    """Immutable topic -> functions registry."""

    topics: Dict[str, Tuple[EvaluableFunction, ...]] = field(default_factory=dict)

    def get(self, topic: str, function_id: str) -> EvaluableFunction:
        for entry in self.topic(topic):
            if entry.id == function_id:
                return entry
        raise KeyError(f"No function '{function_id}' in topic '{topic}'.")

    def topic(self, topic: str) -> Tuple[EvaluableFunction, ...]:
        try:
            return self.topics[topic]
        except KeyError:
            raise KeyError(f"Unknown catalog topic '{topic}'.") from None

    def ids(self, topic: str) -> Tuple[str, ...]:
        return tuple(entry.id for entry in self.topic(topic))

    def __iter__(self) -> Iterator[Tuple[str, EvaluableFunction]]:
        for name, entries in self.topics.items():
            for entry in entries:
                yield name, entry


def _points(*pairs) -> Tuple[InterestingPoint, ...]:
    return tuple(
        InterestingPoint(float(p[0]), p[1]) if isinstance(p, tuple)
        else InterestingPoint(float(p))
        for p in pairs
    )


def _piecewise(x: float) -> float:
    if x < 0:
        return x + 1.0
    if x > 0:
        return x * x
    return math.nan


def _limit_functions() -> Tuple[EvaluableFunction, ...]:
    return (
        EvaluableFunction(
            id="polynomial",
            name="Polynomial",
            latex="f(x) = x^2",
            fn=lambda x: x * x,
            description="A simple continuous function where limits always exist",
            view=(-3.0, 3.0),
            interesting_points=_points(0, 1, -1, 2),
        ),
        EvaluableFunction(
            id="rational",
            name="Rational (Removable)",
            latex=r"f(x) = \frac{x^2 - 1}{x - 1}",
            fn=lambda x: (x * x - 1.0) / (x - 1.0),
            description="Has a hole at x=1 where the limit exists but f is undefined",
            domain=lambda x: x != 1.0,
            view=(-2.0, 4.0),
            interesting_points=_points(1, 0, 2),
        ),
        EvaluableFunction(
            id="step",
            name="Floor Function",
            latex=r"f(x) = \lfloor x \rfloor",
            fn=lambda x: float(math.floor(x)),
            description="Jumps at every integer; left and right limits differ",
            view=(-2.0, 4.0),
            interesting_points=_points(0, 1, 2, 3),
        ),
        EvaluableFunction(
            id="reciprocal",
            name="Reciprocal",
            latex=r"f(x) = \frac{1}{x}",
            fn=lambda x: 1.0 / x,
            description="Vertical asymptote at x=0; the limit is infinite",
            domain=lambda x: x != 0.0,
            poles=(0.0,),
            view=(-3.0, 3.0),
            interesting_points=_points(0, 1, -1),
        ),
        EvaluableFunction(
            id="sine-over-x",
            name="Sine/x",
            latex=r"f(x) = \frac{\sin(x)}{x}",
            fn=lambda x: math.sin(x) / x,
            description="Approaches 1 as x -> 0 although f(0) is undefined",
            domain=lambda x: x != 0.0,
            view=(-10.0, 10.0),
            interesting_points=_points(0),
        ),
        EvaluableFunction(
            id="absolute",
            name="Sign Function",
            latex=r"f(x) = \frac{|x|}{x}",
            fn=lambda x: abs(x) / x,
            description="Left limit is -1, right limit is +1 at x=0",
            domain=lambda x: x != 0.0,
            view=(-3.0, 3.0),
            interesting_points=_points(0),
        ),
        EvaluableFunction(
            id="oscillating",
            name="Oscillating",
            latex=r"f(x) = \sin\left(\frac{1}{x}\right)",
            fn=lambda x: math.sin(1.0 / x),
            description="Oscillates infinitely fast near x=0; no limit exists",
            domain=lambda x: x != 0.0,
            view=(-2.0, 2.0),
            interesting_points=_points(0),
        ),
        EvaluableFunction(
            id="piecewise",
            name="Piecewise",
            latex=r"f(x) = \begin{cases} x+1 & x < 0 \\ x^2 & x > 0 \end{cases}",
            fn=_piecewise,
            description="Different formulas for different regions",
            domain=lambda x: x != 0.0,
            view=(-3.0, 3.0),
            interesting_points=_points(0, -1, 1),
        ),
    )


def _derivative_functions() -> Tuple[EvaluableFunction, ...]:
    tau = 2.0 * math.pi
    return (
        EvaluableFunction(
            id="linear",
            name="Linear",
            latex="f(x) = 2x + 1",
            fn=lambda x: 2.0 * x + 1.0,
            derivative=lambda x: 2.0,
            derivative_latex="f'(x) = 2",
            description="Constant slope; the derivative is always the same",
            view=(-3.0, 3.0),
            interesting_points=_points(
                (0, "Slope is 2 everywhere"), (1, "Same slope at any point")
            ),
        ),
        EvaluableFunction(
            id="quadratic",
            name="Quadratic",
            latex="f(x) = x^2",
            fn=lambda x: x * x,
            derivative=lambda x: 2.0 * x,
            derivative_latex="f'(x) = 2x",
            description="Parabola; slope changes linearly, zero at the vertex",
            view=(-3.0, 3.0),
            interesting_points=_points(
                (0, "Minimum point, slope is zero"),
                (1, "Slope is positive (increasing)"),
                (-1, "Slope is negative (decreasing)"),
            ),
        ),
        EvaluableFunction(
            id="cubic",
            name="Cubic",
            latex="f(x) = x^3",
            fn=lambda x: x**3,
            derivative=lambda x: 3.0 * x * x,
            derivative_latex="f'(x) = 3x^2",
            description="S-curve with an inflection point",
            view=(-2.0, 2.0),
            interesting_points=_points(
                (0, "Inflection point, slope is zero but not an extremum"),
                (1, "Slope is 3"),
            ),
        ),
        EvaluableFunction(
            id="polynomial",
            name="Polynomial",
            latex="f(x) = x^3 - 3x",
            fn=lambda x: x**3 - 3.0 * x,
            derivative=lambda x: 3.0 * x * x - 3.0,
            derivative_latex="f'(x) = 3x^2 - 3",
            description="Curve with a local minimum and maximum",
            view=(-2.5, 2.5),
            interesting_points=_points(
                (1, "Local minimum, slope is zero"),
                (-1, "Local maximum, slope is zero"),
                (0, "Inflection point"),
            ),
        ),
        EvaluableFunction(
            id="sine",
            name="Sine",
            latex=r"f(x) = \sin(x)",
            fn=math.sin,
            derivative=math.cos,
            derivative_latex=r"f'(x) = \cos(x)",
            description="Oscillating; the derivative is cosine",
            view=(-tau, tau),
            interesting_points=_points(
                (0, "Slope is 1 (steepest upward)"),
                (math.pi / 2, "Maximum, slope is zero"),
                (math.pi, "Slope is -1 (steepest downward)"),
                (3 * math.pi / 2, "Minimum, slope is zero"),
            ),
        ),
        EvaluableFunction(
            id="cosine",
            name="Cosine",
            latex=r"f(x) = \cos(x)",
            fn=math.cos,
            derivative=lambda x: -math.sin(x),
            derivative_latex=r"f'(x) = -\sin(x)",
            description="Oscillating; the derivative is negative sine",
            view=(-tau, tau),
            interesting_points=_points(
                (0, "Maximum, slope is zero"),
                (math.pi / 2, "Slope is -1"),
                (math.pi, "Minimum, slope is zero"),
            ),
        ),
        EvaluableFunction(
            id="exponential",
            name="Exponential",
            latex="f(x) = e^x",
            fn=math.exp,
            derivative=math.exp,
            derivative_latex="f'(x) = e^x",
            description="The derivative equals the function itself",
            view=(-3.0, 2.0),
            interesting_points=_points(
                (0, "Slope equals 1"), (1, "Slope equals e")
            ),
        ),
        EvaluableFunction(
            id="logarithm",
            name="Natural Log",
            latex=r"f(x) = \ln(x)",
            fn=math.log,
            derivative=lambda x: 1.0 / x,
            derivative_latex=r"f'(x) = \frac{1}{x}",
            description="Slope decreases as x grows",
            domain=lambda x: x > 0.0,
            view=(0.1, 5.0),
            interesting_points=_points(
                (1, "Slope equals 1"), (0.5, "Slope equals 2"), (2, "Slope equals 0.5")
            ),
        ),
    )


def _semicircle_antiderivative(x: float) -> float:
    x = min(1.0, max(-1.0, x))
    return 0.5 * (x * math.sqrt(1.0 - x * x) + math.asin(x))


def _integral_functions() -> Tuple[EvaluableFunction, ...]:
    return (
        EvaluableFunction(
            id="linear",
            name="Linear",
            latex="f(x) = 2x + 1",
            fn=lambda x: 2.0 * x + 1.0,
            antiderivative=lambda x: x * x + x,
            description="Simplest case, the area of a trapezoid",
            default_bounds=(0.0, 3.0),
            view=(-1.0, 4.0),
            interesting_points=_points(
                (0, "Lower bound: f(0) = 1"), (3, "Upper bound: f(3) = 7")
            ),
        ),
        EvaluableFunction(
            id="quadratic",
            name="Quadratic",
            latex="f(x) = x^2",
            fn=lambda x: x * x,
            antiderivative=lambda x: x**3 / 3.0,
            description="Classic parabola",
            default_bounds=(0.0, 2.0),
            view=(-1.0, 3.0),
            interesting_points=_points(
                (0, "Minimum of parabola"), (1, "f(1) = 1"), (2, "Upper bound: f(2) = 4")
            ),
        ),
        EvaluableFunction(
            id="sine",
            name="Sine",
            latex=r"f(x) = \sin(x)",
            fn=math.sin,
            antiderivative=lambda x: -math.cos(x),
            description="Trigonometric function with an exact area of 2",
            default_bounds=(0.0, math.pi),
            view=(-0.5, 3.5),
            interesting_points=_points(
                (0, "sin(0) = 0"),
                (math.pi / 2, "Maximum: sin(pi/2) = 1"),
                (math.pi, "sin(pi) = 0"),
            ),
        ),
        EvaluableFunction(
            id="exponential",
            name="Exponential",
            latex="f(x) = e^x",
            fn=math.exp,
            antiderivative=math.exp,
            description="e^x is its own antiderivative",
            default_bounds=(0.0, 1.0),
            view=(-1.0, 2.0),
            interesting_points=_points((0, "e^0 = 1"), (1, "e^1 = e")),
        ),
        EvaluableFunction(
            id="reciprocal",
            name="Reciprocal",
            latex=r"f(x) = \frac{1}{x}",
            fn=lambda x: 1.0 / x,
            antiderivative=lambda x: math.log(abs(x)),
            description="The integral is the natural logarithm",
            domain=lambda x: x != 0.0,
            default_bounds=(1.0, math.e),
            poles=(0.0,),
            view=(0.1, 4.0),
            interesting_points=_points(
                (1, "f(1) = 1, ln(1) = 0"), (math.e, "f(e) = 1/e, ln(e) = 1")
            ),
        ),
        EvaluableFunction(
            id="cubic-signed",
            name="Cubic (signed area)",
            latex="f(x) = x^3 - x",
            fn=lambda x: x**3 - x,
            antiderivative=lambda x: x**4 / 4.0 - x * x / 2.0,
            description="Shows positive and negative area regions",
            default_bounds=(-1.0, 2.0),
            view=(-1.5, 2.5),
            interesting_points=_points(
                (-1, "Root"), (0, "Root"), (1, "Root"), (2, "f(2) = 6")
            ),
        ),
        EvaluableFunction(
            id="semicircle",
            name="Semicircle",
            latex=r"f(x) = \sqrt{1 - x^2}",
            fn=lambda x: math.sqrt(1.0 - x * x),
            antiderivative=_semicircle_antiderivative,
            description="Geometric area pi r^2 / 2",
            domain=lambda x: -1.0 <= x <= 1.0,
            default_bounds=(-1.0, 1.0),
            view=(-1.5, 1.5),
            interesting_points=_points(
                (-1, "Left edge"), (0, "Maximum: f(0) = 1"), (1, "Right edge")
            ),
        ),
        EvaluableFunction(
            id="constant",
            name="Constant",
            latex="f(x) = 3",
            fn=lambda x: 3.0,
            antiderivative=lambda x: 3.0 * x,
            description="Rectangle area; every rule is exact",
            default_bounds=(0.0, 4.0),
            view=(-1.0, 5.0),
            interesting_points=_points((0, "Lower bound"), (4, "Upper bound")),
        ),
    )


def build_catalog() -> FunctionCatalog:
    """Construct a fresh catalog with every preset topic."""
    return FunctionCatalog(
        topics={
            "limits": _limit_functions(),
            "derivatives": _derivative_functions(),
            "integrals": _integral_functions(),
        }
    )


@functools.lru_cache(maxsize=None)
def default_catalog() -> FunctionCatalog:
    """Return the process-wide catalog, building it on first use."""
    return build_catalog()
