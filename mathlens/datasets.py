"""
Reference datasets and distribution presets shared by the CLI and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import pandas as pd

from .stats.distributions import (
    Binomial,
    Distribution,
    Exponential,
    Normal,
    Poisson,
    Uniform,
)


@dataclass(frozen=True)
class PairedDataset:
    id: str
    name: str
    description: str
    x: Tuple[float, ...]
    y: Tuple[float, ...]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.x, "y": self.y})


_ANSCOMBE_X = (10.0, 8.0, 13.0, 9.0, 11.0, 14.0, 6.0, 4.0, 12.0, 7.0, 5.0)

# Anscombe (1973): identical means, variances, correlation (~0.816) and
# regression line y = 3 + 0.5 x, yet four very different shapes.
ANSCOMBE_QUARTET: Dict[str, PairedDataset] = {
    d.id: d
    for d in (
        PairedDataset(
            "anscombe-1",
            "Anscombe I",
            "Linear relationship with normal scatter",
            _ANSCOMBE_X,
            (8.04, 6.95, 7.58, 8.81, 8.33, 9.96, 7.24, 4.26, 10.84, 4.82, 5.68),
        ),
        PairedDataset(
            "anscombe-2",
            "Anscombe II",
            "Curved (quadratic) relationship",
            _ANSCOMBE_X,
            (9.14, 8.14, 8.74, 8.77, 9.26, 8.10, 6.13, 3.10, 9.13, 7.26, 4.74),
        ),
        PairedDataset(
            "anscombe-3",
            "Anscombe III",
            "Linear with one influential outlier",
            _ANSCOMBE_X,
            (7.46, 6.77, 12.74, 7.11, 7.81, 8.84, 6.08, 5.39, 8.15, 6.42, 5.73),
        ),
        PairedDataset(
            "anscombe-4",
            "Anscombe IV",
            "Constant x apart from one high-leverage point",
            (8.0, 8.0, 8.0, 8.0, 8.0, 8.0, 8.0, 19.0, 8.0, 8.0, 8.0),
            (6.58, 5.76, 7.71, 8.84, 8.47, 7.04, 5.25, 12.50, 5.56, 7.91, 6.89),
        ),
    )
}


def anscombe(dataset_id: str) -> PairedDataset:
    try:
        return ANSCOMBE_QUARTET[dataset_id]
    except KeyError:
        raise KeyError(
            f"Unknown dataset '{dataset_id}'. Expected one of {sorted(ANSCOMBE_QUARTET)}."
        ) from None


@dataclass(frozen=True)
class DistributionPreset:
    id: str
    name: str
    description: str
    factory: Callable[[], Distribution]

    def build(self) -> Distribution:
        return self.factory()


DISTRIBUTION_PRESETS: Dict[str, DistributionPreset] = {
    p.id: p
    for p in (
        DistributionPreset(
            "iq-scores", "IQ Scores", "IQ scores, mean 100 and sd 15",
            lambda: Normal(100.0, 15.0),
        ),
        DistributionPreset(
            "standard-normal", "Standard Normal", "mu = 0, sigma = 1",
            lambda: Normal(0.0, 1.0),
        ),
        DistributionPreset(
            "heights", "Adult Heights", "Heights in cm, mean 170 and sd 10",
            lambda: Normal(170.0, 10.0),
        ),
        DistributionPreset(
            "coin-flips", "Coin Flips (20)", "Heads in 20 fair coin flips",
            lambda: Binomial(20, 0.5),
        ),
        DistributionPreset(
            "biased-die", "Sixes in 60 Rolls", "Sixes in 60 rolls of a fair die",
            lambda: Binomial(60, 1.0 / 6.0),
        ),
        DistributionPreset(
            "quality-control", "Quality Control", "Defects among 100 items at a 2% rate",
            lambda: Binomial(100, 0.02),
        ),
        DistributionPreset(
            "server-requests", "Server Requests", "Requests per second, average 10",
            lambda: Poisson(10.0),
        ),
        DistributionPreset(
            "rare-events", "Rare Events", "Events per period, average 2",
            lambda: Poisson(2.0),
        ),
        DistributionPreset(
            "api-timeouts", "API Timeouts", "Hours between failures at rate 0.5/hour",
            lambda: Exponential(0.5),
        ),
        DistributionPreset(
            "component-lifetime", "Component Lifetime", "Failure rate 0.1/year",
            lambda: Exponential(0.1),
        ),
        DistributionPreset(
            "random-numbers", "Random Numbers", "Uniform on [0, 1]",
            lambda: Uniform(0.0, 1.0),
        ),
        DistributionPreset(
            "dice-roll", "Dice Roll", "Single fair die as a continuous uniform on [1, 7)",
            lambda: Uniform(1.0, 7.0),
        ),
    )
}
