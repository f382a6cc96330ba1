"""Statistical fairness audit for the draw engine.

The audit drives a real :class:`~luckydraw.core.controller.DrawController`
with removal disabled and an instant presenter, counts how often each
candidate wins, and runs a chi-squared goodness-of-fit test against the
uniform distribution.  It is cheap enough to run in the test-suite and from
the CLI (``luckydraw --audit 10000 A B C D``).
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from statistics import NormalDist

import numpy as np

from ..core.controller import DrawConfig, DrawController
from ..core.pool import clean_labels
from ..core.ports import InstantPresenter
from ..core.shuffle import seeded_shuffler

__all__ = ["FairnessReport", "audit_async", "chi_squared_critical", "run_fairness_audit"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FairnessReport:
    candidates: tuple[Hashable, ...]
    counts: tuple[int, ...]
    draws: int
    chi_squared: float
    critical_value: float
    alpha: float
    seed: int | None

    @property
    def degrees_of_freedom(self) -> int:
        return max(0, len(self.candidates) - 1)

    @property
    def passed(self) -> bool:
        return self.chi_squared <= self.critical_value

    @property
    def frequencies(self) -> dict[Hashable, float]:
        if self.draws <= 0:
            return {candidate: 0.0 for candidate in self.candidates}
        return {candidate: count / self.draws for candidate, count in zip(self.candidates, self.counts)}


def chi_squared_critical(degrees_of_freedom: int, alpha: float = 0.01) -> float:
    """Upper critical value of the chi-squared distribution.

    Uses the Wilson–Hilferty cube-root approximation, which is within a few
    hundredths of the exact quantile for the small ``df`` an audit uses.
    """

    if degrees_of_freedom <= 0:
        return 0.0
    if not 0.0 < alpha < 1.0:
        raise ValueError("alpha must be between 0 and 1")
    z = NormalDist().inv_cdf(1.0 - alpha)
    k = float(degrees_of_freedom)
    term = 2.0 / (9.0 * k)
    return k * (1.0 - term + z * math.sqrt(term)) ** 3


async def audit_async(
    candidates: Sequence[Hashable],
    draws: int = 10_000,
    *,
    seed: int | None = None,
    alpha: float = 0.01,
    presentation_length: int = 30,
) -> FairnessReport:
    labels = tuple(clean_labels(candidates))
    if not labels:
        raise ValueError("fairness audit needs at least one candidate")
    if draws <= 0:
        raise ValueError("draws must be positive")

    rng = random.Random(seed)
    controller = DrawController(
        InstantPresenter(),
        config=DrawConfig(presentation_length=presentation_length, remove_winner=False),
        shuffler=seeded_shuffler(rng),
    )
    controller.set_candidates(labels)

    index = {label: idx for idx, label in enumerate(labels)}
    winners = np.empty(draws, dtype=np.int64)
    for i in range(draws):
        await controller.draw()
        winners[i] = index[controller.last_winner]

    observed = np.bincount(winners, minlength=len(labels)).astype(np.float64)
    expected = np.full(len(labels), draws / len(labels), dtype=np.float64)
    chi_squared = float(np.sum((observed - expected) ** 2 / expected))
    report = FairnessReport(
        candidates=labels,
        counts=tuple(int(value) for value in observed),
        draws=draws,
        chi_squared=chi_squared,
        critical_value=chi_squared_critical(len(labels) - 1, alpha),
        alpha=alpha,
        seed=seed,
    )
    logger.debug(
        "fairness audit finished",
        extra={"draws": draws, "chi_squared": chi_squared, "passed": report.passed},
    )
    return report


def run_fairness_audit(
    candidates: Sequence[Hashable],
    draws: int = 10_000,
    *,
    seed: int | None = None,
    alpha: float = 0.01,
    presentation_length: int = 30,
) -> FairnessReport:
    return asyncio.run(
        audit_async(candidates, draws, seed=seed, alpha=alpha, presentation_length=presentation_length)
    )
