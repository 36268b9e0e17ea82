"""
Monte Carlo recession simulation.

Each trial perturbs every indicator around its baseline, scores the perturbed
vector with the fixed logistic model and draws one Bernoulli outcome from the
resulting probability. The run reports the recession frequency and the mean
of the perturbed indicators.

Draw order per trial is fixed (two uniforms per indicator in model order, then
the Bernoulli uniform), so two runs with the same seed are bit-identical.
"""

import logging
import math
import threading
from typing import Dict, Optional

import numpy as np

from .errors import InvalidTrialCountError, NumericAnomalyError, SimulationCancelled
from .model import DEFAULT_MODEL, LogisticModel
from .schemas import IndicatorVector, SimulationParams, SimulationResult
from .simulator_core import RandomSource, perturb_indicators, score_probability

logger = logging.getLogger(__name__)

CANCEL_CHECK_INTERVAL = 1000


class _Accumulator:
    """Running totals owned by a single simulate() call."""

    def __init__(self, model: LogisticModel):
        self.recession_count = 0
        self.sums: Dict[str, float] = {t.field: 0.0 for t in model.terms}

    def add(self, sample: Dict[str, float], recession: bool) -> None:
        for name, value in sample.items():
            self.sums[name] += value
        if recession:
            self.recession_count += 1


def _validate_trials(trials) -> int:
    # bool is an int subclass; True is not a trial count
    if isinstance(trials, bool) or not isinstance(trials, (int, np.integer)):
        raise InvalidTrialCountError(f"trials must be a positive integer, got {trials!r}")
    if trials <= 0:
        raise InvalidTrialCountError(f"trials must be a positive integer, got {trials}")
    return int(trials)


def aggregate(recession_count: int, sums: Dict[str, float], trials: int) -> SimulationResult:
    averages = {name: total / trials for name, total in sums.items()}
    for name, value in averages.items():
        # finite samples can still overflow the running sum
        if not math.isfinite(value):
            raise NumericAnomalyError(f"Non-finite average for '{name}' over {trials} trials: {value}")
    return SimulationResult(
        recession_probability=recession_count / trials,
        average_indicators=IndicatorVector.from_mapping(averages),
        trials=trials,
        recession_count=recession_count,
    )


def run_trials(
    baseline: IndicatorVector,
    trials: int,
    rng: RandomSource,
    model: LogisticModel = DEFAULT_MODEL,
    cancel_event: Optional[threading.Event] = None,
) -> _Accumulator:
    acc = _Accumulator(model)
    for i in range(trials):
        if cancel_event is not None and i % CANCEL_CHECK_INTERVAL == 0 and cancel_event.is_set():
            logger.info("Simulation cancelled after %d of %d trials", i, trials)
            raise SimulationCancelled(f"Cancelled after {i} of {trials} trials")
        try:
            sample = perturb_indicators(baseline, model, rng)
            probability = score_probability(sample, model)
        except NumericAnomalyError as exc:
            raise NumericAnomalyError(f"Trial {i}: {exc}") from exc
        acc.add(sample, rng.random() < probability)
    return acc


def simulate(
    baseline: IndicatorVector,
    trials: int,
    *,
    rng: Optional[RandomSource] = None,
    seed: Optional[int] = None,
    model: LogisticModel = DEFAULT_MODEL,
    cancel_event: Optional[threading.Event] = None,
) -> SimulationResult:
    """Estimate the recession probability for ``baseline`` over ``trials`` trials.

    ``rng`` wins over ``seed``; with neither, a fresh unseeded numpy Generator
    is used. Raises InvalidTrialCountError before any sampling when ``trials``
    is not a positive integer, NumericAnomalyError if a trial produces a
    non-finite value, and SimulationCancelled when ``cancel_event`` is set.
    """
    trials = _validate_trials(trials)
    if rng is None:
        rng = np.random.default_rng(seed)

    logger.debug("Running %d trials (seed=%s)", trials, seed)
    acc = run_trials(baseline, trials, rng, model=model, cancel_event=cancel_event)
    result = aggregate(acc.recession_count, acc.sums, trials)
    logger.info(
        "Simulation finished: %d/%d recession trials (p=%.4f)",
        result.recession_count,
        trials,
        result.recession_probability,
    )
    return result


def run_simulation(params: SimulationParams, **kwargs) -> SimulationResult:
    return simulate(params.baseline, params.trials, **kwargs)
