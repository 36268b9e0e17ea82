import math
from typing import Dict, Protocol

from .errors import NumericAnomalyError
from .model import LogisticModel
from .schemas import IndicatorVector

TWO_PI = 2.0 * math.pi


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1): numpy Generator, random.Random."""

    def random(self) -> float: ...


def _positive_uniform(rng: RandomSource) -> float:
    u = 0.0
    while u == 0.0:
        u = rng.random()
    return u


def sample_normal(mean: float, std_dev: float, rng: RandomSource) -> float:
    """One Normal(mean, std_dev) draw via Box-Muller over two uniforms in (0, 1)."""
    u = _positive_uniform(rng)
    v = _positive_uniform(rng)
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(TWO_PI * v)
    return z * std_dev + mean


def perturb_indicators(baseline: IndicatorVector, model: LogisticModel, rng: RandomSource) -> Dict[str, float]:
    values = baseline.as_dict()
    sample: Dict[str, float] = {}
    for term in model.terms:
        value = sample_normal(values[term.field], term.volatility, rng)
        if not math.isfinite(value):
            raise NumericAnomalyError(f"Non-finite sample for '{term.field}': {value}")
        sample[term.field] = value
    return sample


def logistic_score(values: Dict[str, float], model: LogisticModel) -> float:
    z = model.intercept
    for term in model.terms:
        z += values[term.field] * term.coefficient
    return z


def logistic(z: float) -> float:
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    # exp(-z) overflows for very negative z
    e = math.exp(z)
    return e / (1.0 + e)


def score_probability(values: Dict[str, float], model: LogisticModel) -> float:
    z = logistic_score(values, model)
    if not math.isfinite(z):
        culprit = next((t.field for t in model.terms if not math.isfinite(values[t.field] * t.coefficient)), None)
        source = f"'{culprit}'" if culprit else "summed terms"
        raise NumericAnomalyError(f"Non-finite logistic score from {source}: {z}")
    return logistic(z)
