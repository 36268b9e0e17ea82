import random
import threading

import numpy as np
import pytest

from recession.errors import InvalidTrialCountError, ModelConfigurationError, NumericAnomalyError, SimulationCancelled
from recession.model import DEFAULT_MODEL, DEFAULT_TERMS, IndicatorTerm, LogisticModel
from recession.schemas import INDICATOR_FIELDS, IndicatorVector, SimulationParams
from recession.simulator import run_simulation, simulate

DOWNTURN = IndicatorVector(
    yield_curve_spread=-1.0,
    unemployment_rate=8.0,
    inflation_rate=2.0,
    gdp_per_capita_growth=-3.0,
    point_cli=96.0,
    ism_new_orders=40.0,
    ism_supplier_deliveries=55.0,
    leading_index_change=-1.5,
)

EXPANSION = IndicatorVector(
    yield_curve_spread=2.0,
    unemployment_rate=3.5,
    inflation_rate=2.0,
    gdp_per_capita_growth=3.0,
    point_cli=103.0,
    ism_new_orders=58.0,
    ism_supplier_deliveries=50.0,
    leading_index_change=1.0,
)

# baseline score sits near zero, so individual trials go either way
BALANCED = EXPANSION.shifted({"unemployment_rate": 8.2})


class ExplodingRandom:
    def random(self) -> float:
        raise AssertionError("random source must not be touched")


def expected_probability(baseline: IndicatorVector, n: int = 400_000, seed: int = 12345) -> float:
    rng = np.random.default_rng(seed)
    values = baseline.as_dict()
    z = np.full(n, DEFAULT_MODEL.intercept)
    for term in DEFAULT_MODEL.terms:
        z += term.coefficient * rng.normal(values[term.field], term.volatility, size=n)
    return float(np.mean(1.0 / (1.0 + np.exp(-z))))


def test_single_trial_is_zero_or_one():
    for seed in range(20):
        result = simulate(BALANCED, 1, seed=seed)
        assert result.recession_probability in (0.0, 1.0)
        assert result.trials == 1


@pytest.mark.parametrize("trials", [0, -5])
def test_rejects_non_positive_trials(trials):
    with pytest.raises(InvalidTrialCountError):
        simulate(EXPANSION, trials, rng=ExplodingRandom())


@pytest.mark.parametrize("trials", [2.5, "100", True, None])
def test_rejects_non_integer_trials(trials):
    with pytest.raises(InvalidTrialCountError):
        simulate(EXPANSION, trials, rng=ExplodingRandom())


def test_invalid_trial_count_is_a_value_error():
    with pytest.raises(ValueError):
        simulate(EXPANSION, 0)


def test_accepts_numpy_integer_trials():
    result = simulate(EXPANSION, np.int64(10), seed=1)
    assert result.trials == 10


def test_downturn_scenario_is_likely_recession():
    result = simulate(DOWNTURN, 20000, seed=11)
    assert result.recession_probability > 0.5


def test_expansion_scenario_is_unlikely_recession():
    result = simulate(EXPANSION, 20000, seed=11)
    assert result.recession_probability < 0.3


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_probability_converges_to_expected(seed):
    expected = expected_probability(BALANCED)
    assert 0.2 < expected < 0.8
    result = simulate(BALANCED, 50000, seed=seed)
    assert result.recession_probability == pytest.approx(expected, abs=0.02)


def test_average_indicators_converge_to_baseline():
    trials = 20000
    result = simulate(DOWNTURN, trials, seed=5)
    averages = result.average_indicators.as_dict()
    baseline = DOWNTURN.as_dict()
    for term in DEFAULT_TERMS:
        tolerance = 5 * term.volatility / np.sqrt(trials)
        assert abs(averages[term.field] - baseline[term.field]) < tolerance


def test_average_indicators_are_sample_means_not_baseline():
    result = simulate(DOWNTURN, 500, seed=5)
    assert result.average_indicators != DOWNTURN


def test_same_seed_is_bit_identical():
    first = simulate(BALANCED, 5000, seed=42)
    second = simulate(BALANCED, 5000, seed=42)
    assert first == second


def test_injected_random_source_is_reproducible():
    first = simulate(BALANCED, 3000, rng=random.Random(99))
    second = simulate(BALANCED, 3000, rng=random.Random(99))
    assert first == second


def test_rng_takes_precedence_over_seed():
    by_rng = simulate(BALANCED, 2000, rng=np.random.default_rng(8), seed=1)
    by_seed = simulate(BALANCED, 2000, seed=8)
    assert by_rng == by_seed


def test_recession_count_matches_probability():
    result = simulate(BALANCED, 4000, seed=3)
    assert result.recession_probability == result.recession_count / 4000


def test_baseline_is_not_mutated():
    before = DOWNTURN.as_dict()
    simulate(DOWNTURN, 1000, seed=2)
    assert DOWNTURN.as_dict() == before
    with pytest.raises(AttributeError):
        DOWNTURN.unemployment_rate = 1.0  # type: ignore[misc]


def test_run_simulation_accepts_params():
    params = SimulationParams(baseline=EXPANSION, trials=1000)
    assert run_simulation(params, seed=4) == simulate(EXPANSION, 1000, seed=4)


def _model_with(field: str, **changes) -> LogisticModel:
    terms = []
    for term in DEFAULT_TERMS:
        if term.field == field:
            term = IndicatorTerm(field, changes.get("coefficient", term.coefficient), changes.get("volatility", term.volatility))
        terms.append(term)
    return LogisticModel(intercept=DEFAULT_MODEL.intercept, terms=tuple(terms))


def test_infinite_volatility_is_a_numeric_anomaly():
    model = _model_with("inflation_rate", volatility=float("inf"))
    with pytest.raises(NumericAnomalyError, match="Trial 0: .*'inflation_rate'"):
        simulate(EXPANSION, 100, seed=1, model=model)


def test_nan_coefficient_is_a_numeric_anomaly():
    model = _model_with("point_cli", coefficient=float("nan"))
    with pytest.raises(NumericAnomalyError, match="Trial 0: .*'point_cli'"):
        simulate(EXPANSION, 100, seed=1, model=model)


def test_overflowing_sum_is_a_numeric_anomaly():
    # every sample is finite, the running total is not
    huge = DOWNTURN.shifted({"point_cli": 1e308})
    with pytest.raises(NumericAnomalyError, match="'point_cli'"):
        simulate(huge, 4, seed=1)


def test_zero_volatility_averages_equal_baseline():
    model = LogisticModel(
        intercept=DEFAULT_MODEL.intercept,
        terms=tuple(IndicatorTerm(t.field, t.coefficient, 0.0) for t in DEFAULT_TERMS),
    )
    result = simulate(DOWNTURN, 1000, seed=1, model=model)
    for name in INDICATOR_FIELDS:
        assert getattr(result.average_indicators, name) == pytest.approx(getattr(DOWNTURN, name))


def test_model_must_cover_every_indicator():
    with pytest.raises(ModelConfigurationError):
        LogisticModel(intercept=0.0, terms=DEFAULT_TERMS[:-1])
    with pytest.raises(ModelConfigurationError):
        LogisticModel(intercept=0.0, terms=DEFAULT_TERMS + DEFAULT_TERMS[:1])


def test_model_rejects_negative_volatility():
    with pytest.raises(ModelConfigurationError):
        _model_with("ism_new_orders", volatility=-1.0)


def test_cancelled_run_raises():
    event = threading.Event()
    event.set()
    with pytest.raises(SimulationCancelled):
        simulate(EXPANSION, 5000, seed=1, cancel_event=event)


def test_cancel_event_checked_during_run():
    event = threading.Event()

    class CancellingRandom:
        def __init__(self):
            self.inner = random.Random(0)
            self.calls = 0

        def random(self) -> float:
            self.calls += 1
            if self.calls == 50:
                event.set()
            return self.inner.random()

    with pytest.raises(SimulationCancelled, match="after 1000 of"):
        simulate(EXPANSION, 5000, rng=CancellingRandom(), cancel_event=event)


def test_unset_cancel_event_completes():
    result = simulate(EXPANSION, 2500, seed=1, cancel_event=threading.Event())
    assert result.trials == 2500
