"""
Fixed logistic model used to score each trial.

The coefficients are illustrative, not fit to historical data:
    P(recession) = 1 / (1 + exp(-z)),  z = intercept + sum(coefficient * value)

Each term also carries the indicator's volatility, the standard deviation used
to perturb its baseline value in every trial.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from .errors import ModelConfigurationError
from .schemas import INDICATOR_FIELDS


@dataclass(frozen=True)
class IndicatorTerm:
    field: str
    coefficient: float
    volatility: float


@dataclass(frozen=True)
class LogisticModel:
    intercept: float
    terms: Tuple[IndicatorTerm, ...]

    def __post_init__(self):
        names = tuple(t.field for t in self.terms)
        if sorted(names) != sorted(INDICATOR_FIELDS):
            raise ModelConfigurationError(
                f"Model terms must cover each indicator exactly once, got {names}"
            )
        for term in self.terms:
            if term.volatility < 0:
                raise ModelConfigurationError(f"Negative volatility for '{term.field}': {term.volatility}")

    def coefficients(self) -> Dict[str, float]:
        return {t.field: t.coefficient for t in self.terms}


INTERCEPT = -2.5

# (field, coefficient, volatility)
# An inverted yield curve and rising unemployment dominate; faster supplier
# deliveries (lower index) read as weakness, hence the small negative weight.
DEFAULT_TERMS: Tuple[IndicatorTerm, ...] = (
    IndicatorTerm("yield_curve_spread", -1.7, 0.5),
    IndicatorTerm("unemployment_rate", 2.6, 0.2),
    IndicatorTerm("inflation_rate", 0.3, 0.75),
    IndicatorTerm("gdp_per_capita_growth", -0.8, 0.5),
    IndicatorTerm("point_cli", -0.1, 0.8),
    IndicatorTerm("ism_new_orders", -0.15, 2.0),
    IndicatorTerm("ism_supplier_deliveries", -0.05, 2.5),
    IndicatorTerm("leading_index_change", -1.2, 0.4),
)

DEFAULT_MODEL = LogisticModel(intercept=INTERCEPT, terms=DEFAULT_TERMS)
