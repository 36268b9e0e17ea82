from dataclasses import dataclass, asdict
from typing import Dict, Mapping, Tuple

INDICATOR_FIELDS: Tuple[str, ...] = (
    "yield_curve_spread",
    "unemployment_rate",
    "inflation_rate",
    "gdp_per_capita_growth",
    "point_cli",
    "ism_new_orders",
    "ism_supplier_deliveries",
    "leading_index_change",
)

# camelCase names used by CSV headers and older payloads
CAMEL_CASE_ALIASES: Dict[str, str] = {
    "yieldCurveSpread": "yield_curve_spread",
    "unemploymentRate": "unemployment_rate",
    "inflationRate": "inflation_rate",
    "gdpPerCapitaGrowth": "gdp_per_capita_growth",
    "pointCLI": "point_cli",
    "ismNewOrders": "ism_new_orders",
    "ismSupplierDeliveries": "ism_supplier_deliveries",
    "leadingIndexChange": "leading_index_change",
}


def canonical_field(name: str) -> str:
    """Map a snake_case or camelCase indicator name to its field name, or '' if unknown."""
    cleaned = name.strip()
    if cleaned in INDICATOR_FIELDS:
        return cleaned
    return CAMEL_CASE_ALIASES.get(cleaned, "")


@dataclass(frozen=True)
class IndicatorVector:
    yield_curve_spread: float
    unemployment_rate: float
    inflation_rate: float
    gdp_per_capita_growth: float
    point_cli: float
    ism_new_orders: float
    ism_supplier_deliveries: float
    leading_index_change: float

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "IndicatorVector":
        return cls(**{name: float(values[name]) for name in INDICATOR_FIELDS})

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def shifted(self, deltas: Mapping[str, float]) -> "IndicatorVector":
        values = self.as_dict()
        for name, delta in deltas.items():
            values[name] += delta
        return IndicatorVector.from_mapping(values)


@dataclass(frozen=True)
class SimulationParams:
    baseline: IndicatorVector
    trials: int


@dataclass(frozen=True)
class SimulationResult:
    recession_probability: float
    average_indicators: IndicatorVector
    trials: int
    recession_count: int
