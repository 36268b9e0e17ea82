from typing import Dict, List, Optional, Literal

from pydantic import AliasChoices, BaseModel, Field

from app.core.config import DEFAULT_TRIALS, MAX_TRIALS
from recession.schemas import IndicatorVector


def _finite(name: str, camel: str):
    return Field(allow_inf_nan=False, validation_alias=AliasChoices(name, camel))


class Indicators(BaseModel):
    # camelCase keys (yieldCurveSpread, pointCLI, ...) are accepted on input
    yield_curve_spread: float = _finite("yield_curve_spread", "yieldCurveSpread")
    unemployment_rate: float = _finite("unemployment_rate", "unemploymentRate")
    inflation_rate: float = _finite("inflation_rate", "inflationRate")
    gdp_per_capita_growth: float = _finite("gdp_per_capita_growth", "gdpPerCapitaGrowth")
    point_cli: float = _finite("point_cli", "pointCLI")
    ism_new_orders: float = _finite("ism_new_orders", "ismNewOrders")
    ism_supplier_deliveries: float = _finite("ism_supplier_deliveries", "ismSupplierDeliveries")
    leading_index_change: float = _finite("leading_index_change", "leadingIndexChange")

    def to_vector(self) -> IndicatorVector:
        return IndicatorVector(**self.model_dump())

    @classmethod
    def from_vector(cls, vector: IndicatorVector) -> "Indicators":
        return cls(**vector.as_dict())


class SimulateRequest(BaseModel):
    indicators: Indicators
    trials: int = Field(default=DEFAULT_TRIALS, ge=1, le=MAX_TRIALS)
    seed: Optional[int] = Field(default=None, ge=0)


class SimulateResponse(BaseModel):
    recession_probability: float = Field(ge=0, le=1)
    recession_pct: int
    risk_band: Literal["low", "moderate", "elevated", "high"]
    average_indicators: Indicators
    trials: int
    recession_count: int


class WhatIfRequest(SimulateRequest):
    trials: int = Field(default=5000, ge=1, le=MAX_TRIALS)


class ScenarioOutcome(BaseModel):
    name: str
    shifts: Dict[str, float]
    recession_probability: float
    delta: float


class WhatIfResponse(BaseModel):
    baseline_probability: float
    scenarios: List[ScenarioOutcome]
    trials: int
    seed: int


class ContextRequest(BaseModel):
    recession_probability: float = Field(ge=0, le=1)
    average_indicators: Indicators


class ContextResponse(BaseModel):
    analysis: str
    source: Literal["model", "fallback"]
    notice: Optional[str] = None
