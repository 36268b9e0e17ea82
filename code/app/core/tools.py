from typing import Dict, List, Optional, Tuple

from app.core.sample_payloads import PRESETS
from recession.model import DEFAULT_MODEL, LogisticModel
from recession.schemas import INDICATOR_FIELDS, IndicatorVector

RISK_HIGH_PCT = 75
RISK_ELEVATED_PCT = 50
RISK_MODERATE_PCT = 25

RISK_COLORS = {
    "high": "#ef4444",
    "elevated": "#f97316",
    "moderate": "#eab308",
    "low": "#22c55e",
}

# Starting slider values; also the neutral economy contributions are measured against.
DEFAULT_BASELINE = IndicatorVector.from_mapping(PRESETS["default"])

INDICATOR_METADATA: Dict[str, Dict[str, object]] = {
    "yield_curve_spread": {
        "label": "Yield Curve Spread (%)",
        "min": -2.0, "max": 4.0, "step": 0.01, "unit": "%", "group": "core",
        "description": "10-Yr minus 2-Yr Treasury yield. Inversion is a classic recession predictor.",
    },
    "unemployment_rate": {
        "label": "Unemployment Rate (%)",
        "min": 2.0, "max": 12.0, "step": 0.1, "unit": "%", "group": "core",
        "description": "Percentage of the labor force that is jobless. A sharp increase is a warning sign.",
    },
    "inflation_rate": {
        "label": "Inflation Rate (CPI %)",
        "min": -1.0, "max": 10.0, "step": 0.1, "unit": "%", "group": "core",
        "description": "Year-over-year CPI change. High inflation can trigger policy tightening.",
    },
    "gdp_per_capita_growth": {
        "label": "GDP per Capita Growth (%)",
        "min": -5.0, "max": 7.0, "step": 0.1, "unit": "%", "group": "leading",
        "description": "Annualized growth in economic output per person.",
    },
    "point_cli": {
        "label": "Composite Leading Indicator",
        "min": 95.0, "max": 105.0, "step": 0.1, "unit": "", "group": "leading",
        "description": "Index designed to signal turning points in the business cycle. Above 100 suggests growth.",
    },
    "ism_new_orders": {
        "label": "ISM New Orders Index",
        "min": 30.0, "max": 70.0, "step": 0.5, "unit": "", "group": "leading",
        "description": "Manufacturing new orders. Above 50 indicates expansion.",
    },
    "ism_supplier_deliveries": {
        "label": "ISM Supplier Deliveries",
        "min": 30.0, "max": 70.0, "step": 0.5, "unit": "", "group": "leading",
        "description": "Speed of supplier deliveries. Higher values can mean strong demand or supply bottlenecks.",
    },
    "leading_index_change": {
        "label": "Leading Index (MoM %)",
        "min": -2.0, "max": 2.0, "step": 0.1, "unit": "%", "group": "leading",
        "description": "Month-over-month change in the LEI. Negative values signal a slowdown.",
    },
}


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def probability_pct(probability: float) -> int:
    return int(round(clamp(probability, 0.0, 1.0) * 100))


def classify_risk(probability: float) -> str:
    pct = probability_pct(probability)
    if pct > RISK_HIGH_PCT:
        return "high"
    if pct > RISK_ELEVATED_PCT:
        return "elevated"
    if pct > RISK_MODERATE_PCT:
        return "moderate"
    return "low"


def indicator_label(field: str) -> str:
    return str(INDICATOR_METADATA[field]["label"])


def format_indicator(field: str, value: float) -> str:
    unit = INDICATOR_METADATA[field]["unit"]
    return f"{value:.2f}{unit}"


def slider_bounds(field: str, value: float) -> Tuple[float, float]:
    """Slider range widened to include ``value``, so uploaded values are never clipped."""
    meta = INDICATOR_METADATA[field]
    return min(float(meta["min"]), value), max(float(meta["max"]), value)


def parse_seed(text: str) -> Optional[int]:
    """Blank means unseeded; anything else must be a non-negative integer."""
    text = text.strip()
    if not text:
        return None
    try:
        seed = int(text)
    except ValueError:
        seed = -1
    if seed < 0:
        raise ValueError(f"Seed must be a non-negative integer, got '{text}'.")
    return seed


def is_new_upload(uploaded, last_file_id: Optional[str]) -> bool:
    # file_id changes on every upload, even when the filename repeats
    return uploaded is not None and uploaded.file_id != last_file_id


def score_contributions(
    vector: IndicatorVector,
    reference: IndicatorVector = DEFAULT_BASELINE,
    model: LogisticModel = DEFAULT_MODEL,
) -> Dict[str, float]:
    """Change in logistic score per indicator relative to ``reference``; positive raises risk."""
    coefficients = model.coefficients()
    values = vector.as_dict()
    ref = reference.as_dict()
    return {name: coefficients[name] * (values[name] - ref[name]) for name in INDICATOR_FIELDS}


def top_risk_drivers(vector: IndicatorVector, limit: int = 3) -> List[Tuple[str, float]]:
    contributions = score_contributions(vector)
    ranked = sorted(contributions.items(), key=lambda item: item[1], reverse=True)
    return [(name, value) for name, value in ranked[:limit] if value > 0]
