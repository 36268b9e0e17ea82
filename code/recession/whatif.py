from typing import List, Dict, Any, Optional

import numpy as np

from .errors import ModelConfigurationError
from .schemas import INDICATOR_FIELDS, IndicatorVector
from .simulator import simulate


def generate_default_scenarios() -> List[Dict[str, Any]]:
    return [
        {"name": "curve_inversion", "shifts": {"yield_curve_spread": -1.0}},
        {"name": "unemployment_spike", "shifts": {"unemployment_rate": 1.5}},
        {"name": "inflation_surge", "shifts": {"inflation_rate": 2.0}},
        {"name": "growth_stall", "shifts": {"gdp_per_capita_growth": -2.0, "leading_index_change": -0.5}},
        {"name": "manufacturing_contraction", "shifts": {"ism_new_orders": -8.0}},
    ]


def _check_shifts(name: str, shifts: Dict[str, float]) -> None:
    unknown = sorted(set(shifts) - set(INDICATOR_FIELDS))
    if unknown:
        raise ModelConfigurationError(f"Scenario '{name}' shifts unknown indicators: {', '.join(unknown)}")


def run_scenarios(
    baseline: IndicatorVector,
    trials: int,
    *,
    seed: Optional[int] = None,
    custom_scenarios: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Re-run the simulation on shifted copies of ``baseline``.

    Every run shares one seed, so each delta reflects the shift rather than
    sampling noise. Returns:
      {
        "baseline": {"recession_probability": float, "average_indicators": {...}},
        "scenarios": [
          {"name": "...", "shifts": {...}, "recession_probability": float, "delta": float},
          ...
        ],
        "metadata": {"count": int, "trials": int, "seed": int},
      }
    """
    defs = generate_default_scenarios()
    if custom_scenarios:
        defs.extend(custom_scenarios)
    for d in defs:
        _check_shifts(d.get("name", "unnamed"), d.get("shifts", {}))

    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**32))

    base = simulate(baseline, trials, seed=seed)
    scenarios_out = []
    for d in defs:
        shifts = d.get("shifts", {})
        result = simulate(baseline.shifted(shifts), trials, seed=seed)
        scenarios_out.append({
            "name": d.get("name", "unnamed"),
            "shifts": dict(shifts),
            "recession_probability": result.recession_probability,
            "delta": round(result.recession_probability - base.recession_probability, 4),
        })

    return {
        "baseline": {
            "recession_probability": base.recession_probability,
            "average_indicators": base.average_indicators.as_dict(),
        },
        "scenarios": scenarios_out,
        "metadata": {"count": len(scenarios_out), "trials": trials, "seed": seed},
    }
