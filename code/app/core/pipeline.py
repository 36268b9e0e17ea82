import logging
from typing import Dict, List, Optional

from .models import (
    ContextRequest,
    ContextResponse,
    Indicators,
    ScenarioOutcome,
    SimulateRequest,
    SimulateResponse,
    WhatIfRequest,
    WhatIfResponse,
)
from .prompts import build_context_prompt, format_pct
from .tools import classify_risk, indicator_label, probability_pct, top_risk_drivers
from app.ai.context_client import extract_text, is_api_key_configured, query_context_model
from recession.schemas import IndicatorVector, SimulationParams
from recession.simulator import run_simulation
from recession.whatif import run_scenarios

logger = logging.getLogger(__name__)

DISABLED_NOTICE = "AI analysis feature is disabled. An API key is required to get AI-powered context."
ERROR_NOTICE = (
    "There was an error generating the analysis. "
    "This could be due to a configuration issue or network problem."
)

BAND_DESCRIPTIONS = {
    "low": "The simulated economy looks broadly healthy; recession risk is low.",
    "moderate": "The simulated economy shows some strain; recession risk is moderate.",
    "elevated": "The simulated economy looks on the brink; recession risk is elevated.",
    "high": "The simulated economy points to a clear downturn; recession risk is high.",
}


def run_simulation_request(payload: SimulateRequest) -> SimulateResponse:
    params = SimulationParams(baseline=payload.indicators.to_vector(), trials=payload.trials)
    result = run_simulation(params, seed=payload.seed)
    return SimulateResponse(
        recession_probability=result.recession_probability,
        recession_pct=probability_pct(result.recession_probability),
        risk_band=classify_risk(result.recession_probability),
        average_indicators=Indicators.from_vector(result.average_indicators),
        trials=result.trials,
        recession_count=result.recession_count,
    )


def run_whatif_request(payload: WhatIfRequest) -> WhatIfResponse:
    out = run_scenarios(payload.indicators.to_vector(), payload.trials, seed=payload.seed)
    return WhatIfResponse(
        baseline_probability=out["baseline"]["recession_probability"],
        scenarios=[ScenarioOutcome(**s) for s in out["scenarios"]],
        trials=out["metadata"]["trials"],
        seed=out["metadata"]["seed"],
    )


def _deterministic_summary(recession_probability: float, averages: IndicatorVector) -> str:
    band = classify_risk(recession_probability)
    lines: List[str] = [
        "**Scenario Analysis:**",
        f"- Estimated recession probability is {format_pct(recession_probability)}. {BAND_DESCRIPTIONS[band]}",
        "",
        "**Primary Drivers:**",
    ]
    drivers = top_risk_drivers(averages)
    if drivers:
        for name, contribution in drivers:
            lines.append(f"- {indicator_label(name)} adds {contribution:+.2f} to the risk score versus a neutral economy.")
    else:
        lines.append("- No indicator is pushing risk above a neutral economy.")
    lines.extend(
        [
            "",
            "_Model coefficients are illustrative and not fit to historical data._",
        ]
    )
    return "\n".join(lines).strip()


def run_context(payload: ContextRequest) -> ContextResponse:
    averages = payload.average_indicators.to_vector()
    fallback = _deterministic_summary(payload.recession_probability, averages)

    if not is_api_key_configured():
        return ContextResponse(analysis=fallback, source="fallback", notice=DISABLED_NOTICE)

    prompt = build_context_prompt(payload.recession_probability, averages.as_dict())
    analysis: Optional[str] = None
    try:
        response = query_context_model(prompt)
        analysis = extract_text(response).strip()
    except Exception:
        logger.exception("Context model call failed")
        analysis = None

    if not analysis:
        return ContextResponse(analysis=fallback, source="fallback", notice=ERROR_NOTICE)
    return ContextResponse(analysis=analysis, source="model")


def context_request_for(recession_probability: float, averages: Dict[str, float]) -> ContextRequest:
    return ContextRequest(recession_probability=recession_probability, average_indicators=Indicators(**averages))
