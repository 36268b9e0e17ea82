# streamlit_app.py
import os
import sys

import pandas as pd
import streamlit as st

# Ensure the code/ directory is on sys.path so `app` and `recession` import when Streamlit runs this file.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.core.config import DEFAULT_TRIALS, configure_logging  # noqa: E402
from app.core.csv_input import IndicatorInputError, parse_indicator_csv  # noqa: E402
from app.core.pipeline import context_request_for, run_context  # noqa: E402
from app.core.tools import (  # noqa: E402
    DEFAULT_BASELINE,
    INDICATOR_METADATA,
    RISK_COLORS,
    classify_risk,
    format_indicator,
    indicator_label,
    is_new_upload,
    parse_seed,
    probability_pct,
    slider_bounds,
)
from app.ai.context_client import check_context_service_online, is_api_key_configured  # noqa: E402
from recession.errors import SimulationError  # noqa: E402
from recession.schemas import INDICATOR_FIELDS, IndicatorVector  # noqa: E402
from recession.simulator import simulate  # noqa: E402

configure_logging()


@st.cache_data(ttl=60)
def context_service_online() -> bool:
    return check_context_service_online()


st.set_page_config(page_title="Recession Probability Simulator", layout="wide")
st.title("Recession Probability Monte Carlo Simulator")
st.caption("Estimate recession odds by perturbing key indicators across thousands of simulated trials.")

# Session state
if "indicators" not in st.session_state:
    st.session_state.indicators = DEFAULT_BASELINE.as_dict()
if "result" not in st.session_state:
    st.session_state.result = None
if "analysis" not in st.session_state:
    st.session_state.analysis = None
if "csv_error" not in st.session_state:
    st.session_state.csv_error = ""

with st.sidebar:
    st.header("Controls")
    trials = st.number_input("Trials", min_value=1, max_value=1_000_000, value=DEFAULT_TRIALS, step=1000)
    seed_text = st.text_input("Seed (optional)", value="")
    st.markdown("---")
    if not is_api_key_configured():
        st.warning("No API key configured. AI context will use the built-in summary.")
    elif not context_service_online():
        st.warning("Context service is unreachable. AI context may fall back to the built-in summary.")
    else:
        st.success("Context service reachable.")


def render_indicator_slider(name: str) -> None:
    meta = INDICATOR_METADATA[name]
    current = float(st.session_state.indicators[name])
    lo, hi = slider_bounds(name, current)
    st.session_state.indicators[name] = st.slider(
        indicator_label(name),
        min_value=lo,
        max_value=hi,
        value=current,
        step=float(meta["step"]),
        help=str(meta["description"]),
        key=f"slider_{name}",
    )


left, right = st.columns(2)

with left:
    st.subheader("Economic Indicators")
    st.markdown("**Core Indicators**")
    for name in INDICATOR_FIELDS:
        if INDICATOR_METADATA[name]["group"] == "core":
            render_indicator_slider(name)
    st.markdown("**Growth & Leading Indicators**")
    for name in INDICATOR_FIELDS:
        if INDICATOR_METADATA[name]["group"] == "leading":
            render_indicator_slider(name)

    st.markdown("---")
    st.markdown("**Or Upload Data**")
    st.caption("Upload a CSV file with a header row and one data row. Headers should match indicator IDs (e.g., `yieldCurveSpread`, `unemploymentRate`).")
    uploaded = st.file_uploader("Upload CSV File", type=["csv"])
    if is_new_upload(uploaded, st.session_state.get("last_upload_id")):
        st.session_state.last_upload_id = uploaded.file_id
        try:
            vector = parse_indicator_csv(uploaded.getvalue(), defaults=IndicatorVector.from_mapping(st.session_state.indicators))
        except IndicatorInputError as exc:
            message = str(exc)
            st.session_state.csv_error = message if message.startswith("CSV Parse Error") else f"CSV Parse Error: {message}"
        else:
            st.session_state.indicators = vector.as_dict()
            st.session_state.csv_error = ""
            for name in INDICATOR_FIELDS:
                st.session_state.pop(f"slider_{name}", None)
            st.rerun()
    if st.session_state.csv_error:
        st.error(st.session_state.csv_error)

    if st.button("Run Simulation", type="primary"):
        st.session_state.analysis = None
        try:
            seed = parse_seed(seed_text)
        except ValueError as exc:
            st.error(str(exc))
        else:
            with st.spinner("Simulating..."):
                try:
                    st.session_state.result = simulate(
                        IndicatorVector.from_mapping(st.session_state.indicators),
                        int(trials),
                        seed=seed,
                    )
                except SimulationError as exc:
                    st.session_state.result = None
                    st.error(f"Simulation failed: {exc}")

with right:
    st.subheader("Simulation Results")
    result = st.session_state.result
    if result is None:
        st.info("Run the simulation to see the results.")
    else:
        pct = probability_pct(result.recession_probability)
        band = classify_risk(result.recession_probability)
        st.markdown(
            f"<div style='text-align:center'><span style='font-size:4rem;font-weight:700;color:{RISK_COLORS[band]}'>{pct}%</span>"
            f"<br/><span style='color:#9ca3af'>Recession Risk ({band})</span></div>",
            unsafe_allow_html=True,
        )
        st.progress(pct / 100.0)
        st.caption(f"{result.recession_count:,} of {result.trials:,} trials ended in recession.")

        st.markdown("**Average Simulated Indicators**")
        averages = result.average_indicators.as_dict()
        table = pd.DataFrame(
            [{"Indicator": indicator_label(name), "Average": format_indicator(name, averages[name])} for name in INDICATOR_FIELDS]
        )
        st.dataframe(table, hide_index=True, use_container_width=True)

st.markdown("---")
st.subheader("AI-Powered Context")
if st.button("Get AI Context", disabled=st.session_state.result is None):
    result = st.session_state.result
    with st.spinner("Generating analysis..."):
        st.session_state.analysis = run_context(
            context_request_for(result.recession_probability, result.average_indicators.as_dict())
        )

analysis = st.session_state.analysis
if analysis is not None:
    if analysis.notice:
        st.warning(analysis.notice)
    st.markdown(analysis.analysis)

st.caption("This simulation is for illustrative and educational purposes only and does not constitute financial advice.")
st.caption("Model coefficients are not empirically derived from historical data.")
