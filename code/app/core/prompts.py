from typing import Dict

from app.core.tools import format_indicator, indicator_label
from recession.schemas import INDICATOR_FIELDS


def format_pct(probability: float) -> str:
    return f"{probability * 100:.1f}%"


def build_context_prompt(recession_probability: float, average_indicators: Dict[str, float]) -> str:
    indicator_lines = "\n".join(
        f"- {indicator_label(name)}: {format_indicator(name, average_indicators[name])}"
        for name in INDICATOR_FIELDS
    )
    return f"""
Analyze the following economic scenario based on a Monte Carlo simulation and provide a qualitative context.
The simulation produced the following results:
- Estimated Recession Probability: {format_pct(recession_probability)}

Average Simulated Indicators:
{indicator_lines}

Based on these indicators, please provide a brief analysis covering the following points in markdown format:
1.  **Scenario Analysis:** Briefly describe the overall economic picture these numbers paint. Is it a healthy economy, one on the brink, or one in a clear downturn?
2.  **Primary Drivers:** Identify which indicator(s) are most likely contributing to the recession risk. For example, is this a potential recession driven by an inverted yield curve (investor sentiment), high unemployment (labor market weakness), high inflation (monetary policy tightening), or weak leading indicators?
3.  **Potential Characteristics:** Describe what a recession with these characteristics might feel like for the average person (e.g., impact on jobs, cost of living, borrowing costs).

Keep the analysis concise, clear, and easy for a non-economist to understand. Use markdown for formatting.
Do NOT provide investment advice, stock picks, or buy/sell/hold guidance.
""".strip()
