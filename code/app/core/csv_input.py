import io
import math
import warnings
from typing import Dict, Mapping, Optional, Union

import pandas as pd

from recession.schemas import INDICATOR_FIELDS, IndicatorVector, canonical_field


class IndicatorInputError(ValueError):
    """Input cannot be turned into a complete, finite indicator vector."""


def _to_float(raw) -> float:
    if raw is None:
        return math.nan
    if isinstance(raw, str):
        raw = raw.strip()
    value = pd.to_numeric(raw, errors="coerce")
    return float(value)


def indicators_from_mapping(
    values: Mapping[str, object],
    defaults: Optional[IndicatorVector] = None,
) -> IndicatorVector:
    """Build a vector from snake_case or camelCase keys; unknown keys are ignored."""
    found: Dict[str, float] = {}
    for header, raw in values.items():
        name = canonical_field(str(header))
        if not name:
            continue
        value = _to_float(raw)
        if not math.isfinite(value):
            raise IndicatorInputError(f"Invalid non-numeric value for '{str(header).strip()}'.")
        found[name] = value

    if not found:
        raise IndicatorInputError("No matching indicator columns found in CSV header.")

    if defaults is not None:
        merged = defaults.as_dict()
        merged.update(found)
        return IndicatorVector.from_mapping(merged)

    missing = [name for name in INDICATOR_FIELDS if name not in found]
    if missing:
        raise IndicatorInputError(f"Missing indicator columns: {', '.join(missing)}.")
    return IndicatorVector.from_mapping(found)


def parse_indicator_csv(
    data: Union[str, bytes],
    defaults: Optional[IndicatorVector] = None,
) -> IndicatorVector:
    """
    Parse a CSV with a header row and one data row into an IndicatorVector.

    Only the first data row is used. With ``defaults`` (the form's current
    values) unmatched indicators keep their default; without it every
    indicator must be present.
    """
    text = data.decode("utf-8-sig") if isinstance(data, bytes) else data
    text = text.strip()
    if not text:
        raise IndicatorInputError("Could not read the file.")
    if len([line for line in text.splitlines() if line.strip()]) < 2:
        raise IndicatorInputError("CSV must have a header row and at least one data row.")

    with warnings.catch_warnings():
        # pandas only warns, then drops the extra values
        warnings.simplefilter("error", pd.errors.ParserWarning)
        try:
            frame = pd.read_csv(io.StringIO(text), dtype=str, nrows=1, index_col=False, skip_blank_lines=True)
        except pd.errors.ParserWarning as exc:
            raise IndicatorInputError("CSV Parse Error: data row has more fields than the header.") from exc
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise IndicatorInputError(f"CSV Parse Error: {exc}") from exc

    row = frame.iloc[0]
    return indicators_from_mapping({str(col).strip(): row[col] for col in frame.columns}, defaults=defaults)
