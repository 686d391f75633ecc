"""
Target attainment for KPIs and weekly ratings.

Everything here is a pure function over plain values or DataFrames: the gap
to target, red/amber/green status in each KPI's preferred direction, rating
bands for weekly self-reports, and the per-KPI, per-week attainment table.
"""

import logging

import pandas as pd

from .config import AMBER_BAND_PCT, RATING_FAIR, RATING_GOOD

logger = logging.getLogger(__name__)


def calc_variance(actual: float, target: float) -> tuple[float, float | None]:
    """Gap between a reported value and its KPI target.

    Returns
    -------
    (gap, gap_pct): ``actual - target`` in the KPI's own unit, and the same
    gap as a percentage of target. ``gap_pct`` is None for a zero target.
    """
    gap = actual - target
    gap_pct = gap / target * 100 if target else None
    return gap, gap_pct


def classify_performance(
    actual: float,
    target: float,
    preferred_trend: str,
    amber_band_pct: float = AMBER_BAND_PCT,
) -> str:
    """RAG status of a KPI value, judged in the KPI's preferred direction.

    Reaching the target, or beating it in the preferred direction, is
    green. Missing it by at most ``amber_band_pct`` percent of the target is
    amber, and a wider miss is red. A missing value or a zero target gives
    'grey'.
    """
    if pd.isna(actual) or pd.isna(target) or target == 0:
        return "grey"

    # How far the value falls short in the direction that counts
    shortfall = actual - target if preferred_trend == "lower" else target - actual
    if shortfall <= 0:
        return "green"
    if shortfall <= abs(target) * amber_band_pct / 100:
        return "amber"
    return "red"


def rating_band(avg_rating: float) -> str:
    """'good' (>= 4), 'fair' (>= 3) or 'poor' for an average weekly rating."""
    if avg_rating >= RATING_GOOD:
        return "good"
    if avg_rating >= RATING_FAIR:
        return "fair"
    return "poor"


def summarise_kpi_attainment(fact_kpi_entries: pd.DataFrame) -> pd.DataFrame:
    """Aggregate KPI entries to one row per KPI per week.

    Rules
    -----
    - actual: mean of all employees' values for that KPI in that week
    - target: the KPI's target value
    - rag: ``classify_performance`` on the mean against target

    Parameters
    ----------
    fact_kpi_entries : DataFrame from transforms.build_fact_kpi_entries().

    Returns
    -------
    DataFrame with columns:
        week, kpi_id, kpi_name, unit, preferred_trend, actual, target,
        variance, variance_pct, entries, rag
    """
    columns = [
        "week", "kpi_id", "kpi_name", "unit", "preferred_trend",
        "actual", "target", "variance", "variance_pct", "entries", "rag",
    ]
    if fact_kpi_entries.empty:
        logger.warning("Empty KPI entry table — returning empty attainment summary")
        return pd.DataFrame(columns=columns)

    grouped = (
        fact_kpi_entries
        .groupby(["week", "kpi_id", "kpi_name", "unit", "preferred_trend"], dropna=False)
        .agg(actual=("value", "mean"), target=("target_value", "first"), entries=("value", "size"))
        .reset_index()
    )

    variances = []
    variance_pcts = []
    rags = []
    for _, row in grouped.iterrows():
        variance, variance_pct = calc_variance(row["actual"], row["target"])
        variances.append(variance)
        variance_pcts.append(variance_pct)
        rags.append(classify_performance(row["actual"], row["target"], row["preferred_trend"]))

    grouped["variance"] = variances
    grouped["variance_pct"] = variance_pcts
    grouped["rag"] = rags

    result = grouped[columns].sort_values(["week", "kpi_name"]).reset_index(drop=True)
    logger.info("Summarised KPI attainment to %d rows", len(result))
    return result
