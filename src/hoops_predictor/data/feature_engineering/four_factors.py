"""
Dean Oliver's four factors computed from prior-average box-score columns.

Each rate is a fixed formula over columns that already exist on the row, so
no aggregation happens here. A zero denominator produces NaN for that row.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from hoops_predictor.data.columns import avg, opp


def _safe_ratio(num: pd.Series, den: pd.Series) -> pd.Series:
    """num / den with NaN wherever den is zero or missing."""
    return num / den.where(den != 0, np.nan)


def effective_fg_pct(fgm: pd.Series, fg3m: pd.Series, fga: pd.Series) -> pd.Series:
    return 100.0 * _safe_ratio(fgm + 0.5 * fg3m, fga)


def turnover_pct(tov: pd.Series, fga: pd.Series, fta: pd.Series) -> pd.Series:
    return 100.0 * _safe_ratio(tov, fga + tov + 0.44 * fta)


def offensive_rebound_pct(orb: pd.Series, opp_drb: pd.Series) -> pd.Series:
    return 100.0 * _safe_ratio(orb, orb + opp_drb)


def free_throw_rate(ftm: pd.Series, fga: pd.Series) -> pd.Series:
    return _safe_ratio(ftm, fga)


def _side(df: pd.DataFrame, stat: str, mirrored: bool) -> pd.Series:
    return df[avg(opp(stat))] if mirrored else df[avg(stat)]


def add_four_factors(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add offensive and defensive four factors from prior averages.

    Offensive (team) columns: efg_pct, tov_pct, orb_pct, ft_rate.
    Defensive columns use the mirrored opponent averages and get the
    `_opp` suffix: efg_pct_opp is the eFG% the team has allowed, and
    orb_pct_opp is the opponents' offensive rebound rate against the
    team's defensive rebounds.
    """
    out = df.copy()

    for mirrored in (False, True):
        suffix = "_opp" if mirrored else ""

        def s(stat: str) -> pd.Series:
            return _side(out, stat, mirrored)

        def other(stat: str) -> pd.Series:
            return _side(out, stat, not mirrored)

        out[f"efg_pct{suffix}"] = effective_fg_pct(
            s("field_goals_made"),
            s("three_point_field_goals_made"),
            s("field_goals_attempted"),
        )
        out[f"tov_pct{suffix}"] = turnover_pct(
            s("turnovers"),
            s("field_goals_attempted"),
            s("free_throws_attempted"),
        )
        out[f"orb_pct{suffix}"] = offensive_rebound_pct(
            s("offensive_rebounds"),
            other("defensive_rebounds"),
        )
        out[f"ft_rate{suffix}"] = free_throw_rate(
            s("free_throws_made"),
            s("field_goals_attempted"),
        )

    return out
