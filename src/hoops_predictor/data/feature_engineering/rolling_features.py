from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollingSpec:
    """
    Specification for leak-free rolling features built from a single column.

    Attributes
    ----------
    col:
        Source column in the DataFrame to roll over.
    windows:
        Rolling window sizes, in number of games.
    stats:
        Statistics to compute. Supported: "mean", "sum", "std", "min", "max".
    min_periods:
        Minimum number of prior observations required to compute a value.
        If fewer than min_periods, result will be NaN.
    prefix:
        Prefix used for generated feature names. If None, uses `col`.
        Output columns follow the pattern: "{prefix}_rolling_{stat}_{window}".
    """

    col: str
    windows: Sequence[int]
    stats: Sequence[str] = ("mean",)
    min_periods: int = 1
    prefix: str | None = None


_SUPPORTED_STATS = {"mean", "sum", "std", "min", "max"}


def _validate_specs(df: pd.DataFrame, specs: Iterable[RollingSpec]) -> list[RollingSpec]:
    specs = list(specs)
    if not specs:
        raise ValueError("At least one RollingSpec must be provided.")

    for spec in specs:
        if spec.col not in df.columns:
            raise KeyError(f"RollingSpec refers to missing column: {spec.col}")
        for stat in spec.stats:
            if stat not in _SUPPORTED_STATS:
                raise ValueError(
                    f"Unsupported stat '{stat}' in RollingSpec for col '{spec.col}'. "
                    f"Supported: {_SUPPORTED_STATS}"
                )
    return specs


def _validate_group_inputs(df: pd.DataFrame, group_cols: Sequence[str], time_col: str) -> None:
    if not group_cols:
        raise ValueError("group_cols must not be empty.")

    for col in group_cols:
        if col not in df.columns:
            raise KeyError(f"group_col '{col}' not found in DataFrame.")
    if time_col not in df.columns:
        raise KeyError(f"time_col '{time_col}' not found in DataFrame.")


def add_rolling_features(
    df: pd.DataFrame,
    group_cols: Sequence[str],
    time_col: str,
    specs: Sequence[RollingSpec],
) -> pd.DataFrame:
    """
    Add leak-free rolling features to a DataFrame.

    Anti-leakage guarantee
    ----------------------
    For each row, rolling statistics are computed ONLY from rows with strictly
    smaller `time_col` within the same group (group_cols). This is enforced by
    applying a 1-row shift before rolling.

    Parameters
    ----------
    df:
        Input DataFrame. Must contain group_cols + time_col + all spec.col values.
    group_cols:
        Columns defining an independent time series (e.g., ["season", "team_id"]).
    time_col:
        Column defining chronological order within each group (e.g., "game_number").
    specs:
        RollingSpec definitions describing what to compute.

    Returns
    -------
    pd.DataFrame
        Copy of `df` with new rolling feature columns appended. Original index
        order is preserved.
    """
    _validate_group_inputs(df, group_cols, time_col)
    specs = _validate_specs(df, specs)

    original_index = df.index
    result = df.sort_values(list(group_cols) + [time_col], kind="mergesort").copy()
    keys = [result[c] for c in group_cols]

    for spec in specs:
        # drop current row from window
        values = result.groupby(keys, sort=False)[spec.col].shift(1)
        grouped = values.groupby(keys, sort=False)
        prefix = spec.prefix or spec.col

        for window in spec.windows:
            for stat in spec.stats:
                result[f"{prefix}_rolling_{stat}_{window}"] = grouped.transform(
                    lambda s, w=window, st=stat, mp=spec.min_periods: getattr(
                        s.rolling(window=w, min_periods=mp), st
                    )()
                )

    return result.loc[original_index]


def add_prior_averages(
    df: pd.DataFrame,
    group_cols: Sequence[str],
    time_col: str,
    cols: Sequence[str],
    prefix: str = "avg_",
) -> pd.DataFrame:
    """
    Add season-to-date averages of strictly earlier rows.

    For each column `c`, the new column `{prefix}{c}` holds the sum of `c`
    over all earlier rows of the group divided by the number of earlier
    rows. `time_col` must be the 1-based position within the group (the
    game number), so the denominator is `time_col - 1`.

    A row with no earlier rows (game number 1) gets NaN; the division by
    zero never raises. Once an earlier row has a missing value in `c`, the
    average of `c` is NaN for the rest of the group, since it can no longer
    be taken over all `time_col - 1` earlier rows.

    Returns
    -------
    pd.DataFrame
        Copy of `df` with the average columns appended, in original order.
    """
    _validate_group_inputs(df, group_cols, time_col)
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"Columns to average not found in DataFrame: {missing}")

    original_index = df.index
    result = df.sort_values(list(group_cols) + [time_col], kind="mergesort").copy()
    keys = [result[c] for c in group_cols]

    cols = list(cols)
    is_missing = result[cols].isna()
    n_missing = int(is_missing.to_numpy().sum())
    if n_missing:
        logger.warning(
            "%d missing values among %s; their later averages are NaN",
            n_missing,
            [c for c in cols if is_missing[c].any()],
        )
    # missing values strictly before each row
    missing_count = is_missing.astype(int)
    missing_before = missing_count.groupby(keys, sort=False).cumsum() - missing_count

    prior = result.groupby(keys, sort=False)[cols].shift(1)
    prior_sums = prior.fillna(0.0).groupby(keys, sort=False).cumsum()

    n_prior = (result[time_col] - 1).astype(float).replace(0.0, np.nan)
    averages = prior_sums.div(n_prior, axis=0).mask(missing_before > 0)
    averages.columns = [f"{prefix}{c}" for c in cols]

    result = pd.concat([result, averages], axis=1)
    return result.loc[original_index]
