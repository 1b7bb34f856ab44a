from __future__ import annotations

from typing import Iterable, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from hoops_predictor.data.columns import SEASON


def split_random(
    df: pd.DataFrame,
    train_fraction: float = 0.75,
    seed: int = 42,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Randomly partition rows into training and testing sets.

    The draw is seeded so the same frame and seed always give the same
    partition. No stratification is applied.

    Returns:
        (train_df, test_df), both copies with their original index.

    Raises:
        ValueError if train_fraction is not strictly between 0 and 1, or the
        frame has fewer than two rows.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1); got {train_fraction}")
    if len(df) < 2:
        raise ValueError("Need at least two rows to split into train and test.")

    train_df, test_df = train_test_split(
        df,
        train_size=train_fraction,
        random_state=seed,
        shuffle=True,
    )
    return train_df.copy(), test_df.copy()


def split_by_season(
    df: pd.DataFrame,
    holdout_seasons: Iterable[int],
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Hold out whole seasons for testing and train on every other season.

    Returns:
        (train_df, test_df)

    Raises:
        ValueError if the season column is missing or either partition
        would be empty.
    """
    if SEASON not in df.columns:
        raise ValueError(f"DataFrame must contain a '{SEASON}' column to hold out seasons.")

    holdout = sorted(int(s) for s in holdout_seasons)
    in_test = df[SEASON].isin(holdout)
    train_df, test_df = df[~in_test].copy(), df[in_test].copy()

    if train_df.empty or test_df.empty:
        raise ValueError(
            f"Holding out seasons {holdout} leaves an empty partition; "
            f"available seasons: {sorted(df[SEASON].unique().tolist())}"
        )
    return train_df, test_df
