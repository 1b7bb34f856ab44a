from __future__ import annotations

from typing import Sequence, Tuple

import pandas as pd
from sklearn.preprocessing import StandardScaler


def standardize(
    train: pd.DataFrame,
    test: pd.DataFrame,
    columns: Sequence[str],
) -> Tuple[pd.DataFrame, pd.DataFrame, StandardScaler]:
    """
    Z-score `columns` using training-partition statistics only.

    The scaler is fit on `train` (mean 0, population std 1 on that
    partition) and the same transform is applied to `test`, so test
    statistics never influence the scaling.

    Returns:
        (train_scaled, test_scaled, fitted_scaler); frames keep their index
        and column names.
    """
    columns = list(columns)
    scaler = StandardScaler()
    train_scaled = pd.DataFrame(
        scaler.fit_transform(train[columns]),
        index=train.index,
        columns=columns,
    )
    test_scaled = pd.DataFrame(
        scaler.transform(test[columns]),
        index=test.index,
        columns=columns,
    )
    return train_scaled, test_scaled, scaler
