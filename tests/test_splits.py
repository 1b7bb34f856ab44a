import numpy as np
import pandas as pd
import pytest

from hoops_predictor.evaluation.metrics import rmse
from hoops_predictor.evaluation.splits import split_by_season, split_random


@pytest.fixture
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "game_id": np.arange(100),
            "season": [2022] * 30 + [2023] * 30 + [2024] * 40,
            "mov": np.arange(100) % 17 - 8,
        }
    )


def test_split_random_sizes_and_disjoint(frame):
    train, test = split_random(frame, train_fraction=0.75, seed=1)

    assert len(train) == 75
    assert len(test) == 25
    assert not set(train["game_id"]) & set(test["game_id"])
    assert set(train["game_id"]) | set(test["game_id"]) == set(frame["game_id"])


def test_split_random_is_seeded(frame):
    a_train, _ = split_random(frame, seed=42)
    b_train, _ = split_random(frame, seed=42)
    c_train, _ = split_random(frame, seed=43)

    assert a_train["game_id"].tolist() == b_train["game_id"].tolist()
    assert a_train["game_id"].tolist() != c_train["game_id"].tolist()


def test_split_random_validates_inputs(frame):
    with pytest.raises(ValueError):
        split_random(frame, train_fraction=1.0)
    with pytest.raises(ValueError):
        split_random(frame.iloc[:1])


def test_split_by_season_holds_out_whole_seasons(frame):
    train_df, test_df = split_by_season(frame, holdout_seasons=[2024])

    assert set(train_df["season"]) == {2022, 2023}
    assert set(test_df["season"]) == {2024}
    assert len(train_df) + len(test_df) == len(frame)

    train_df, test_df = split_by_season(frame, holdout_seasons=[2022, 2024])
    assert set(train_df["season"]) == {2023}


def test_split_by_season_rejects_empty_partitions(frame):
    with pytest.raises(ValueError, match="empty partition"):
        split_by_season(frame, holdout_seasons=[2019])
    with pytest.raises(ValueError, match="empty partition"):
        split_by_season(frame, holdout_seasons=[2022, 2023, 2024])
    with pytest.raises(ValueError):
        split_by_season(frame.drop(columns=["season"]), holdout_seasons=[2022])


def test_rmse():
    assert rmse([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == 0.0
    assert rmse([0.0, 0.0], [3.0, -3.0]) == pytest.approx(3.0)
