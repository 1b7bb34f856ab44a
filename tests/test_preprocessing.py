import numpy as np
import pandas as pd
import pytest

from hoops_predictor.config import DataConfig
from hoops_predictor.data.preprocessing import base_dataset
from hoops_predictor.data.preprocessing.base_dataset import (
    BaseDatasetConfig,
    build_base_dataset,
    load_base_dataset,
)

from conftest import box_line


def test_build_base_dataset_basic(box_scores):
    """Base dataset should validate, filter, and sort correctly."""
    shuffled = box_scores.sample(frac=1.0, random_state=3)
    df = build_base_dataset(BaseDatasetConfig(seasons=[2024]), raw=shuffled)

    assert len(df) == len(box_scores)

    # fresh positional index, no bookkeeping columns added
    assert df.index.tolist() == list(range(len(df)))
    assert "row_index" not in df.columns

    # game_date should be non-decreasing (ties allowed)
    assert df["game_date"].is_monotonic_increasing

    # ties ordered by game_id, then team_id
    expected = df.sort_values(["game_date", "game_id", "team_id"]).reset_index(drop=True)
    pd.testing.assert_frame_equal(df, expected)


def test_base_dataset_drops_incomplete_rows():
    raw = pd.DataFrame(
        [
            box_line(1, "2024-01-01", 10, "home", 70),
            box_line(1, "2024-01-01", 20, "away", 60),
            box_line(2, "2024-01-02", 30, "home", np.nan),
            box_line(2, "2024-01-02", 40, "away", 55),
        ]
    )

    df = build_base_dataset(BaseDatasetConfig(seasons=[2024]), raw=raw)

    assert len(df) == 3
    assert df["team_score"].notnull().all()


def test_base_dataset_filters_to_configured_seasons(two_season_box_scores):
    df = build_base_dataset(BaseDatasetConfig(seasons=[2024]), raw=two_season_box_scores)

    assert set(df["season"]) == {2024}


def test_base_dataset_validation_errors(box_scores):
    config = BaseDatasetConfig(seasons=[2024])

    with pytest.raises(ValueError):
        build_base_dataset(config, raw=box_scores.iloc[0:0])

    with pytest.raises(KeyError, match="assists"):
        build_base_dataset(config, raw=box_scores.drop(columns=["assists"]))

    as_strings = box_scores.assign(game_date=box_scores["game_date"].astype(str))
    with pytest.raises(TypeError):
        build_base_dataset(config, raw=as_strings)

    with pytest.raises(ValueError, match="No completed games"):
        build_base_dataset(BaseDatasetConfig(seasons=[1999]), raw=box_scores)


def test_load_base_dataset_roundtrip(monkeypatch, tmp_path, box_scores):
    """build_base_dataset + load_base_dataset roundtrip should work."""
    monkeypatch.setattr(base_dataset, "DATA_CONFIG", DataConfig(processed_data_dir=tmp_path))

    built = build_base_dataset(
        BaseDatasetConfig(seasons=[2024], league="mbb", save_parquet=True),
        raw=box_scores,
    )
    loaded = load_base_dataset(2024, 2024, league="mbb", processed_dir=tmp_path)

    assert len(built) == len(loaded)
    assert set(built["game_id"]) == set(loaded["game_id"])


def test_load_base_dataset_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_base_dataset(2020, 2021, processed_dir=tmp_path)
