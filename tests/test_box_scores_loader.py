import pandas as pd
import pytest

from hoops_predictor.data.columns import BOX_SCORE_STATS, ID_COLS
from hoops_predictor.data.loaders.box_scores import (
    TeamBoxScoreLoader,
    TeamBoxScoreLoaderConfig,
)


class _FakePolarsFrame:
    """Stands in for the Polars frame sportsdataverse returns."""

    def __init__(self, df: pd.DataFrame) -> None:
        self._df = df

    def to_pandas(self) -> pd.DataFrame:
        return self._df.copy()


def _patch_mbb(monkeypatch, result):
    from sportsdataverse import mbb

    calls = []

    def mock_load(seasons):
        calls.append(list(seasons))
        return result

    monkeypatch.setattr(mbb, "load_mbb_team_boxscore", mock_load)
    return calls


def test_loader_with_mock(monkeypatch, mock_provider_box):
    """Unit test using mock provider output (no external dependency)."""
    calls = _patch_mbb(monkeypatch, _FakePolarsFrame(mock_provider_box))

    loader = TeamBoxScoreLoader(TeamBoxScoreLoaderConfig(seasons=[2024], league="mbb"))
    df = loader.load()

    assert calls == [[2024]]
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 4

    for col in ID_COLS + BOX_SCORE_STATS:
        assert col in df.columns

    # Extra provider columns are dropped
    assert "team_name" not in df.columns
    assert "team_winner" not in df.columns

    assert pd.api.types.is_datetime64_any_dtype(df["game_date"])
    assert set(df["team_home_away"]) == {"home", "away"}


def test_loader_accepts_pandas_frames(monkeypatch, mock_provider_box):
    _patch_mbb(monkeypatch, mock_provider_box)

    df = TeamBoxScoreLoader(TeamBoxScoreLoaderConfig(seasons=[2024])).load()
    assert len(df) == 4


def test_loader_drops_postseason_when_requested(monkeypatch, mock_provider_box):
    _patch_mbb(monkeypatch, mock_provider_box)

    config = TeamBoxScoreLoaderConfig(seasons=[2024], include_postseason=False)
    df = TeamBoxScoreLoader(config).load()

    assert len(df) == 2
    assert set(df["game_id"]) == {401}


def test_loader_rejects_unknown_league():
    config = TeamBoxScoreLoaderConfig(seasons=[2024], league="nhl")
    with pytest.raises(ValueError, match="Unsupported league"):
        TeamBoxScoreLoader(config).load()


def test_loader_requires_seasons():
    config = TeamBoxScoreLoaderConfig(seasons=[])
    with pytest.raises(ValueError):
        TeamBoxScoreLoader(config).load()


def test_loader_reports_missing_columns(monkeypatch, mock_provider_box):
    _patch_mbb(monkeypatch, mock_provider_box.drop(columns=["turnovers"]))

    with pytest.raises(KeyError, match="turnovers"):
        TeamBoxScoreLoader(TeamBoxScoreLoaderConfig(seasons=[2024])).load()


def test_loader_rejects_unexpected_return_type(monkeypatch):
    _patch_mbb(monkeypatch, [{"game_id": 1}])

    with pytest.raises(TypeError):
        TeamBoxScoreLoader(TeamBoxScoreLoaderConfig(seasons=[2024])).load()


@pytest.mark.integration
def test_loader_real_smoke():
    """Optional integration test that hits sportsdataverse for real."""
    loader = TeamBoxScoreLoader(TeamBoxScoreLoaderConfig(seasons=[2024], league="mbb"))
    df = loader.load()

    assert len(df) > 0
    assert pd.api.types.is_datetime64_any_dtype(df["game_date"])
    # nearly every game should have exactly two team rows
    rows_per_game = df.groupby("game_id").size()
    assert (rows_per_game == 2).mean() > 0.95
