from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from hoops_predictor.config import DATA_CONFIG, seasons_between
from hoops_predictor.data.columns import GAME_DATE, GAME_ID, MOV, TEAM_ID, opponent
from hoops_predictor.data.preprocessing.base_dataset import (
    BaseDatasetConfig,
    build_base_dataset,
)
from hoops_predictor.data.feature_engineering.team_stats_pipeline import (
    TeamStatsConfig,
    build_game_level_features,
    build_team_features,
)

logger = logging.getLogger(__name__)

REQUIRED_GAME_COLUMNS = [GAME_ID, GAME_DATE, TEAM_ID, opponent(TEAM_ID), MOV]


@dataclass
class FeatureBuilderConfig:
    """
    Configuration for the high-level feature builder.

    Attributes
    ----------
    first_season, last_season:
        Inclusive season bounds. If either is None, DATA_CONFIG.default_seasons
        is used.
    league:
        sportsdataverse league key ("mbb", "wbb" or "nba").
    include_postseason:
        Whether postseason games are kept in the base dataset.
    min_games_played:
        Minimum-history threshold; team rows with game_number <= this are
        dropped before re-pairing.
    recent_form_windows:
        Optional last-N-games rolling windows (empty disables them).
    save_csv:
        If True, write the game table to `output_path`.
    output_path:
        Destination of the game table. Defaults to DATA_CONFIG.games_csv.
    save_intermediate:
        If True, save team-level and game-level feature parquet files.
    """

    first_season: int | None = None
    last_season: int | None = None
    league: str = DATA_CONFIG.league
    include_postseason: bool = True
    min_games_played: int = 15
    recent_form_windows: tuple[int, ...] = ()
    save_csv: bool = True
    output_path: Path | None = None
    save_intermediate: bool = False

    def resolved_seasons(self) -> list[int]:
        if self.first_season is None or self.last_season is None:
            return list(DATA_CONFIG.default_seasons or [])
        return seasons_between(self.first_season, self.last_season)


class FeatureBuilder:
    """
    End-to-end orchestration for building the modelling table.

    Typical usage
    -------------
        config = FeatureBuilderConfig(first_season=2022, last_season=2024)
        builder = FeatureBuilder(config)
        games_df = builder.build_features()

    This will:
        - Build the base box-score dataset (one row per team per game).
        - Build leak-free team features (prior averages, four factors).
        - Re-pair into one row per game with margin of victory.
        - Write games.csv.
    """

    def __init__(self, config: FeatureBuilderConfig | None = None) -> None:
        if config is None:
            config = FeatureBuilderConfig()
        self.config = config

    # ------------------------------------------------------------------
    # Helper configuration builders
    # ------------------------------------------------------------------
    def _make_base_config(self) -> BaseDatasetConfig:
        return BaseDatasetConfig(
            seasons=self.config.resolved_seasons(),
            league=self.config.league,
            include_postseason=self.config.include_postseason,
            save_parquet=False,
        )

    def _make_team_config(self) -> TeamStatsConfig:
        return TeamStatsConfig(
            seasons=self.config.resolved_seasons(),
            min_games_played=self.config.min_games_played,
            recent_form_windows=self.config.recent_form_windows,
            save_team_level=self.config.save_intermediate,
            save_game_level=self.config.save_intermediate,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def build_base(self, raw: pd.DataFrame | None = None) -> pd.DataFrame:
        """Build the base box-score dataset, loading from the provider if `raw` is None."""
        return build_base_dataset(self._make_base_config(), raw=raw)

    def build_team_features(self, base: pd.DataFrame | None = None) -> pd.DataFrame:
        """
        Build team-game level features (up to two rows per game).

        Parameters
        ----------
        base:
            Optional pre-built base dataset. If None, it is built first.
        """
        if base is None:
            base = self.build_base()
        return build_team_features(base, config=self._make_team_config())

    def build_features(self, base: pd.DataFrame | None = None) -> pd.DataFrame:
        """
        Build the full game-level modelling table.

        Returns
        -------
        pd.DataFrame
            One row per game (see `build_game_level_features`). Written to
            `output_path` when `save_csv` is set.
        """
        if base is None:
            base = self.build_base()

        team_config = self._make_team_config()
        team_df = build_team_features(base, config=team_config)
        games = build_game_level_features(team_df, config=team_config)

        if self.config.save_csv:
            save_games_table(games, self.config.output_path)

        return games


def save_games_table(games: pd.DataFrame, path: Path | None = None) -> Path:
    """Write the game table as CSV with a header row and no index."""
    if path is None:
        path = DATA_CONFIG.games_csv
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    games.to_csv(path, index=False)
    logger.info("Wrote %d games to %s", len(games), path)
    return path


def load_games_table(path: Path | None = None) -> pd.DataFrame:
    """
    Load a previously written game table.

    Raises:
        FileNotFoundError: If the file hasn't been built yet
        ValueError: If required columns are missing
    """
    if path is None:
        path = DATA_CONFIG.games_csv
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Game table not found: {path}\n"
            "Run FeatureBuilder.build_features() first."
        )

    games = pd.read_csv(path, parse_dates=[GAME_DATE])

    missing = [c for c in REQUIRED_GAME_COLUMNS if c not in games.columns]
    if missing:
        raise ValueError(f"Loaded game table missing required columns: {missing}")

    return games
