from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from hoops_predictor.config import DATA_CONFIG
from hoops_predictor.data.columns import (
    BOX_SCORE_STATS,
    GAME_DATE,
    ID_COLS,
    SEASON_TYPE,
    TEAM_HOME_AWAY,
    TEAM_SCORE,
)

try:
    from sportsdataverse import mbb, nba, wbb
except ImportError as e:
    raise ImportError(
        "sportsdataverse is required for the team box-score loader.\n"
        "Install with `pip install sportsdataverse` or add it to pyproject.toml."
    ) from e

logger = logging.getLogger(__name__)

# league key -> (sportsdataverse module, loader function name)
_LEAGUE_LOADERS = {
    "mbb": (mbb, "load_mbb_team_boxscore"),
    "wbb": (wbb, "load_wbb_team_boxscore"),
    "nba": (nba, "load_nba_team_boxscore"),
}

# ESPN season_type code; 3 is postseason
REGULAR_SEASON = 2


@dataclass
class TeamBoxScoreLoaderConfig:
    """
    Configuration for the team box-score loader.

    Attributes:
        seasons: Seasons to load. If None, DATA_CONFIG.default_seasons is used.
        league: sportsdataverse league key ("mbb", "wbb" or "nba").
        include_postseason: If False, keep regular-season games only.
        save_parquet: If True, saves the standardized frame to data/raw/.
    """

    seasons: Sequence[int] | None = None
    league: str = DATA_CONFIG.league
    include_postseason: bool = True
    save_parquet: bool = False

    def resolved_seasons(self) -> list[int]:
        if self.seasons is None:
            return list(DATA_CONFIG.default_seasons or [])
        return [int(s) for s in self.seasons]


class TeamBoxScoreLoader:
    """
    Load raw per-team-per-game box scores from sportsdataverse.

    - One row per (game, team)
    - Identifiers: game_id, season, game_date, team_id, team_location
    - Outcome: team_score, team_home_away
    - Counting stats listed in BOX_SCORE_STATS

    sportsdataverse returns Polars frames; they are converted with
    `.to_pandas()` so the rest of the pipeline only sees pandas.
    """

    def __init__(self, config: TeamBoxScoreLoaderConfig | None = None) -> None:
        if config is None:
            config = TeamBoxScoreLoaderConfig()
        self.config = config

    def load(self) -> pd.DataFrame:
        """
        Load and standardize team box scores for the configured seasons.

        Returns:
            A DataFrame with ID_COLS + BOX_SCORE_STATS (+ season_type when the
            provider supplies it). game_date is datetime64, team_home_away is
            lower-case.
        """
        seasons = self.config.resolved_seasons()
        raw = self._load_raw(seasons)
        box = self._standardize(raw)

        if not self.config.include_postseason and SEASON_TYPE in box.columns:
            before = len(box)
            box = box[box[SEASON_TYPE] == REGULAR_SEASON].copy()
            logger.info("Dropped %d postseason rows", before - len(box))

        logger.info(
            "Loaded %d team box-score rows (%s, seasons %s-%s)",
            len(box),
            self.config.league,
            min(seasons),
            max(seasons),
        )

        if self.config.save_parquet:
            DATA_CONFIG.raw_data_dir.mkdir(parents=True, exist_ok=True)
            path = (
                DATA_CONFIG.raw_data_dir
                / f"{self.config.league}_team_box_{min(seasons)}_{max(seasons)}.parquet"
            )
            box.to_parquet(path, index=False)
            logger.info("Saved raw box scores to %s", path)

        return box

    def _load_raw(self, seasons: list[int]) -> pd.DataFrame:
        if not seasons:
            raise ValueError("At least one season must be provided to TeamBoxScoreLoader.")

        league = self.config.league
        if league not in _LEAGUE_LOADERS:
            raise ValueError(
                f"Unsupported league '{league}'. Supported: {sorted(_LEAGUE_LOADERS)}"
            )

        module, func_name = _LEAGUE_LOADERS[league]
        load_fn = getattr(module, func_name)
        frame = load_fn(seasons=seasons)

        if isinstance(frame, pd.DataFrame):
            return frame
        try:
            return frame.to_pandas()
        except AttributeError as e:
            raise TypeError(
                f"sportsdataverse.{func_name} did not return a Polars or pandas DataFrame. "
                "Check the sportsdataverse version and docs."
            ) from e

    @staticmethod
    def _standardize(raw: pd.DataFrame) -> pd.DataFrame:
        """Select the canonical columns and coerce their dtypes."""
        required = ID_COLS + BOX_SCORE_STATS
        missing = [c for c in required if c not in raw.columns]
        if missing:
            raise KeyError(f"Missing required columns in team box scores: {missing}")

        keep = required + ([SEASON_TYPE] if SEASON_TYPE in raw.columns else [])
        df = raw[keep].copy()

        df[GAME_DATE] = pd.to_datetime(df[GAME_DATE])
        df[TEAM_HOME_AWAY] = df[TEAM_HOME_AWAY].astype(str).str.lower()
        for col in [TEAM_SCORE] + BOX_SCORE_STATS:
            df[col] = pd.to_numeric(df[col], errors="coerce")

        return df
