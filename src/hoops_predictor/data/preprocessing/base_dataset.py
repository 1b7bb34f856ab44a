from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd

from hoops_predictor.config import DATA_CONFIG
from hoops_predictor.data.columns import (
    BOX_SCORE_STATS,
    GAME_DATE,
    GAME_ID,
    ID_COLS,
    SEASON,
    TEAM_ID,
    TEAM_SCORE,
)

logger = logging.getLogger(__name__)


@dataclass
class BaseDatasetConfig:
    """
    Configuration for building the base team box-score dataset.

    This dataset is the cleaned, chronologically ordered table that feature
    engineering builds on.

    Attributes:
        seasons: List of seasons to include in the dataset.
        league: sportsdataverse league key.
        include_postseason: Whether postseason games are kept.
        save_parquet: If True, save the resulting dataset to data/processed/.
        filename: Optional custom filename for the saved dataset.
    """

    seasons: List[int]
    league: str = DATA_CONFIG.league
    include_postseason: bool = True
    save_parquet: bool = False
    filename: Optional[str] = None


def _validate_raw_box_scores(df: pd.DataFrame, seasons: List[int]) -> None:
    """Basic validation for raw team box-score rows."""
    if df is None or len(df) == 0:
        raise ValueError(f"No box scores loaded for seasons {seasons}")

    required_cols = ID_COLS + BOX_SCORE_STATS
    missing = [c for c in required_cols if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns in raw box scores: {missing}")

    if not pd.api.types.is_datetime64_any_dtype(df[GAME_DATE]):
        raise TypeError(
            f"Column '{GAME_DATE}' must be datetime64; got dtype {df[GAME_DATE].dtype}"
        )


def build_base_dataset(
    config: Optional[BaseDatasetConfig] = None,
    raw: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    Build the base team box-score dataset.

    Steps:
        1. Load raw rows via TeamBoxScoreLoader (unless `raw` is given).
        2. Validate structure (columns, dtypes).
        3. Keep completed rows (identifiers and score present).
        4. Sort chronologically by game_date, then game_id, then team_id.
        5. Optionally save to data/processed.

    Returns:
        One row per (game, team) with ID_COLS and BOX_SCORE_STATS, in
        chronological order with a fresh 0..N-1 index.
        Game pairing is not validated here; see
        `team_stats_pipeline.attach_opponent_stats`.
    """
    if config is None:
        config = BaseDatasetConfig(seasons=DATA_CONFIG.default_seasons)

    # 1. Load raw rows (do NOT re-save raw parquet here)
    if raw is None:
        from hoops_predictor.data.loaders.box_scores import (
            TeamBoxScoreLoader,
            TeamBoxScoreLoaderConfig,
        )

        loader = TeamBoxScoreLoader(
            TeamBoxScoreLoaderConfig(
                seasons=config.seasons,
                league=config.league,
                include_postseason=config.include_postseason,
                save_parquet=False,
            )
        )
        raw = loader.load()

    # 2. Validate structure
    _validate_raw_box_scores(raw, config.seasons)

    df = raw[raw[SEASON].isin(config.seasons)].copy()

    # 3. Completed rows only
    complete_mask = (
        df[GAME_ID].notnull()
        & df[TEAM_ID].notnull()
        & df[GAME_DATE].notnull()
        & df[TEAM_SCORE].notnull()
    )
    dropped = int((~complete_mask).sum())
    if dropped:
        logger.warning("Dropping %d incomplete box-score rows", dropped)
    completed = df[complete_mask].copy()
    if completed.empty:
        raise ValueError(f"No completed games found for seasons {config.seasons}")

    # 4. Stable chronological order
    completed = completed.sort_values(
        [GAME_DATE, GAME_ID, TEAM_ID], kind="mergesort"
    ).reset_index(drop=True)

    logger.info(
        "Base dataset: %d rows, %d games, seasons %s",
        len(completed),
        completed[GAME_ID].nunique(),
        sorted(completed[SEASON].unique().tolist()),
    )

    # 5. Optionally save to processed/ as a parquet file
    if config.save_parquet:
        DATA_CONFIG.processed_data_dir.mkdir(parents=True, exist_ok=True)
        filename = config.filename or (
            f"base_box_{config.league}_{min(config.seasons)}_{max(config.seasons)}.parquet"
        )
        out_path = DATA_CONFIG.processed_data_dir / filename
        completed.to_parquet(out_path, index=False)

    return completed


def load_base_dataset(
    start_season: int,
    end_season: int,
    league: str = DATA_CONFIG.league,
    processed_dir: Optional[Path] = None,
) -> pd.DataFrame:
    """
    Load a previously built base dataset from parquet.

    Raises:
        FileNotFoundError: If dataset hasn't been built yet
        ValueError: If required columns are missing
    """
    if processed_dir is None:
        processed_dir = DATA_CONFIG.processed_data_dir

    filepath = processed_dir / f"base_box_{league}_{start_season}_{end_season}.parquet"

    if not filepath.exists():
        raise FileNotFoundError(
            f"Base dataset not found: {filepath}\n"
            f"Run build_base_dataset() first with seasons {start_season}-{end_season}."
        )

    df = pd.read_parquet(filepath)

    missing = [c for c in ID_COLS if c not in df.columns]
    if missing:
        raise ValueError(f"Loaded dataset missing required columns: {missing}")

    return df
