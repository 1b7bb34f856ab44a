"""
Team-level and game-level feature engineering.

This module assumes that:
- The input `box_scores` DataFrame is produced by
  `hoops_predictor.data.preprocessing.base_dataset.build_base_dataset`
  (one row per team per game, completed games only).
- Game pairing has NOT been validated yet; games that do not have exactly
  two distinct participants are dropped here.

Every feature produced for a game uses only that team's strictly earlier
games in the same season.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from hoops_predictor.config import DATA_CONFIG
from hoops_predictor.data.columns import (
    BOX_SCORE_STATS,
    GAME_DATE,
    GAME_ID,
    GAME_NUMBER,
    HOME,
    ID_COLS,
    MOV,
    SEASON,
    TEAM_HOME_AWAY,
    TEAM_ID,
    TEAM_LOCATION,
    TEAM_SCORE,
    AVG_PREFIX,
    mirrored_stats,
    opp,
    opponent,
    team_feature_columns,
)

from .four_factors import add_four_factors
from .rolling_features import RollingSpec, add_prior_averages, add_rolling_features

logger = logging.getLogger(__name__)


@dataclass
class TeamStatsConfig:
    """
    Configuration for building team-level and game-level features.

    Attributes
    ----------
    seasons:
        Seasons the features were built for; only used to name saved files.
        If None, defaults to DATA_CONFIG.default_seasons.
    min_games_played:
        Team rows with game_number <= this threshold are dropped, so every
        retained average is based on at least this many games.
    recent_form_windows:
        Optional rolling window sizes (in games) for last-N-games means of the
        raw box-score stats. Empty disables them.
    save_team_level:
        If True, save team-game features to DATA_CONFIG.features_dir.
    save_game_level:
        If True, save game-level features to DATA_CONFIG.features_dir.
    """

    seasons: list[int] | None = None
    min_games_played: int = 15
    recent_form_windows: tuple[int, ...] = ()
    save_team_level: bool = False
    save_game_level: bool = False

    def resolved_seasons(self) -> list[int]:
        return list(self.seasons or DATA_CONFIG.default_seasons or [])


def _complete_pairs(df: pd.DataFrame) -> pd.Series:
    """Mask of rows whose game has exactly two rows with distinct team ids."""
    counts = df.groupby(GAME_ID)[TEAM_ID].agg(["size", "nunique"])
    good = counts.index[(counts["size"] == 2) & (counts["nunique"] == 2)]
    return df[GAME_ID].isin(good)


def _partner_rows(df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """
    For each row, the `cols` values of the other row of the same game.

    `df` must contain exactly two rows per game. Sorting by (game_id,
    team_id) places each pair at positions 2k and 2k+1, so the partner of
    position i is i ^ 1. Result is aligned to `df.index`.
    """
    ordered = df.sort_values([GAME_ID, TEAM_ID], kind="mergesort")
    partner_pos = np.arange(len(ordered)) ^ 1
    partner = ordered[cols].iloc[partner_pos]
    partner.index = ordered.index
    return partner.loc[df.index]


def attach_opponent_stats(box_scores: pd.DataFrame) -> pd.DataFrame:
    """
    Attach the opponent's raw stats to each team row.

    Adds `team_id_opp` and `<stat>_opp` for every stat in BOX_SCORE_STATS.
    Games without exactly two distinct participants (missing opponent,
    duplicated team row, self-match, more than two rows) are dropped.
    """
    df = box_scores.reset_index(drop=True)

    mask = _complete_pairs(df)
    n_bad = df.loc[~mask, GAME_ID].nunique()
    if n_bad:
        logger.warning(
            "Excluding %d games without exactly two distinct teams (%d rows)",
            n_bad,
            int((~mask).sum()),
        )
    valid = df[mask].copy()

    cols = [TEAM_ID] + BOX_SCORE_STATS
    partner = _partner_rows(valid, cols).rename(columns={c: opp(c) for c in cols})

    return pd.concat([valid, partner], axis=1)


def add_game_numbers(df: pd.DataFrame) -> pd.DataFrame:
    """
    Order rows chronologically and number each team's games within a season.

    Rows are sorted by game_date, then game_id, then team_id, so the order
    does not depend on how the input was arranged. game_number runs 1..k per
    (season, team_id). Output is in chronological order with a fresh index.
    """
    for col in [SEASON, TEAM_ID, GAME_DATE, GAME_ID]:
        if col not in df.columns:
            raise KeyError(f"Column '{col}' required for game numbering.")

    ordered = df.sort_values([GAME_DATE, GAME_ID, TEAM_ID], kind="mergesort")
    ordered = ordered.reset_index(drop=True)
    ordered[GAME_NUMBER] = ordered.groupby([SEASON, TEAM_ID], sort=False).cumcount() + 1
    return ordered


def _recent_form_columns(config: TeamStatsConfig) -> list[str]:
    return [
        f"{stat}_rolling_mean_{window}"
        for stat in BOX_SCORE_STATS
        for window in config.recent_form_windows
    ]


def _add_recent_form(team_df: pd.DataFrame, config: TeamStatsConfig) -> pd.DataFrame:
    specs = [
        RollingSpec(col=stat, windows=config.recent_form_windows, stats=("mean",))
        for stat in BOX_SCORE_STATS
    ]
    return add_rolling_features(
        team_df,
        group_cols=[SEASON, TEAM_ID],
        time_col=GAME_NUMBER,
        specs=specs,
    )


def projected_team_columns(config: TeamStatsConfig | None = None) -> list[str]:
    """Columns kept on a team row after projection, in output order."""
    if config is None:
        config = TeamStatsConfig()
    return ID_COLS + [GAME_NUMBER] + team_feature_columns() + _recent_form_columns(config)


def build_team_features(
    box_scores: pd.DataFrame,
    config: TeamStatsConfig | None = None,
) -> pd.DataFrame:
    """
    Build leak-free team-game features from base box scores.

    Steps:
        1. Attach opponent raw stats (`_opp` columns).
        2. Chronological ordering and per-season game numbers.
        3. Prior averages (`avg_` columns) of team and opponent stats.
        4. Optional recent-form rolling means.
        5. Offensive and defensive four factors.
        6. Drop rows with game_number <= config.min_games_played.
        7. Project to identifiers, outcome, prior averages and rates.

    Returns
    -------
    pd.DataFrame
        One row per (game, team) that survived the history filter. Raw
        per-game stats are not included.
    """
    if config is None:
        config = TeamStatsConfig()

    paired = attach_opponent_stats(box_scores)
    team_df = add_game_numbers(paired)

    team_df = add_prior_averages(
        team_df,
        group_cols=[SEASON, TEAM_ID],
        time_col=GAME_NUMBER,
        cols=mirrored_stats(),
        prefix=AVG_PREFIX,
    )

    if config.recent_form_windows:
        team_df = _add_recent_form(team_df, config)

    team_df = add_four_factors(team_df)

    before = len(team_df)
    team_df = team_df[team_df[GAME_NUMBER] > config.min_games_played]
    logger.info(
        "Minimum-history filter (game_number > %d) kept %d of %d team rows",
        config.min_games_played,
        len(team_df),
        before,
    )

    team_df = team_df[projected_team_columns(config)].reset_index(drop=True)

    if config.save_team_level:
        seasons = config.resolved_seasons()
        out_path = DATA_CONFIG.features_dir / f"team_features_{min(seasons)}_{max(seasons)}.parquet"
        out_path.parent.mkdir(parents=True, exist_ok=True)
        team_df.to_parquet(out_path, index=False)

    return team_df


def build_game_level_features(
    team_df: pd.DataFrame,
    config: TeamStatsConfig | None = None,
) -> pd.DataFrame:
    """
    Re-pair team rows into a single-row-per-game modelling table.

    Each team row gets the other participant's projected columns with an
    `opponent_` prefix. Only the row whose team_id is larger than the
    opponent's is kept, and margin of victory is computed from that side.
    Games where a participant was removed by the history filter are
    excluded.

    Returns
    -------
    pd.DataFrame
        One row per game with:
            - identifiers (game_id, season, game_date, both team ids/locations)
            - home (1 if the kept team was at home) and mov
            - team and opponent_ prior averages / four factors
    """
    if config is None:
        config = TeamStatsConfig()

    shared = [GAME_ID, SEASON, GAME_DATE]
    side_cols = [c for c in team_df.columns if c not in shared]

    df = team_df.reset_index(drop=True)
    mask = _complete_pairs(df)
    n_dropped = df.loc[~mask, GAME_ID].nunique()
    if n_dropped:
        logger.info("Excluding %d games missing one side after filtering", n_dropped)
    valid = df[mask].copy()

    partner = _partner_rows(valid, side_cols).rename(
        columns={c: opponent(c) for c in side_cols}
    )
    game_df = pd.concat([valid, partner], axis=1)
    game_df = game_df[game_df[TEAM_ID] > game_df[opponent(TEAM_ID)]].copy()

    game_df[HOME] = (game_df[TEAM_HOME_AWAY] == "home").astype(int)
    game_df[MOV] = game_df[TEAM_SCORE] - game_df[opponent(TEAM_SCORE)]

    id_cols = [
        GAME_ID,
        SEASON,
        GAME_DATE,
        TEAM_ID,
        TEAM_LOCATION,
        TEAM_HOME_AWAY,
        HOME,
        TEAM_SCORE,
        GAME_NUMBER,
        opponent(TEAM_ID),
        opponent(TEAM_LOCATION),
        opponent(TEAM_SCORE),
        opponent(GAME_NUMBER),
        MOV,
    ]
    feature_cols = [c for c in side_cols if c not in id_cols]
    feature_cols += [opponent(c) for c in feature_cols]

    game_df = (
        game_df[id_cols + feature_cols]
        .sort_values([GAME_DATE, GAME_ID], kind="mergesort")
        .reset_index(drop=True)
    )
    logger.info("Game-level table: %d games", len(game_df))

    if config.save_game_level:
        seasons = config.resolved_seasons()
        out_path = DATA_CONFIG.features_dir / f"game_features_{min(seasons)}_{max(seasons)}.parquet"
        out_path.parent.mkdir(parents=True, exist_ok=True)
        game_df.to_parquet(out_path, index=False)

    return game_df
