"""
Canonical column names shared by the loaders and the feature pipeline.

Statistic columns are enumerated explicitly so that feature selection never
depends on the provider's column order.
"""

from __future__ import annotations

# Identifier / outcome columns of a raw team box-score row
GAME_ID = "game_id"
SEASON = "season"
SEASON_TYPE = "season_type"
GAME_DATE = "game_date"
TEAM_ID = "team_id"
TEAM_LOCATION = "team_location"
TEAM_HOME_AWAY = "team_home_away"
TEAM_SCORE = "team_score"

ID_COLS: list[str] = [
    GAME_ID,
    SEASON,
    GAME_DATE,
    TEAM_ID,
    TEAM_LOCATION,
    TEAM_HOME_AWAY,
    TEAM_SCORE,
]

# Raw per-game counting statistics
BOX_SCORE_STATS: list[str] = [
    "field_goals_made",
    "field_goals_attempted",
    "three_point_field_goals_made",
    "three_point_field_goals_attempted",
    "free_throws_made",
    "free_throws_attempted",
    "offensive_rebounds",
    "defensive_rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
]

# Suffix for the opponent's raw stats attached to a team row
OPP_SUFFIX = "_opp"
# Prefix for prior (season-to-date, strictly earlier) averages
AVG_PREFIX = "avg_"
# Prefix for the other team's columns on the one-row-per-game table
OPPONENT_PREFIX = "opponent_"

GAME_NUMBER = "game_number"
HOME = "home"
MOV = "mov"

FOUR_FACTORS: list[str] = ["efg_pct", "tov_pct", "orb_pct", "ft_rate"]


def opp(col: str) -> str:
    """Name of the mirrored opponent column for a raw stat."""
    return f"{col}{OPP_SUFFIX}"


def avg(col: str) -> str:
    """Name of the prior-average column for a raw (or mirrored) stat."""
    return f"{AVG_PREFIX}{col}"


def opponent(col: str) -> str:
    """Name of the other team's copy of a column on the game-level table."""
    return f"{OPPONENT_PREFIX}{col}"


def mirrored_stats() -> list[str]:
    """Team stats followed by the opponent's mirrored stats."""
    return BOX_SCORE_STATS + [opp(c) for c in BOX_SCORE_STATS]


def prior_average_columns() -> list[str]:
    """All prior-average columns carried on a team row."""
    return [avg(c) for c in mirrored_stats()]


def four_factor_columns() -> list[str]:
    """Offensive four factors followed by the defensive (allowed) versions."""
    return FOUR_FACTORS + [opp(c) for c in FOUR_FACTORS]


def team_feature_columns() -> list[str]:
    """Prior averages and four factors for a single team row."""
    return prior_average_columns() + four_factor_columns()
