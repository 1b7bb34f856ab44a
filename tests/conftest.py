import numpy as np
import pandas as pd
import pytest

from hoops_predictor.data.columns import BOX_SCORE_STATS


def box_line(game_id, game_date, team_id, home_away, score, season=2024, **stats) -> dict:
    """One raw team box-score row; unspecified stats default to 10."""
    row = {
        "game_id": game_id,
        "season": season,
        "game_date": pd.Timestamp(game_date),
        "team_id": team_id,
        "team_location": f"Team {team_id}",
        "team_home_away": home_away,
        "team_score": score,
    }
    for stat in BOX_SCORE_STATS:
        row[stat] = stats.get(stat, 10)
    return row


def _team_line(rng, game_id, season, day, team, side, strength) -> dict:
    fga = int(rng.integers(50, 66))
    fgm = int(rng.binomial(fga, float(np.clip(0.43 + 0.01 * strength, 0.3, 0.56))))
    fg3a = int(rng.integers(14, 26))
    fg3m = min(int(rng.binomial(fg3a, 0.34)), fgm)
    fta = int(rng.integers(10, 26))
    ftm = int(rng.binomial(fta, 0.7))
    stats = {
        "field_goals_made": fgm,
        "field_goals_attempted": fga,
        "three_point_field_goals_made": fg3m,
        "three_point_field_goals_attempted": fg3a,
        "free_throws_made": ftm,
        "free_throws_attempted": fta,
        "offensive_rebounds": int(rng.integers(6, 15)),
        "defensive_rebounds": int(rng.integers(18, 31)),
        "assists": int(rng.integers(8, 20)),
        "steals": int(rng.integers(3, 11)),
        "blocks": int(rng.integers(1, 8)),
        "turnovers": int(rng.integers(7, 17)),
    }
    score = 2 * fgm + fg3m + ftm
    return box_line(game_id, day, team, side, score, season=season, **stats)


def _make_box_scores(
    n_teams: int = 6,
    n_rounds: int = 20,
    season: int = 2024,
    start: str = "2023-11-06",
    seed: int = 0,
) -> pd.DataFrame:
    """
    Synthetic round-robin season: every team plays once per round, every
    other day, so each team's game_number equals the round number.
    """
    rng = np.random.default_rng(seed)
    teams = list(range(101, 101 + n_teams))
    strength = {t: rng.normal(0.0, 3.0) for t in teams}

    rows = []
    game_id = season * 10000
    rotation = teams[1:]
    for r in range(n_rounds):
        order = [teams[0]] + rotation
        day = pd.Timestamp(start) + pd.Timedelta(days=2 * r)
        for k in range(n_teams // 2):
            home, away = order[k], order[-1 - k]
            if r % 2:
                home, away = away, home
            game_id += 1
            for team, side in ((home, "home"), (away, "away")):
                rows.append(_team_line(rng, game_id, season, day, team, side, strength[team]))
        rotation = rotation[-1:] + rotation[:-1]

    return pd.DataFrame(rows)


@pytest.fixture
def make_box_scores():
    """Factory for synthetic round-robin box scores (no live API calls)."""
    return _make_box_scores


@pytest.fixture
def box_scores() -> pd.DataFrame:
    """Six teams, twenty games each, one season."""
    return _make_box_scores(n_teams=6, n_rounds=20)


@pytest.fixture
def two_season_box_scores() -> pd.DataFrame:
    return pd.concat(
        [
            _make_box_scores(n_teams=6, n_rounds=20, season=2023, start="2022-11-07", seed=1),
            _make_box_scores(n_teams=6, n_rounds=20, season=2024, start="2023-11-06", seed=2),
        ],
        ignore_index=True,
    )


@pytest.fixture
def mock_provider_box() -> pd.DataFrame:
    """Provider-shaped team box scores, including columns the loader drops."""
    rows = [
        box_line(401, "2024-01-02", 10, "home", 70, turnovers=11),
        box_line(401, "2024-01-02", 20, "away", 65, turnovers=9),
        box_line(402, "2024-03-20", 10, "away", 60),
        box_line(402, "2024-03-20", 30, "home", 62),
    ]
    df = pd.DataFrame(rows)
    df["game_date"] = df["game_date"].dt.strftime("%Y-%m-%d")
    df["team_home_away"] = df["team_home_away"].str.title()
    df["season_type"] = [2, 2, 3, 3]
    df["team_name"] = ["Hawks", "Owls", "Hawks", "Bears"]
    df["team_winner"] = [True, False, False, True]
    return df
