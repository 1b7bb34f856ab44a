"""
Quick Feature Engineering Check

Run this script to build games.csv from the configured season range and
print a few sanity checks.

Example:
    python run_feature_check.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure src/ is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from hoops_predictor.config import DATA_CONFIG, configure_logging  # noqa: E402
from hoops_predictor.data.feature_engineering.feature_builder import (  # noqa: E402
    FeatureBuilder,
    FeatureBuilderConfig,
)


def main() -> None:
    configure_logging(log_file="feature_check.log")
    print("▶ Running feature engineering check...\n")

    cfg = FeatureBuilderConfig(
        first_season=DATA_CONFIG.first_season,
        last_season=DATA_CONFIG.last_season,
        min_games_played=15,
        save_csv=True,
    )

    builder = FeatureBuilder(cfg)

    try:
        games_df = builder.build_features()
    except Exception as exc:  # pragma: no cover - manual inspection script
        print("\n❌ ERROR while building features:\n")
        print(type(exc).__name__, ":", str(exc))
        return

    print("✅ Features built successfully.")
    print(f"Seasons: {cfg.first_season}–{cfg.last_season}")
    print(f"Shape: {games_df.shape[0]} rows x {games_df.shape[1]} columns")
    print(f"Written to: {DATA_CONFIG.games_csv}\n")

    assert games_df["game_id"].is_unique, "game_id should be unique per row."
    assert (games_df["game_number"] > cfg.min_games_played).all()
    assert (games_df["opponent_game_number"] > cfg.min_games_played).all()
    assert (games_df["team_id"] > games_df["opponent_team_id"]).all()

    interesting_cols = [
        "game_id",
        "game_date",
        "team_location",
        "opponent_team_location",
        "home",
        "mov",
        "efg_pct",
        "opponent_efg_pct",
        "tov_pct",
        "opponent_tov_pct",
        "orb_pct",
        "opponent_orb_pct",
        "ft_rate",
        "opponent_ft_rate",
    ]

    print("--- Sample of key feature columns ---")
    print(games_df[interesting_cols].head(10).to_string())

    print("\nDone.")


if __name__ == "__main__":
    main()
