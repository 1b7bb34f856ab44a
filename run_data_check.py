"""
Quick Data Load Check

Run this script to verify that the team box-score loader works correctly.

Example:
    python run_data_check.py
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from hoops_predictor.config import DATA_CONFIG, configure_logging  # noqa: E402
from hoops_predictor.data.loaders.box_scores import (  # noqa: E402
    TeamBoxScoreLoader,
    TeamBoxScoreLoaderConfig,
)


def main():
    configure_logging()
    print("=== Hoops Predictor: Data Load Check ===")

    seasons = DATA_CONFIG.default_seasons[-1:]
    print(f"Loading {DATA_CONFIG.league} seasons: {seasons}")

    try:
        loader = TeamBoxScoreLoader(
            TeamBoxScoreLoaderConfig(
                seasons=seasons,
                save_parquet=False,
            )
        )

        df = loader.load()

        print("\n--- Loaded Data Summary ---")
        print(f"Team rows loaded: {len(df)}")
        print(f"Distinct games: {df['game_id'].nunique()}")
        print(f"Columns: {list(df.columns)}\n")

        print("--- Head (first 10 rows) ---")
        print(df.head(10).to_string())

        print("\n--- Rows per game ---")
        print(df.groupby("game_id").size().value_counts())

        print("\nSuccess! Data loaded correctly.")

    except Exception as e:
        print("\nERROR: Something went wrong while loading data.\n")
        print(type(e).__name__, ":", str(e))


if __name__ == "__main__":
    main()
