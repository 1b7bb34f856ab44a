"""
Quick Model Fitting Check

Run this after run_feature_check.py. Loads games.csv, fits the baseline,
full-feature and cross-validated lasso regressions for margin of victory,
and prints RMSE on the training and testing partitions.

Example:
    python run_model_check.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure src/ is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import pandas as pd  # noqa: E402

from hoops_predictor.config import MODEL_CONFIG, configure_logging  # noqa: E402
from hoops_predictor.data.feature_engineering.feature_builder import (  # noqa: E402
    load_games_table,
)
from hoops_predictor.models.mov_regression import (  # noqa: E402
    ModelFitter,
    ModelFitterConfig,
)


def main() -> None:
    configure_logging(log_file="model_check.log")
    print("▶ Running model fitting check...\n")

    try:
        games = load_games_table()
    except FileNotFoundError as exc:
        print(f"❌ {exc}")
        return

    cfg = ModelFitterConfig(
        train_fraction=MODEL_CONFIG.train_fraction,
        random_seed=MODEL_CONFIG.random_seed,
        cv_folds=MODEL_CONFIG.cv_folds,
        save_models=True,
    )
    result = ModelFitter(cfg).fit(games)

    with pd.option_context("display.float_format", "{:.4f}".format):
        print("--- Model summary ---")
        print(result.summary().to_string())

        print("\n--- Baseline OLS coefficients ---")
        print(f"intercept: {result.baseline.intercept:.4f}")
        print(result.baseline.coefficients.to_string())

        print(f"\n--- Lasso (alpha={result.lasso.alpha:.4f}) non-zero coefficients ---")
        coefs = result.lasso.coefficients
        print(coefs[coefs != 0.0].sort_values(key=abs, ascending=False).to_string())
        print(f"\nShrunk to zero: {len(result.lasso.zeroed_features)} of {len(coefs)}")

    print("\nDone.")


if __name__ == "__main__":
    main()
