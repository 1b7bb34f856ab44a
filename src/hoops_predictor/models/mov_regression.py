"""
Margin-of-victory regression on the game-level feature table.

Three models are fit on the same train/test partition:

- baseline_ols: ordinary least squares on both teams' four factors plus the
  home indicator.
- full_ols: ordinary least squares on every prior-average and four-factor
  column of both teams. Usually shows a wider train/test gap.
- lasso_cv: L1-penalized regression on the same full feature set,
  standardized on the training partition, with the penalty chosen by
  k-fold cross-validation on the training partition only.

RMSE is reported on both partitions; similar values indicate a model that
generalizes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import joblib
import pandas as pd
from sklearn.linear_model import LassoCV, LinearRegression
from sklearn.model_selection import KFold
from sklearn.preprocessing import StandardScaler

from hoops_predictor.config import MODEL_CONFIG
from hoops_predictor.data.columns import (
    FOUR_FACTORS,
    HOME,
    MOV,
    opponent,
    team_feature_columns,
)
from hoops_predictor.evaluation.metrics import rmse
from hoops_predictor.evaluation.splits import split_by_season, split_random
from hoops_predictor.models.shared.scaling import standardize

logger = logging.getLogger(__name__)


def baseline_feature_columns() -> list[str]:
    """Four factors of both teams plus the home indicator."""
    return FOUR_FACTORS + [opponent(c) for c in FOUR_FACTORS] + [HOME]


def full_feature_columns() -> list[str]:
    """Every prior-average and four-factor column of both teams."""
    team_cols = team_feature_columns()
    return team_cols + [opponent(c) for c in team_cols]


@dataclass
class RegressionReport:
    """Coefficients and partition errors for one fitted model."""

    name: str
    features: list[str]
    intercept: float
    coefficients: pd.Series
    rmse_train: float
    rmse_test: float
    n_train: int
    n_test: int
    alpha: float | None = None

    @property
    def generalization_gap(self) -> float:
        """Test RMSE minus train RMSE; large positive values signal overfitting."""
        return self.rmse_test - self.rmse_train

    @property
    def zeroed_features(self) -> list[str]:
        return self.coefficients.index[self.coefficients == 0.0].tolist()


@dataclass
class ModelFitterConfig:
    """
    Configuration for fitting the margin-of-victory models.

    Attributes
    ----------
    train_fraction:
        Share of rows drawn into the training partition.
    random_seed:
        Seed for the partition draw and the cross-validation folds.
    cv_folds:
        Number of folds used by LassoCV to pick the penalty.
    target:
        Column to predict.
    baseline_features, full_features:
        Feature lists. None uses `baseline_feature_columns()` /
        `full_feature_columns()`.
    holdout_seasons:
        If given, test on these seasons and train on all others instead of
        drawing a random partition.
    save_models:
        If True, dump fitted estimators and the scaler with joblib.
    models_dir:
        Directory the joblib file is written to when `save_models` is set.
    """

    train_fraction: float = MODEL_CONFIG.train_fraction
    random_seed: int = MODEL_CONFIG.random_seed
    cv_folds: int = MODEL_CONFIG.cv_folds
    target: str = MOV
    baseline_features: list[str] | None = None
    full_features: list[str] | None = None
    holdout_seasons: list[int] | None = None
    save_models: bool = False
    models_dir: Path = MODEL_CONFIG.models_dir


@dataclass
class ModelFitResult:
    baseline: RegressionReport
    full_linear: RegressionReport
    lasso: RegressionReport
    estimators: dict = field(default_factory=dict, repr=False)

    def reports(self) -> list[RegressionReport]:
        return [self.baseline, self.full_linear, self.lasso]

    def summary(self) -> pd.DataFrame:
        """One row per model: feature count, alpha, RMSE on each partition and the gap."""
        return pd.DataFrame(
            [
                {
                    "model": r.name,
                    "n_features": len(r.features),
                    "n_nonzero": int((r.coefficients != 0.0).sum()),
                    "alpha": r.alpha,
                    "rmse_train": r.rmse_train,
                    "rmse_test": r.rmse_test,
                    "gap": r.generalization_gap,
                }
                for r in self.reports()
            ]
        ).set_index("model")


def fit_ols(
    train: pd.DataFrame,
    test: pd.DataFrame,
    features: list[str],
    target: str = MOV,
    name: str = "ols",
) -> tuple[LinearRegression, RegressionReport]:
    """Fit ordinary least squares on `train` and score both partitions."""
    model = LinearRegression()
    model.fit(train[features], train[target])

    report = RegressionReport(
        name=name,
        features=list(features),
        intercept=float(model.intercept_),
        coefficients=pd.Series(model.coef_, index=features),
        rmse_train=rmse(train[target], model.predict(train[features])),
        rmse_test=rmse(test[target], model.predict(test[features])),
        n_train=len(train),
        n_test=len(test),
    )
    return model, report


def fit_lasso_cv(
    train: pd.DataFrame,
    test: pd.DataFrame,
    features: list[str],
    target: str = MOV,
    folds: int = 5,
    seed: int = 42,
    name: str = "lasso_cv",
) -> tuple[LassoCV, StandardScaler, RegressionReport]:
    """
    Fit a cross-validated lasso on standardized features.

    Features are z-scored with training-partition statistics; the penalty is
    chosen by `folds`-fold cross-validation over the training partition.
    Coefficients are reported on the standardized scale.

    Returns:
        (model, scaler, report)
    """
    train_x, test_x, scaler = standardize(train, test, features)

    model = LassoCV(
        cv=KFold(n_splits=folds, shuffle=True, random_state=seed),
        random_state=seed,
        max_iter=10000,
    )
    model.fit(train_x, train[target])

    report = RegressionReport(
        name=name,
        features=list(features),
        intercept=float(model.intercept_),
        coefficients=pd.Series(model.coef_, index=features),
        rmse_train=rmse(train[target], model.predict(train_x)),
        rmse_test=rmse(test[target], model.predict(test_x)),
        n_train=len(train),
        n_test=len(test),
        alpha=float(model.alpha_),
    )
    return model, scaler, report


class ModelFitter:
    """
    Split the game table and fit the baseline, full and lasso models.

    Typical usage
    -------------
        games = load_games_table()
        result = ModelFitter().fit(games)
        print(result.summary())
    """

    def __init__(self, config: ModelFitterConfig | None = None) -> None:
        if config is None:
            config = ModelFitterConfig()
        self.config = config

    @property
    def baseline_features(self) -> list[str]:
        return list(self.config.baseline_features or baseline_feature_columns())

    @property
    def full_features(self) -> list[str]:
        return list(self.config.full_features or full_feature_columns())

    def prepare(self, games: pd.DataFrame) -> pd.DataFrame:
        """Drop rows missing the target or any feature used by either feature set."""
        needed = list(dict.fromkeys(self.baseline_features + self.full_features + [self.config.target]))
        missing = [c for c in needed if c not in games.columns]
        if missing:
            raise KeyError(f"Game table is missing model columns: {missing}")

        complete = games.dropna(subset=needed)
        dropped = len(games) - len(complete)
        if dropped:
            logger.warning("Dropping %d games with missing feature values", dropped)
        if complete.empty:
            raise ValueError("No complete rows left to fit models on.")
        return complete

    def split(self, games: pd.DataFrame) -> tuple[pd.DataFrame, pd.DataFrame]:
        cfg = self.config
        if cfg.holdout_seasons:
            return split_by_season(games, cfg.holdout_seasons)
        return split_random(games, train_fraction=cfg.train_fraction, seed=cfg.random_seed)

    def fit(self, games: pd.DataFrame) -> ModelFitResult:
        cfg = self.config
        data = self.prepare(games)
        train, test = self.split(data)
        logger.info("Fitting on %d training and %d testing games", len(train), len(test))

        baseline_model, baseline = fit_ols(
            train, test, self.baseline_features, cfg.target, name="baseline_ols"
        )
        full_model, full_linear = fit_ols(
            train, test, self.full_features, cfg.target, name="full_ols"
        )
        lasso_model, scaler, lasso = fit_lasso_cv(
            train,
            test,
            self.full_features,
            cfg.target,
            folds=cfg.cv_folds,
            seed=cfg.random_seed,
        )

        for report in (baseline, full_linear, lasso):
            logger.info(
                "%s: RMSE train=%.3f test=%.3f (gap %.3f)",
                report.name,
                report.rmse_train,
                report.rmse_test,
                report.generalization_gap,
            )
        logger.info(
            "lasso_cv: alpha=%.4f, %d of %d coefficients shrunk to zero",
            lasso.alpha,
            len(lasso.zeroed_features),
            len(lasso.features),
        )

        result = ModelFitResult(
            baseline=baseline,
            full_linear=full_linear,
            lasso=lasso,
            estimators={
                "baseline_ols": baseline_model,
                "full_ols": full_model,
                "lasso_cv": lasso_model,
                "scaler": scaler,
            },
        )

        if cfg.save_models:
            save_models(result, cfg.models_dir)

        return result


def save_models(result: ModelFitResult, models_dir: Path | None = None) -> Path:
    """Dump fitted estimators, the scaler and feature lists with joblib."""
    if models_dir is None:
        models_dir = MODEL_CONFIG.models_dir
    models_dir = Path(models_dir)
    models_dir.mkdir(parents=True, exist_ok=True)

    path = models_dir / "mov_models.joblib"
    joblib.dump(
        {
            "estimators": result.estimators,
            "features": {r.name: r.features for r in result.reports()},
        },
        path,
    )
    logger.info("Saved models to %s", path)
    return path


def load_models(path: Path | None = None) -> dict:
    if path is None:
        path = MODEL_CONFIG.models_dir / "mov_models.joblib"
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Saved models not found: {path}")
    return joblib.load(path)
