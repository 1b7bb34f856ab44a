import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

# Base directory for the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def seasons_between(first_season: int, last_season: int) -> List[int]:
    """Inclusive list of seasons from first_season to last_season."""
    if last_season < first_season:
        raise ValueError(
            f"last_season ({last_season}) must not precede first_season ({first_season})."
        )
    return list(range(int(first_season), int(last_season) + 1))


@dataclass(frozen=True)
class DataConfig:
    """Data storage paths and defaults."""

    raw_data_dir: Path = PROJECT_ROOT / "data" / "raw"
    processed_data_dir: Path = PROJECT_ROOT / "data" / "processed"
    features_dir: Path = PROJECT_ROOT / "data" / "features"

    # Inclusive season bounds; provider seasons are labelled by end year
    first_season: int = 2022
    last_season: int = 2024
    default_seasons: Optional[List[int]] = None

    # sportsdataverse league key: "mbb", "wbb" or "nba"
    league: str = "mbb"
    games_csv_name: str = "games.csv"

    def __post_init__(self):
        if self.default_seasons is None:
            object.__setattr__(
                self,
                "default_seasons",
                seasons_between(self.first_season, self.last_season),
            )

    @property
    def games_csv(self) -> Path:
        return self.features_dir / self.games_csv_name


@dataclass(frozen=True)
class ModelConfig:
    """Model artifact storage and fitting defaults."""

    models_dir: Path = PROJECT_ROOT / "models"
    train_fraction: float = 0.75
    random_seed: int = 42
    cv_folds: int = 5


@dataclass(frozen=True)
class LogConfig:
    """Logging defaults."""

    logs_dir: Path = PROJECT_ROOT / "logs"
    level: int = logging.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Global config instances
DATA_CONFIG = DataConfig()
MODEL_CONFIG = ModelConfig()
LOG_CONFIG = LogConfig()


def configure_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logging for scripts.

    Library modules only create module-level loggers; entry points call this
    once. If log_file is given, output is also written to LOG_CONFIG.logs_dir.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        LOG_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(LOG_CONFIG.logs_dir / log_file))

    logging.basicConfig(
        level=level if level is not None else LOG_CONFIG.level,
        format=LOG_CONFIG.format,
        handlers=handlers,
    )
