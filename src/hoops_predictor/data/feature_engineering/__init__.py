"""
Feature engineering pipelines for the basketball margin model.

Responsibilities
----------------
- Take the base dataset (one row per team per game).
- Attach each team's opponent box score for the same game.
- Number each team's games within a season in date order.
- Add season-to-date averages of strictly earlier games, for the team's
  stats and for what its opponents did against it.
- Add offensive and defensive four factors from those averages.
- Drop early-season rows, then re-pair into one row per game with the
  margin of victory.

Usage example
-------------
    from hoops_predictor.data.feature_engineering.feature_builder import (
        FeatureBuilder,
        FeatureBuilderConfig,
    )

    fb_config = FeatureBuilderConfig(first_season=2023, last_season=2024)
    builder = FeatureBuilder(fb_config)
    games_df = builder.build_features()
"""

# Intentionally keep this file light to avoid circular imports.
# Import concrete modules where you need them, e.g.:
#
#   from hoops_predictor.data.feature_engineering.feature_builder import FeatureBuilder
#
# rather than relying on this package to re-export everything.
