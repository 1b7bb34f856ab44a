"""
hoops_predictor

Box-score feature engineering and margin-of-victory regression for basketball.

Structure:
- data: loading, preprocessing, feature engineering
- models: regression fitting and shared scaling helpers
- evaluation: train/test splits and error metrics
"""

__all__ = ["config"]
