import numpy as np
import pandas as pd
import pytest

from hoops_predictor.data.columns import avg, mirrored_stats
from hoops_predictor.data.feature_engineering.four_factors import add_four_factors


def _averages(**overrides) -> pd.DataFrame:
    row = {avg(c): 10.0 for c in mirrored_stats()}
    row.update({avg(k): float(v) for k, v in overrides.items()})
    return pd.DataFrame([row])


def test_four_factor_formulas():
    df = _averages(
        field_goals_made=25,
        field_goals_attempted=55,
        three_point_field_goals_made=8,
        free_throws_made=14,
        free_throws_attempted=20,
        turnovers=12,
        offensive_rebounds=10,
        defensive_rebounds_opp=25,
    )

    out = add_four_factors(df).iloc[0]

    assert out["efg_pct"] == pytest.approx(100 * (25 + 0.5 * 8) / 55)
    assert out["tov_pct"] == pytest.approx(100 * 12 / (55 + 12 + 0.44 * 20))
    assert out["orb_pct"] == pytest.approx(100 * 10 / (10 + 25))
    assert out["ft_rate"] == pytest.approx(14 / 55)


def test_defensive_four_factors_use_opponent_averages():
    df = _averages(
        field_goals_made_opp=20,
        field_goals_attempted_opp=50,
        three_point_field_goals_made_opp=6,
        offensive_rebounds_opp=12,
        defensive_rebounds=28,
    )

    out = add_four_factors(df).iloc[0]

    assert out["efg_pct_opp"] == pytest.approx(100 * (20 + 0.5 * 6) / 50)
    assert out["orb_pct_opp"] == pytest.approx(100 * 12 / (12 + 28))


def test_zero_denominators_give_nan_not_errors():
    df = _averages(
        field_goals_attempted=0,
        turnovers=0,
        free_throws_attempted=0,
        offensive_rebounds=0,
        defensive_rebounds_opp=0,
    )

    out = add_four_factors(df).iloc[0]

    for col in ["efg_pct", "tov_pct", "orb_pct", "ft_rate"]:
        assert np.isnan(out[col]), col
        assert not np.isinf(out[col])


def test_missing_averages_propagate_as_nan():
    df = _averages()
    df[avg("field_goals_attempted")] = np.nan

    out = add_four_factors(df).iloc[0]

    assert np.isnan(out["efg_pct"])
    assert np.isnan(out["ft_rate"])
    # orb_pct does not depend on field goal attempts
    assert out["orb_pct"] == pytest.approx(50.0)
