import pytest

from core.significance import (
    approximate_confidence, chi_square_test, classify_experiment, confidence_interval,
    decide_action, lift, pooled_standard_error, z_score
)


def test_lift():
    """Test relative change and the zero-control guard."""
    assert lift(0.08, 0.092) == pytest.approx(0.15)
    assert lift(0.10, 0.09) == pytest.approx(-0.1)
    assert lift(0, 0.05) == 0.0


def test_z_score_from_pooled_error():
    """Test the two-proportion z-score."""
    se = pooled_standard_error(800, 10000, 920, 10000)
    assert se == pytest.approx(0.003965, rel=1e-3)
    assert z_score(0.08, 0.092, se) == pytest.approx(3.03, rel=1e-2)
    assert z_score(0.08, 0.092, 0) == 0.0
    assert pooled_standard_error(0, 0, 10, 100) == 0.0


@pytest.mark.parametrize("z,expected", [
    (0.5, 0.90),
    (1.7, 0.95),
    (-1.7, 0.95),
    (2.0, 0.99),
    (3.5, 0.999),
])
def test_approximate_confidence_buckets(z, expected):
    """Test the bucketed confidence lookup uses the magnitude of z."""
    assert approximate_confidence(z) == expected


def test_chi_square_significant_difference():
    """Test a clear conversion difference."""
    result = chi_square_test({"views": 1000, "conversions": 100}, {"views": 1000, "conversions": 150})

    assert result["chi_square"] == 10.0
    assert result["p_value"] == 0.01
    assert result["confidence"] == 99.0
    assert result["significant"] is True


def test_chi_square_no_difference():
    """Test identical arms are not significant."""
    result = chi_square_test({"views": 1000, "conversions": 100}, {"views": 1000, "conversions": 100})

    assert result["chi_square"] == 0.0
    assert result["p_value"] == 0.1
    assert result["significant"] is False


def test_chi_square_without_traffic():
    """Test the degenerate case of no views or conversions."""
    result = chi_square_test({"views": 0, "conversions": 0}, {"views": 0, "conversions": 0})
    assert result == {"chi_square": 0.0, "p_value": 0.1, "confidence": 90.0, "significant": False}


def test_confidence_interval():
    """Test the normal-approximation interval in percent."""
    assert confidence_interval(50, 1000) == {"lower": 3.65, "upper": 6.35, "rate": 5.0}
    assert confidence_interval(0, 0) == {"lower": 0.0, "upper": 0.0, "rate": 0.0}


@pytest.mark.parametrize("lift_value,significant,expected", [
    (0.12, True, "winner"),
    (-0.08, True, "loser"),
    (0.03, True, "neutral"),
    (-0.05, True, "neutral"),
    (0.20, False, "inconclusive"),
])
def test_classify_experiment(lift_value, significant, expected):
    """Test buckets from lift and significance."""
    assert classify_experiment(lift_value, significant) == expected


@pytest.mark.parametrize("outcome,days,expected", [
    ("winner", 8, "SCALE"),
    ("loser", 8, "STOP"),
    ("neutral", 8, "NEUTRAL"),
    ("inconclusive", 13, "CONTINUE"),
    ("inconclusive", 14, "STOP"),
])
def test_decide_action(outcome, days, expected):
    """Test actions, including stopping tests that ran out of time."""
    assert decide_action(outcome, days) == expected
