#!/usr/bin/env python3
"""
Lightweight statistics for A/B experiments.

These are deliberately coarse lookups (bucketed confidence and p-values),
not a rigorous hypothesis-testing library.
"""

import math
from typing import Dict, Any

# Minimum absolute lift for a significant result to count as a winner or loser
MIN_EFFECT = 0.05

# Inconclusive tests are stopped once they have run this long
MAX_DURATION_DAYS = 14


def lift(control_rate: float, variant_rate: float) -> float:
    """Relative change of the variant over the control; 0 when control is 0."""
    if control_rate == 0:
        return 0.0
    return (variant_rate - control_rate) / control_rate


def pooled_standard_error(control_conversions: int, control_impressions: int,
                          variant_conversions: int, variant_impressions: int) -> float:
    if control_impressions <= 0 or variant_impressions <= 0:
        return 0.0
    pooled = (control_conversions + variant_conversions) / (control_impressions + variant_impressions)
    return math.sqrt(pooled * (1 - pooled) * (1 / control_impressions + 1 / variant_impressions))


def z_score(control_rate: float, variant_rate: float, standard_error: float) -> float:
    if standard_error <= 0:
        return 0.0
    return (variant_rate - control_rate) / standard_error


def approximate_confidence(z: float) -> float:
    """
    Map a z-score onto a confidence bucket.

    The buckets are shifted one step up from the textbook two-sided values:
    |z| just under 1.96 already reports 0.95.
    """
    z = abs(z)
    if z < 1.645:
        return 0.90
    if z < 1.96:
        return 0.95
    if z < 2.576:
        return 0.99
    return 0.999


def chi_square_test(control: Dict[str, int], variant: Dict[str, int]) -> Dict[str, Any]:
    """
    2x2 chi-square test on conversions vs. views.

    Args:
        control: {'views': int, 'conversions': int}
        variant: {'views': int, 'conversions': int}

    Returns:
        Dict with chi_square, bucketed p_value, confidence (percent) and significant
    """
    total_views = control['views'] + variant['views']
    total_conversions = control['conversions'] + variant['conversions']

    if total_views <= 0 or total_conversions <= 0:
        return {'chi_square': 0.0, 'p_value': 0.1, 'confidence': 90.0, 'significant': False}

    control_expected = control['views'] / total_views * total_conversions
    variant_expected = variant['views'] / total_views * total_conversions

    chi_square = 0.0
    if control_expected > 0:
        chi_square += (control['conversions'] - control_expected) ** 2 / control_expected
    if variant_expected > 0:
        chi_square += (variant['conversions'] - variant_expected) ** 2 / variant_expected

    # df = 1 critical values for p = 0.001, 0.01, 0.05
    if chi_square > 10.828:
        p_value = 0.001
    elif chi_square > 6.635:
        p_value = 0.01
    elif chi_square > 3.841:
        p_value = 0.05
    else:
        p_value = 0.1

    return {
        'chi_square': round(chi_square, 2),
        'p_value': p_value,
        'confidence': round((1 - p_value) * 100, 1),
        'significant': chi_square > 3.841
    }


def confidence_interval(conversions: int, views: int, level: float = 0.95) -> Dict[str, float]:
    """Normal-approximation interval for a conversion rate, in percent."""
    if views <= 0:
        return {'lower': 0.0, 'upper': 0.0, 'rate': 0.0}

    rate = conversions / views
    z = 1.96 if level == 0.95 else 2.576
    margin = z * math.sqrt(rate * (1 - rate) / views)

    return {
        'lower': round((rate - margin) * 100, 2),
        'upper': round((rate + margin) * 100, 2),
        'rate': round(rate * 100, 2)
    }


def classify_experiment(lift_value: float, significant: bool) -> str:
    """Bucket an experiment as winner, loser, neutral or inconclusive."""
    if not significant:
        return 'inconclusive'
    if lift_value > MIN_EFFECT:
        return 'winner'
    if lift_value < -MIN_EFFECT:
        return 'loser'
    return 'neutral'


def decide_action(outcome: str, duration_days: int) -> str:
    """Turn an experiment bucket into SCALE, STOP, NEUTRAL or CONTINUE."""
    if outcome == 'winner':
        return 'SCALE'
    if outcome == 'loser':
        return 'STOP'
    if outcome == 'neutral':
        return 'NEUTRAL'
    if duration_days >= MAX_DURATION_DAYS:
        return 'STOP'
    return 'CONTINUE'
