#!/usr/bin/env python3
"""
A/B experiment monitor.

Simulates traffic for live experiments, buckets them with the significance
helpers and produces a monitoring report with scaling plans for winners.
"""

import json
import logging
import random
from collections import Counter
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Any, List, Optional, Callable, Union

from core.exceptions import ReportReadError
from core.models.experiments import Experiment, VariantStats, ExperimentMetrics, ExperimentResult
from core.significance import (
    MAX_DURATION_DAYS, lift, pooled_standard_error, z_score, approximate_confidence,
    chi_square_test, confidence_interval, classify_experiment, decide_action
)

logger = logging.getLogger(__name__)

DAILY_IMPRESSIONS = 10000
BASELINE_CONVERSION = 0.08
REVENUE_PER_CONVERSION = 50
MIN_SIGNIFICANT_DAYS = 7
SIGNIFICANT_CONFIDENCE = 0.95

# Used when no experiments file is configured; deployment age in days
BUILTIN_EXPERIMENTS = [
    {
        'experiment_id': 'exp-hero-social-proof',
        'name': 'Hero social proof',
        'page': 'productivity.html',
        'levers': ['social_proof', 'hero_copy'],
        'expected_lift': '+15%',
        'days_live': 12
    },
    {
        'experiment_id': 'exp-sticky-cta',
        'name': 'Sticky mobile CTA',
        'page': 'writers.html',
        'levers': ['cta_placement', 'mobile_ux'],
        'expected_lift': '+10%',
        'days_live': 14
    },
    {
        'experiment_id': 'exp-urgency-banner',
        'name': 'Urgency banner',
        'page': 'valentines.html',
        'levers': ['urgency', 'scarcity'],
        'expected_lift': '-8%',
        'days_live': 10
    },
    {
        'experiment_id': 'exp-comparison-table',
        'name': 'Simplified comparison table',
        'page': 'comparison.html',
        'levers': ['clarity', 'social_proof'],
        'expected_lift': '+2%',
        'days_live': 5
    }
]

SCALING_PHASES = [
    {'phase': 1, 'traffic': '75%', 'duration': '2 days', 'monitor': 'Closely'},
    {'phase': 2, 'traffic': '90%', 'duration': '2 days', 'monitor': 'Closely'},
    {'phase': 3, 'traffic': '100%', 'duration': 'Ongoing', 'monitor': 'Standard'}
]


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return (value - value.utcoffset()).replace(tzinfo=None)


def load_experiments(path: Optional[Union[str, Path]] = None,
                     now: Optional[datetime] = None) -> List[Experiment]:
    """
    Load live experiment definitions.

    Args:
        path: JSON file holding a list of experiments (or {"experiments": [...]});
            the built-in list is used when None
        now: Reference time for built-in deployment dates

    Raises:
        FileNotFoundError: If the file does not exist
        ReportReadError: If the file is not valid JSON
    """
    now = now or datetime.now()

    if path is None:
        records = []
        for item in BUILTIN_EXPERIMENTS:
            record = dict(item)
            record['deployed_at'] = now - timedelta(days=record.pop('days_live'))
            records.append(record)
    else:
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ReportReadError(str(path), e)
        records = data.get('experiments', []) if isinstance(data, dict) else data

    experiments = [Experiment.from_dict(record) for record in records]
    live = [e for e in experiments if e.status == 'live']
    logger.info(f"Loaded {len(experiments)} experiments, {len(live)} live")
    return live


def scaling_plan(result: ExperimentResult) -> Dict[str, Any]:
    """Gradual rollout plan for a winning experiment."""
    return {
        'experiment_id': result.experiment.experiment_id,
        'page': result.experiment.page,
        'approach': 'Gradual rollout to 100% traffic',
        'timeline': '7 days',
        'phases': [dict(phase) for phase in SCALING_PHASES],
        'monitoring': 'Daily for first week, weekly thereafter',
        'rollback': {
            'trigger': 'Conversion rate drops below baseline',
            'steps': ['Pause traffic to variant', 'Revert to control version',
                      'Investigate issue', 'Fix and re-test'],
            'timeline': 'Immediate (< 1 hour)'
        }
    }


class ExperimentMonitor:
    """Evaluates live experiments and builds the monitoring report."""

    def __init__(self, experiments: List[Experiment], seed: Optional[int] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.experiments = experiments
        self.clock = clock or datetime.now
        self._rng = random.Random(seed)

    def simulate_metrics(self, experiment: Experiment, now: Optional[datetime] = None) -> ExperimentMetrics:
        """Fabricate control/variant traffic for an experiment's runtime so far."""
        now = now or self.clock()
        elapsed = _naive_utc(now) - _naive_utc(experiment.deployed_at)
        duration = max(0, min(elapsed.days, MAX_DURATION_DAYS))

        daily_impressions = DAILY_IMPRESSIONS * (1 + self._rng.random() * 0.2)
        arm_impressions = int(daily_impressions * duration * 0.5)

        actual_lift = experiment.expected_lift * (0.8 + self._rng.random() * 0.4)
        variant_rate = BASELINE_CONVERSION * (1 + actual_lift)

        control = VariantStats(arm_impressions, int(arm_impressions * BASELINE_CONVERSION))
        variant = VariantStats(arm_impressions, int(arm_impressions * variant_rate))

        se = pooled_standard_error(control.conversions, control.impressions,
                                   variant.conversions, variant.impressions)
        z = z_score(BASELINE_CONVERSION, variant_rate, se)
        confidence = approximate_confidence(z)
        significant = confidence >= SIGNIFICANT_CONFIDENCE and duration >= MIN_SIGNIFICANT_DAYS

        if duration > 0:
            daily_revenue = int((variant.conversions - control.conversions) / duration * REVENUE_PER_CONVERSION)
        else:
            daily_revenue = 0

        return ExperimentMetrics(
            duration_days=duration,
            control=control,
            variant=variant,
            lift=lift(BASELINE_CONVERSION, variant_rate),
            z_score=z,
            confidence=confidence,
            is_significant=significant,
            daily_revenue=daily_revenue,
            annual_revenue=daily_revenue * 365
        )

    def evaluate(self, experiment: Experiment, metrics: ExperimentMetrics) -> ExperimentResult:
        """Bucket an experiment and decide what to do with it."""
        outcome = classify_experiment(metrics.lift, metrics.is_significant)
        action = decide_action(outcome, metrics.duration_days)

        if outcome == 'winner':
            learning = f"Winning levers: {', '.join(experiment.levers)}"
        elif outcome == 'loser':
            learning = f"These levers didn't work for {experiment.page}"
        elif outcome == 'neutral':
            learning = 'No significant impact'
        elif action == 'STOP':
            learning = f'Insufficient data after {MAX_DURATION_DAYS} days'
        else:
            learning = f'Collecting data ({MAX_DURATION_DAYS - metrics.duration_days} days left)'

        control = {'views': metrics.control.impressions, 'conversions': metrics.control.conversions}
        variant = {'views': metrics.variant.impressions, 'conversions': metrics.variant.conversions}

        result = ExperimentResult(
            experiment=experiment,
            metrics=metrics,
            outcome=outcome,
            recommendation=action,
            learning=learning,
            chi_square=chi_square_test(control, variant),
            intervals={
                'control': confidence_interval(control['conversions'], control['views']),
                'variant': confidence_interval(variant['conversions'], variant['views'])
            }
        )
        if outcome == 'winner':
            result.scaling_plan = scaling_plan(result)
        return result

    @staticmethod
    def generate_insights(results: List[ExperimentResult]) -> List[str]:
        winners = [r for r in results if r.outcome == 'winner']
        losers = [r for r in results if r.outcome == 'loser']
        insights = []

        if winners:
            average_lift = sum(r.metrics.lift for r in winners) / len(winners)
            insights.append(f"Average lift from winning experiments: +{average_lift * 100:.2f}%")
            total_revenue = sum(r.metrics.annual_revenue for r in winners)
            insights.append(f"Total annual revenue from winners: ${total_revenue:,}")

        if losers:
            insights.append(f"{len(losers)} experiments underperformed - review learnings")

        lever_counts = Counter(lever for r in winners for lever in r.experiment.levers)
        top_levers = [lever for lever, _ in lever_counts.most_common(3)]
        if top_levers:
            insights.append(f"Most successful levers: {', '.join(top_levers)}")

        return insights

    def run(self) -> Dict[str, Any]:
        """Evaluate every experiment and assemble the report."""
        now = self.clock()
        results = []
        for experiment in self.experiments:
            metrics = self.simulate_metrics(experiment, now)
            result = self.evaluate(experiment, metrics)
            logger.info(
                f"{experiment.experiment_id}: {result.outcome} "
                f"(lift {metrics.lift * 100:+.2f}%, confidence {metrics.confidence:.3f})"
            )
            results.append(result)

        def bucket(name):
            return [r.to_dict() for r in results if r.outcome == name]

        running = [r.to_dict() for r in results if not r.metrics.is_significant]

        return {
            'generated': now.isoformat(),
            'summary': {
                'total': len(results),
                'winners': sum(1 for r in results if r.outcome == 'winner'),
                'losers': sum(1 for r in results if r.outcome == 'loser'),
                'neutral': sum(1 for r in results if r.outcome == 'neutral'),
                'running': len(running),
                'stopped_inconclusive': sum(
                    1 for r in results if r.outcome == 'inconclusive' and r.recommendation == 'STOP'
                ),
                'winner_annual_revenue': sum(r.metrics.annual_revenue for r in results if r.outcome == 'winner')
            },
            'winners': bucket('winner'),
            'losers': bucket('loser'),
            'neutral': bucket('neutral'),
            'running': running,
            'insights': self.generate_insights(results),
            'scaling_plans': [r.scaling_plan for r in results if r.scaling_plan]
        }
