#!/usr/bin/env python3
"""
Iteration strategy optimizer.

Reads the history of optimization iterations, measures how velocity,
effectiveness and ROI are trending, estimates how saturated the pages are and
recommends how often, how broadly and on what the next iterations should work.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from dateutil import parser as date_parser

from core.exceptions import ReportReadError
from core.models.strategy import IterationRecord, UXPage, UXSnapshot, PatternStats, StrategyInput

logger = logging.getLogger(__name__)

TREND_CHANGE = 0.2
HOURS_PER_CHANGE = 0.1
DEFAULT_QUALITY_PER_ITERATION = 170

FREQUENCY_MULTIPLIERS = {'weekly': 2.0, 'bi-weekly': 1.0, 'monthly': 0.5}
SCOPE_MULTIPLIERS = {'small': 0.7, 'medium': 1.0, 'large': 1.3}
FOCUS_MULTIPLIERS = {'low_performers': 1.5, 'proven_patterns': 1.3, 'high_impact': 1.2, 'balanced': 1.0}

BASELINE_STRATEGY = {
    'frequency': 'bi-weekly',
    'scope': 'medium',
    'focus': 'balanced',
    'confidence': 'moderate'
}


def change_rate(previous: float, current: float) -> Optional[float]:
    """Relative change between two values, None when the previous value is zero."""
    if not previous:
        return None
    return (current - previous) / previous


def detect_trend(values: List[float], rising: str, falling: str) -> str:
    """Label the last step of a series using the +/-20% rule."""
    if len(values) < 2:
        return 'stable'
    rate = change_rate(values[-2], values[-1])
    if rate is None:
        return 'stable'
    if rate > TREND_CHANGE:
        return rising
    if rate < -TREND_CHANGE:
        return falling
    return 'stable'


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _read_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ReportReadError(str(path), e)


def load_strategy_input(reports_dir: Union[str, Path]) -> StrategyInput:
    """
    Load iteration, UX and pattern history from a reports directory.

    Expects ``<reports_dir>/iterations`` to exist; ``ux-analysis`` and
    ``iterations/iteration-tracking.json`` are optional.

    Pilot and scaling reports carrying an ``iteration`` field count toward that
    iteration only; reports without one count toward every iteration.

    Raises:
        FileNotFoundError: If the iterations directory is missing
        ReportReadError: If any input file is not valid JSON
    """
    reports_dir = Path(reports_dir)
    iterations_dir = reports_dir / 'iterations'
    if not iterations_dir.is_dir():
        raise FileNotFoundError(f"Iterations directory not found: {iterations_dir}")

    change_reports = []
    for path in sorted(iterations_dir.glob('pilot-implementation-*.json')):
        data = _read_json(path)
        changes = sum(item.get('changesApplied', 0) for item in data.get('implementations', []))
        change_reports.append((data.get('iteration'), changes))
    for path in sorted(iterations_dir.glob('pattern-scaling-*.json')):
        data = _read_json(path)
        changes = sum(item.get('changesApplied', 0) for item in data.get('results', []))
        change_reports.append((data.get('iteration'), changes))

    iterations = []
    for path in sorted(iterations_dir.glob('lessons-learned-iteration-*.json')):
        data = _read_json(path)
        number = data.get('iteration', 0)
        summary = data.get('executiveSummary', {})
        changes = sum(c for it, c in change_reports if it is None or it == number)
        iterations.append(IterationRecord(
            iteration=number,
            date=data.get('timestamp', ''),
            pilot_pages=summary.get('pilotPages', 0) or 0,
            pages_scaled=summary.get('pagesScaled', 0) or 0,
            changes_applied=changes,
            quality_points_gained=summary.get('totalImprovementPoints', 0) or 0,
            patterns=list(data.get('successfulPatterns', []) or [])
        ))
    iterations.sort(key=lambda record: record.iteration)

    patterns = []
    history_records = 0
    tracking_file = iterations_dir / 'iteration-tracking.json'
    if tracking_file.exists():
        tracking = _read_json(tracking_file)
        history_records = len(tracking.get('history', []))
        for name, stats in tracking.get('metrics', {}).get('successfulPatterns', {}).items():
            patterns.append(PatternStats(
                name=name,
                count=int(stats.get('count', 0)),
                average_improvement=float(stats.get('averageImprovement', 0)),
                total_improvement=float(stats.get('totalImprovement', 0))
            ))
    else:
        logger.warning(f"No tracking history found at {tracking_file}")

    snapshots = []
    ux_dir = reports_dir / 'ux-analysis'
    if ux_dir.is_dir():
        for path in sorted(ux_dir.glob('ux-analysis-*.json')):
            data = _read_json(path)
            pages = []
            for name, page in (data.get('engagementAnalysis') or {}).items():
                metrics = page.get('metrics', {})
                pages.append(UXPage(
                    name=name,
                    quality_score=float(page.get('qualityScore', 0)),
                    conversion_rate=float(metrics.get('conversionRate', 0)),
                    bounce_rate=float(metrics.get('bounceRate', 0)),
                    grade=page.get('grade')
                ))
            snapshots.append(UXSnapshot(date=data.get('timestamp', ''), pages=pages,
                                        summary=data.get('summary') or {}))
        snapshots.sort(key=lambda s: date_parser.parse(s.date) if s.date else date_parser.parse('1970-01-01'))
    else:
        logger.warning(f"No UX data directory found at {ux_dir}")

    logger.info(
        f"Loaded {len(iterations)} iterations, {len(snapshots)} UX snapshots, {len(patterns)} patterns"
    )
    return StrategyInput(iterations=iterations, ux_snapshots=snapshots,
                         patterns=patterns, history_records=history_records)


def analyze_velocity(iterations: List[IterationRecord]) -> Dict[str, Any]:
    if not iterations:
        return {'status': 'insufficient_data'}

    velocities = [{
        'iteration': it.iteration,
        'date': it.date,
        'pages_improved': it.pages_improved,
        'changes_applied': it.changes_applied,
        'quality_gained': it.quality_points_gained,
        'changes_per_page': round(it.changes_applied / it.pages_improved, 2) if it.pages_improved else 0
    } for it in iterations]

    avg_changes = _average([v['changes_applied'] for v in velocities])
    trend = detect_trend([v['changes_applied'] for v in velocities], 'accelerating', 'decelerating')

    if trend == 'accelerating':
        recommendation = {'status': 'positive', 'action': 'maintain_pace',
                          'message': 'Velocity is increasing. Continue current approach.'}
    elif trend == 'decelerating':
        recommendation = {'status': 'warning', 'action': 'investigate',
                          'message': 'Velocity is decreasing. Review bottlenecks and consider smaller iteration scopes.'}
    elif avg_changes > 50:
        recommendation = {'status': 'neutral', 'action': 'maintain',
                          'message': 'Velocity is stable and healthy.'}
    else:
        recommendation = {'status': 'neutral', 'action': 'increase',
                          'message': 'Velocity is stable but could be increased with more aggressive improvements.'}

    return {
        'velocities': velocities,
        'averages': {
            'pages_per_iteration': round(_average([v['pages_improved'] for v in velocities]), 1),
            'changes_per_iteration': round(avg_changes, 1),
            'quality_per_iteration': round(_average([v['quality_gained'] for v in velocities]), 1)
        },
        'trend': trend,
        'recommendation': recommendation
    }


def analyze_effectiveness(iterations: List[IterationRecord]) -> Dict[str, Any]:
    if not iterations:
        return {'status': 'insufficient_data'}

    effectiveness = [{
        'iteration': it.iteration,
        'quality_per_change': round(it.quality_points_gained / it.changes_applied, 2) if it.changes_applied else 0,
        'quality_per_page': round(it.quality_points_gained / it.pages_improved, 2) if it.pages_improved else 0,
        'total_quality': it.quality_points_gained
    } for it in iterations]

    avg_per_change = _average([e['quality_per_change'] for e in effectiveness])
    trend = detect_trend([e['quality_per_change'] for e in effectiveness], 'improving', 'declining')

    if trend == 'improving':
        recommendation = {'status': 'excellent', 'action': 'scale_patterns',
                          'message': 'Effectiveness is improving. Scale successful patterns to more pages.'}
    elif trend == 'declining':
        recommendation = {'status': 'concern', 'action': 'refocus',
                          'message': 'Effectiveness is declining. Focus on high-impact changes and skip low-value optimizations.'}
    elif avg_per_change > 2.5:
        recommendation = {'status': 'good', 'action': 'maintain',
                          'message': 'Effectiveness is stable and strong.'}
    else:
        recommendation = {'status': 'good', 'action': 'optimize',
                          'message': 'Effectiveness is stable but could improve. Prioritize higher-impact patterns.'}

    return {
        'effectiveness': effectiveness,
        'averages': {
            'quality_per_change': round(avg_per_change, 2),
            'quality_per_page': round(_average([e['quality_per_page'] for e in effectiveness]), 2)
        },
        'trend': trend,
        'recommendation': recommendation
    }


def roi_efficiency(score: float) -> str:
    if score > 20:
        return 'excellent'
    if score > 10:
        return 'good'
    return 'needs_improvement'


def analyze_roi(iterations: List[IterationRecord]) -> Dict[str, Any]:
    """Quality points per estimated hour, assuming one hour per ten changes."""
    if not iterations:
        return {'status': 'insufficient_data'}

    roi = []
    for it in iterations:
        hours = it.changes_applied * HOURS_PER_CHANGE
        score = it.quality_points_gained / hours if hours > 0 else 0
        roi.append({
            'iteration': it.iteration,
            'estimated_hours': round(hours, 1),
            'quality_gained': round(it.quality_points_gained, 1),
            'roi_score': round(score, 2),
            'efficiency': roi_efficiency(score)
        })

    avg_roi = _average([r['roi_score'] for r in roi])
    total_hours = sum(r['estimated_hours'] for r in roi)
    total_quality = sum(r['quality_gained'] for r in roi)
    trend = detect_trend([r['roi_score'] for r in roi], 'improving', 'declining')

    if trend == 'improving':
        recommendation = {'status': 'excellent', 'action': 'accelerate',
                          'message': 'ROI is improving. Consider increasing iteration frequency.'}
    elif trend == 'declining':
        recommendation = {'status': 'warning', 'action': 'optimize',
                          'message': 'ROI is declining. Review process efficiency and focus on high-value changes.'}
    elif avg_roi > 15:
        recommendation = {'status': 'good', 'action': 'maintain', 'message': 'ROI is stable and healthy.'}
    else:
        recommendation = {'status': 'moderate', 'action': 'improve',
                          'message': 'ROI is stable but could improve. Streamline iteration process.'}

    return {
        'roi': roi,
        'summary': {
            'average_roi': round(avg_roi, 2),
            'total_hours': round(total_hours, 1),
            'total_quality': round(total_quality, 1),
            'overall_roi': round(total_quality / total_hours, 2) if total_hours else 0
        },
        'trend': trend,
        'recommendation': recommendation
    }


def analyze_saturation(snapshots: List[UXSnapshot]) -> Dict[str, Any]:
    """How close the latest UX snapshot is to the quality ceiling of 100."""
    if not snapshots:
        return {'status': 'insufficient_data'}

    latest = snapshots[-1]
    if not latest.pages:
        return {'status': 'no_page_data'}

    scores = [p.quality_score for p in latest.pages]
    avg_quality = _average(scores)
    high = sum(1 for s in scores if s >= 45)
    medium = sum(1 for s in scores if 35 <= s < 45)
    low = sum(1 for s in scores if s < 35)
    level = avg_quality / 100

    if level > 0.7:
        status, remaining = 'high', 'low'
        recommendation = {'status': 'mature', 'action': 'maintenance_mode',
                          'message': 'Pages are highly optimized. Shift to maintenance mode with occasional refinements.'}
    elif level > 0.5:
        status, remaining = 'medium', 'medium'
        recommendation = {'status': 'maturing', 'action': 'targeted_improvements',
                          'message': 'Focus on remaining low performers for maximum impact.'}
    else:
        status, remaining = 'early', 'high'
        if low / len(scores) * 100 > 25:
            recommendation = {'status': 'growth', 'action': 'aggressive_improvement',
                              'message': 'Significant improvement potential remains. Continue aggressive iteration.'}
        else:
            recommendation = {'status': 'growth', 'action': 'steady_improvement',
                              'message': 'Good progress. Continue steady iteration pace.'}

    return {
        'current_state': {
            'avg_quality': round(avg_quality, 1),
            'max_quality': max(scores),
            'min_quality': min(scores),
            'range': round(max(scores) - min(scores), 1)
        },
        'distribution': {'high': high, 'medium': medium, 'low': low, 'total': len(scores)},
        'saturation': {
            'level': round(level * 100, 1),
            'status': status,
            'potential_remaining': remaining
        },
        'recommendation': recommendation
    }


def analyze_patterns(patterns: List[PatternStats]) -> Dict[str, Any]:
    if not patterns:
        return {'status': 'insufficient_data'}

    analyzed = []
    for pattern in patterns:
        if pattern.count >= 3:
            maturity = 'proven'
            next_step = 'scale_aggressively' if pattern.average_improvement > 10 else 'scale_selectively'
        elif pattern.count >= 2:
            maturity, next_step = 'emerging', 'validate'
        else:
            maturity, next_step = 'new', 'test_more'

        analyzed.append({
            'name': pattern.name,
            'times_applied': pattern.count,
            'avg_improvement': round(pattern.average_improvement, 1),
            'total_impact': pattern.total_improvement,
            'maturity': maturity,
            'recommendation': next_step
        })
    analyzed.sort(key=lambda p: p['total_impact'], reverse=True)

    proven = sum(1 for p in analyzed if p['maturity'] == 'proven')
    if proven == 0:
        recommendation = {'status': 'early_stage', 'action': 'continue_testing',
                          'message': 'No proven patterns yet. Continue testing and validating approaches.'}
    elif proven >= 3:
        recommendation = {'status': 'mature', 'action': 'systematic_application',
                          'message': f'{proven} proven patterns identified. Systematically apply to all pages.'}
    else:
        recommendation = {'status': 'developing', 'action': 'validate_and_scale',
                          'message': f'{proven} proven pattern(s). Continue validating while scaling winners.'}

    return {
        'patterns': analyzed,
        'summary': {
            'total_patterns': len(analyzed),
            'proven_patterns': proven,
            'emerging_patterns': sum(1 for p in analyzed if p['maturity'] == 'emerging'),
            'new_patterns': sum(1 for p in analyzed if p['maturity'] == 'new')
        },
        'recommendation': recommendation
    }


def _signal(analysis: Dict[str, Any], default: str) -> str:
    return analysis.get('recommendation', {}).get('action', default)


def expected_impact(strategy: Dict[str, Any], quality_per_iteration: Optional[float]) -> Dict[str, Any]:
    """Project quality gains for a strategy from the historical per-iteration average."""
    base = DEFAULT_QUALITY_PER_ITERATION if quality_per_iteration is None else quality_per_iteration
    frequency = FREQUENCY_MULTIPLIERS.get(strategy['frequency'], 1.0)
    scope = SCOPE_MULTIPLIERS.get(strategy['scope'], 1.0)
    focus = FOCUS_MULTIPLIERS.get(strategy['focus'], 1.0)
    monthly = base * frequency * scope * focus

    return {
        'per_iteration': round(base * scope * focus, 1),
        'per_month': round(monthly, 1),
        'three_month': round(monthly * 3, 1),
        'six_month': round(monthly * 6, 1),
        'multipliers': {'frequency': frequency, 'scope': scope, 'focus': focus}
    }


def optimize_strategy(analysis: Dict[str, Dict[str, Any]], data_points: int) -> Dict[str, Any]:
    """Combine the trend signals into a recommended iteration strategy."""
    signals = {
        'velocity': _signal(analysis['velocity_trends'], 'maintain'),
        'effectiveness': _signal(analysis['effectiveness_trends'], 'maintain'),
        'roi': _signal(analysis['roi_trends'], 'maintain'),
        'saturation': _signal(analysis['saturation_analysis'], 'steady_improvement'),
        'patterns': _signal(analysis['pattern_evolution'], 'continue_testing')
    }

    if signals['roi'] == 'accelerate' and signals['saturation'] == 'aggressive_improvement':
        frequency = 'weekly'
    elif signals['saturation'] == 'maintenance_mode':
        frequency = 'monthly'
    else:
        frequency = 'bi-weekly'

    if signals['velocity'] == 'investigate':
        scope = 'small'
    elif signals['saturation'] == 'aggressive_improvement':
        scope = 'large'
    else:
        scope = 'medium'

    if signals['saturation'] == 'targeted_improvements':
        focus = 'low_performers'
    elif signals['patterns'] == 'scale_aggressively':
        focus = 'proven_patterns'
    elif signals['effectiveness'] == 'refocus':
        focus = 'high_impact'
    else:
        focus = 'balanced'

    if data_points >= 10:
        confidence = 'high'
    elif data_points >= 5:
        confidence = 'moderate'
    else:
        confidence = 'low'

    optimized = {
        'frequency': frequency,
        'scope': scope,
        'focus': focus,
        'confidence': confidence,
        'reasoning': strategy_reasoning(frequency, scope, focus)
    }

    velocity_averages = analysis['velocity_trends'].get('averages')
    quality_per_iteration = velocity_averages['quality_per_iteration'] if velocity_averages else None

    return {
        'current': dict(BASELINE_STRATEGY),
        'optimized': optimized,
        'signals': signals,
        'action_plan': action_plan(optimized, signals),
        'expected_impact': expected_impact(optimized, quality_per_iteration)
    }


def strategy_reasoning(frequency: str, scope: str, focus: str) -> List[str]:
    reasons = []

    if frequency == 'weekly':
        reasons.append('Weekly iterations recommended due to high ROI and significant improvement potential')
    elif frequency == 'monthly':
        reasons.append('Monthly iterations sufficient as pages approach optimization saturation')
    else:
        reasons.append('Bi-weekly iterations provide good balance of impact and sustainability')

    if scope == 'large':
        reasons.append('Large scope iterations to capitalize on remaining improvement potential')
    elif scope == 'small':
        reasons.append('Small scope iterations to improve velocity and address bottlenecks')
    else:
        reasons.append('Medium scope iterations maintain sustainable pace')

    if focus == 'low_performers':
        reasons.append('Focus on low performers for maximum quality gain')
    elif focus == 'proven_patterns':
        reasons.append('Scale proven patterns systematically across all pages')
    elif focus == 'high_impact':
        reasons.append('Prioritize high-impact changes to improve effectiveness')
    else:
        reasons.append('Balanced approach across all improvement opportunities')

    return reasons


def action_plan(strategy: Dict[str, Any], signals: Dict[str, str]) -> Dict[str, List[str]]:
    immediate = []
    short_term = []

    if signals['saturation'] == 'aggressive_improvement':
        immediate.append('Identify 5-10 lowest performing pages')
        immediate.append('Run targeted UX analysis on bottom performers')
    if signals['patterns'] in ('scale_aggressively', 'systematic_application'):
        immediate.append('Document proven patterns in detail')
        immediate.append('Create pattern application checklist')
    if not immediate:
        immediate.append('Monitor current iteration results')
        immediate.append('Prepare next iteration targets')

    if strategy['frequency'] == 'weekly':
        short_term.append('Execute weekly iteration cycles')
        short_term.append('Track velocity and effectiveness closely')
    else:
        short_term.append(f"Execute {strategy['frequency']} iteration cycle")

    if strategy['focus'] == 'low_performers':
        short_term.append('Apply 3-5 improvements to each bottom performer')
        short_term.append('Measure quality score improvements')
    elif strategy['focus'] == 'proven_patterns':
        short_term.append('Apply top 3 proven patterns to all applicable pages')
        short_term.append('Track pattern application coverage')

    long_term = [
        'Achieve 80%+ pages at quality score 45+',
        'Reduce low performers to < 10% of pages',
        'Build pattern library with 5+ proven approaches'
    ]
    if strategy['confidence'] == 'high':
        long_term.append('Transition to maintenance mode as saturation reached')
    else:
        long_term.append('Continue aggressive improvement until saturation')

    return {'immediate': immediate, 'short_term': short_term, 'long_term': long_term}


class StrategyOptimizer:
    """Runs every trend analysis and the strategy optimization."""

    def analyze(self, data: StrategyInput) -> Dict[str, Any]:
        analysis = {
            'velocity_trends': analyze_velocity(data.iterations),
            'effectiveness_trends': analyze_effectiveness(data.iterations),
            'roi_trends': analyze_roi(data.iterations),
            'saturation_analysis': analyze_saturation(data.ux_snapshots),
            'pattern_evolution': analyze_patterns(data.patterns)
        }
        analysis['strategy_recommendations'] = optimize_strategy(analysis, data.data_points)

        optimized = analysis['strategy_recommendations']['optimized']
        logger.info(
            f"Strategy: {optimized['frequency']} / {optimized['scope']} / {optimized['focus']} "
            f"({optimized['confidence']} confidence)"
        )
        return analysis

    def build_report(self, data: StrategyInput, generated_at: str) -> Dict[str, Any]:
        return {
            'generated': generated_at,
            'data_points': {
                'iterations': len(data.iterations),
                'ux_snapshots': len(data.ux_snapshots),
                'history_records': data.history_records
            },
            'analysis': self.analyze(data)
        }

    @staticmethod
    def trend_snapshot(report: Dict[str, Any]) -> Dict[str, Any]:
        """Compact record appended to the strategy trend history."""
        analysis = report['analysis']
        saturation = analysis['saturation_analysis'].get('saturation', {})
        return {
            'date': report['generated'],
            'velocity': analysis['velocity_trends'].get('trend', 'unknown'),
            'effectiveness': analysis['effectiveness_trends'].get('trend', 'unknown'),
            'roi': analysis['roi_trends'].get('trend', 'unknown'),
            'saturation': saturation.get('level', 0),
            'strategy': analysis['strategy_recommendations']['optimized']
        }
