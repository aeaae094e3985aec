#!/usr/bin/env python3
"""
Markdown renderers for the generated reports.

Each renderer takes the report dict produced by an analyzer and returns the
Markdown text; nothing here touches the filesystem.
"""

from typing import Dict, Any, List


def _percent(part: float, total: float) -> str:
    if not total:
        return '0'
    return f"{part / total * 100:.0f}"


def render_cwv_report(report: Dict[str, Any]) -> str:
    """Render the Core Web Vitals monitoring report."""
    summary = report['summary']
    lines = [
        '# Core Web Vitals Monitoring Report',
        '',
        f"**Generated**: {report['timestamp']}",
        f"**Date Range**: {report['date_range']}",
        f"**Data Source**: {report['source']}",
        '',
        '## Summary',
        '',
        f"- Total pages analyzed: {summary['total_pages']}",
        f"- ✨ Excellent (≥90%): {summary['excellent_pages']}",
        f"- ✅ Good (75-90%): {summary['good_pages']}",
        f"- ⚠️ Needs Work (50-75%): {summary['needs_work_pages']}",
        f"- ❌ Poor (<50%): {summary['poor_pages']}",
        ''
    ]

    lines.extend(['## Aggregate Metrics', '',
                  '| Metric | Good | Needs Improvement | Poor | Samples |',
                  '|--------|------|-------------------|------|---------|'])
    for metric, values in report['aggregate'].items():
        lines.append(
            f"| {metric.upper()} | {values['good']}% | {values['needs_improvement']}% "
            f"| {values['poor']}% | {values['samples']} |"
        )
    lines.append('')

    alerts = report['alerts']
    lines.extend([f"## Alerts ({len(alerts)})", ''])
    if alerts:
        for alert in alerts:
            lines.append(f"- **{alert['severity'].upper()}** {alert['page']} - {alert['metric']}: {alert['message']}")
    else:
        lines.append('No alerts.')
    lines.append('')

    if report['recommendations']:
        lines.extend(['## Recommendations', ''])
        for rec in report['recommendations']:
            lines.append(f"### {rec['title']} ({rec['priority']})")
            lines.append('')
            lines.append(rec['description'])
            lines.append('')
            lines.append(f"**Action**: {rec['action']}")
            lines.append('')

    issues = report['issues']
    if issues:
        lines.extend([f"## Issues ({len(issues)})", '',
                      '| Page | Metric | p75 | Threshold | Severity |',
                      '|------|--------|-----|-----------|----------|'])
        for issue in issues:
            lines.append(
                f"| {issue['page']} | {issue['metric']} | {issue['value']:g} "
                f"| {issue['threshold']:g} | {issue['severity']} |"
            )
        lines.append('')

    lines.extend(['---', '', '*Generated by Core Web Vitals Production Monitoring*', ''])
    return '\n'.join(lines)


def render_experiment_report(report: Dict[str, Any]) -> str:
    summary = report['summary']
    lines = [
        '# A/B Experiment Monitoring Report',
        '',
        f"**Generated**: {report['generated']}",
        '',
        '## Summary',
        '',
        f"- Experiments monitored: {summary['total']}",
        f"- 🏆 Winners: {summary['winners']}",
        f"- 📉 Losers: {summary['losers']}",
        f"- ➖ Neutral: {summary['neutral']}",
        f"- ⏳ Running: {summary['running']}",
        f"- 🛑 Stopped (inconclusive): {summary['stopped_inconclusive']}",
        f"- Annual revenue from winners: ${summary['winner_annual_revenue']:,}",
        ''
    ]

    sections = [('🏆 Winners', report['winners']), ('📉 Losers', report['losers']),
                ('➖ Neutral', report['neutral']), ('⏳ Running', report['running'])]
    for title, results in sections:
        if not results:
            continue
        lines.extend([f"## {title}", '',
                      '| Experiment | Page | Days | Lift | Confidence | Decision | Learning |',
                      '|------------|------|------|------|------------|----------|----------|'])
        for result in results:
            experiment = result['experiment']
            metrics = result['metrics']
            lines.append(
                f"| {experiment['name']} | {experiment['page']} | {metrics['duration_days']} "
                f"| {metrics['lift'] * 100:+.2f}% | {metrics['confidence'] * 100:.1f}% "
                f"| {result['recommendation']} | {result['learning']} |"
            )
        lines.append('')

    if report['insights']:
        lines.extend(['## Insights', ''])
        lines.extend(f"- {insight}" for insight in report['insights'])
        lines.append('')

    for plan in report['scaling_plans']:
        lines.extend([f"## Scaling Plan: {plan['experiment_id']}", '',
                      f"{plan['approach']} over {plan['timeline']} on {plan['page']}.", ''])
        for phase in plan['phases']:
            lines.append(
                f"{phase['phase']}. {phase['traffic']} traffic for {phase['duration']} "
                f"(monitor: {phase['monitor']})"
            )
        lines.append('')
        lines.append(f"**Rollback**: {plan['rollback']['trigger']} ({plan['rollback']['timeline']})")
        lines.append('')

    return '\n'.join(lines)


def render_quality_report(report: Dict[str, Any]) -> str:
    summary = report['summary']
    targets = report['targets']
    lines = [
        '# Landing Page Quality Report',
        '',
        f"**Generated**: {report['timestamp']}",
        f"**Overall Target**: {targets['overall']}",
        '',
        '## Summary',
        '',
        f"- Pages scored: {summary['total_pages']}",
        f"- Average overall score: {summary['average_overall']}",
        f"- Meeting target: {summary['meets_target']}",
        f"- Needing improvement: {summary['needs_improvement']}",
        '',
        '### Grade Distribution',
        ''
    ]
    for letter, count in summary['grade_distribution'].items():
        lines.append(f"- {letter}: {count}")
    lines.append('')

    lines.extend(['### Category Averages', ''])
    for category, average in summary['category_averages'].items():
        lines.append(f"- {category}: {average} (target {targets[category]})")
    lines.append('')

    lines.extend(['## Page Scores', '',
                  '| Page | Overall | Grade | Status |',
                  '|------|---------|-------|--------|'])
    for page in report['pages']:
        lines.append(f"| {page['name']} ({page['file']}) | {page['overall']} | {page['grade']} | {page['status']} |")
    lines.append('')

    if report['recommendations']:
        lines.extend(['## Recommendations', ''])
        for rec in report['recommendations']:
            lines.append(f"### {rec['category']} ({rec['priority']} priority)")
            lines.append('')
            lines.append(
                f"{rec['affected_pages']} pages below target, average gap {rec['average_gap']}, "
                f"total impact {rec['total_impact']}."
            )
            lines.append('')
            lines.extend(f"- [ ] {action}" for action in rec['actions'])
            lines.append('')

    return '\n'.join(lines)


def _checklist(items: List[str]) -> List[str]:
    return [f"- [ ] {item}" for item in items] + ['']


def render_strategy_report(report: Dict[str, Any]) -> str:
    """Render the iteration strategy optimization report."""
    analysis = report['analysis']
    strategy = analysis['strategy_recommendations']
    optimized = strategy['optimized']
    impact = strategy['expected_impact']

    lines = [
        '# Iteration Strategy Optimization Report',
        '',
        f"**Generated**: {report['generated']}",
        '',
        '---',
        '',
        '## Executive Summary',
        '',
        '### Optimized Strategy',
        '',
        f"- **Iteration Frequency**: {optimized['frequency']}",
        f"- **Iteration Scope**: {optimized['scope']}",
        f"- **Iteration Focus**: {optimized['focus']}",
        f"- **Confidence Level**: {optimized['confidence']}",
        '',
        '### Expected Impact',
        '',
        f"- **Per Iteration**: +{impact['per_iteration']} quality points",
        f"- **Per Month**: +{impact['per_month']} quality points",
        f"- **3 Months**: +{impact['three_month']} quality points",
        f"- **6 Months**: +{impact['six_month']} quality points",
        '',
        '---',
        ''
    ]

    velocity = analysis['velocity_trends']
    if 'trend' in velocity:
        avg = velocity['averages']
        lines.extend([
            '## 🚀 Velocity Trends', '',
            f"**Trend**: {velocity['trend']}", '',
            '### Averages', '',
            f"- Pages per iteration: {avg['pages_per_iteration']}",
            f"- Changes per iteration: {avg['changes_per_iteration']}",
            f"- Quality points per iteration: {avg['quality_per_iteration']}",
            '',
            f"**Recommendation**: {velocity['recommendation']['message']}",
            '', '---', ''
        ])

    effectiveness = analysis['effectiveness_trends']
    if 'trend' in effectiveness:
        avg = effectiveness['averages']
        lines.extend([
            '## 💪 Effectiveness Trends', '',
            f"**Trend**: {effectiveness['trend']}", '',
            '### Averages', '',
            f"- Quality per change: {avg['quality_per_change']}",
            f"- Quality per page: {avg['quality_per_page']}",
            '',
            f"**Recommendation**: {effectiveness['recommendation']['message']}",
            '', '---', ''
        ])

    roi = analysis['roi_trends']
    if 'trend' in roi:
        summary = roi['summary']
        lines.extend([
            '## 💰 ROI Trends', '',
            f"**Trend**: {roi['trend']}", '',
            '### Summary', '',
            f"- Average ROI: {summary['average_roi']} quality points/hour",
            f"- Total hours invested: {summary['total_hours']}",
            f"- Total quality gained: {summary['total_quality']}",
            f"- Overall ROI: {summary['overall_roi']} quality points/hour",
            '',
            f"**Recommendation**: {roi['recommendation']['message']}",
            '', '---', ''
        ])

    saturation = analysis['saturation_analysis']
    if 'saturation' in saturation:
        state = saturation['current_state']
        dist = saturation['distribution']
        lines.extend([
            '## 📉 Saturation Analysis', '',
            f"**Saturation Level**: {saturation['saturation']['level']}%",
            f"**Status**: {saturation['saturation']['status']}",
            f"**Potential Remaining**: {saturation['saturation']['potential_remaining']}",
            '',
            '### Current State', '',
            f"- Average quality: {state['avg_quality']}",
            f"- Quality range: {state['min_quality']} - {state['max_quality']}",
            '',
            '### Distribution', '',
            f"- High performers (45+): {dist['high']}/{dist['total']} ({_percent(dist['high'], dist['total'])}%)",
            f"- Medium performers (35-44): {dist['medium']}/{dist['total']} ({_percent(dist['medium'], dist['total'])}%)",
            f"- Low performers (<35): {dist['low']}/{dist['total']} ({_percent(dist['low'], dist['total'])}%)",
            '',
            f"**Recommendation**: {saturation['recommendation']['message']}",
            '', '---', ''
        ])

    evolution = analysis['pattern_evolution']
    if 'patterns' in evolution:
        summary = evolution['summary']
        lines.extend([
            '## 🧬 Pattern Evolution', '',
            f"**Total Patterns**: {summary['total_patterns']}", '',
            '### Pattern Maturity', '',
            f"- Proven: {summary['proven_patterns']}",
            f"- Emerging: {summary['emerging_patterns']}",
            f"- New: {summary['new_patterns']}",
            ''
        ])
        if evolution['patterns']:
            lines.extend(['### Pattern Performance', '',
                          '| Pattern | Applied | Avg Impact | Total Impact | Maturity | Next Step |',
                          '|---------|---------|------------|--------------|----------|-----------|'])
            for pattern in evolution['patterns']:
                lines.append(
                    f"| {pattern['name']} | {pattern['times_applied']}x | +{pattern['avg_improvement']} "
                    f"| +{pattern['total_impact']} | {pattern['maturity']} | {pattern['recommendation']} |"
                )
            lines.append('')
        lines.extend([f"**Recommendation**: {evolution['recommendation']['message']}", '', '---', ''])

    plan = strategy['action_plan']
    lines.extend(['## 🎯 Strategy Recommendations', '', '### Reasoning', ''])
    lines.extend(f"- {reason}" for reason in optimized['reasoning'])
    lines.extend(['', '### Action Plan', '', '#### Immediate Actions (Next 7 Days)', ''])
    lines.extend(_checklist(plan['immediate']))
    lines.extend(['#### Short-Term Actions (Next 2-4 Weeks)', ''])
    lines.extend(_checklist(plan['short_term']))
    lines.extend(['#### Long-Term Goals (Next 1-3 Months)', ''])
    lines.extend(_checklist(plan['long_term']))

    points = report['data_points']
    lines.extend([
        '---',
        '',
        '*Generated by Iteration Strategy Optimizer*',
        f"*Data points: {points['iterations']} iterations, {points['ux_snapshots']} UX snapshots*",
        ''
    ])
    return '\n'.join(lines)
