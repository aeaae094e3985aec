#!/usr/bin/env python3
"""
Console formatting for report summaries.

Kept separate from the commands so the summaries can be tested without
running a pipeline.
"""

from typing import Dict, Any, List

RULE = "═" * 59
THIN_RULE = "─" * 59


def format_cwv_summary(report: Dict[str, Any]) -> str:
    """Format the CWV monitoring summary block."""
    summary = report['summary']
    alerts = report['alerts']
    critical = sum(1 for a in alerts if a['severity'] == 'critical')
    warnings = sum(1 for a in alerts if a['severity'] in ('warning', 'high'))

    lines = [
        RULE,
        "                   MONITORING SUMMARY",
        RULE,
        f"Total Pages Analyzed: {summary['total_pages']}",
        f"  ✨ Excellent (≥90%):  {summary['excellent_pages']}",
        f"  ✅ Good (75-90%):     {summary['good_pages']}",
        f"  ⚠️  Needs Work (50-75%): {summary['needs_work_pages']}",
        f"  ❌ Poor (<50%):       {summary['poor_pages']}",
        THIN_RULE,
        f"Critical Alerts: {critical}",
        f"Warnings: {warnings}",
        f"Total Issues: {len(report['issues'])}",
        RULE
    ]
    return "\n".join(lines)


def format_alert_lines(grouped: Dict[str, List[Dict[str, Any]]]) -> str:
    """One line per critical/warning alert, or the all-clear message."""
    lines = []
    for alert in grouped.get('critical', []):
        lines.append(f"🚨 CRITICAL: {alert['page']} - {alert['message']}")
    for alert in grouped.get('warning', []):
        lines.append(f"⚠️  WARNING: {alert['page']} - {alert['message']}")
    if not lines:
        lines.append("✅ No critical alerts detected!")
    return "\n".join(lines)


def format_experiment_summary(report: Dict[str, Any]) -> str:
    summary = report['summary']
    lines = [
        f"\n=== Experiment Monitor - {summary['total']} live experiments ===",
        f"🏆 Winners: {summary['winners']}",
        f"📉 Losers: {summary['losers']}",
        f"➖ Neutral: {summary['neutral']}",
        f"⏳ Running: {summary['running']}"
    ]
    if summary['stopped_inconclusive']:
        lines.append(f"🛑 Stopped (insufficient data): {summary['stopped_inconclusive']}")

    for bucket in ('winners', 'losers', 'neutral', 'running'):
        for result in report[bucket]:
            metrics = result['metrics']
            lines.append(
                f"  [{result['recommendation']}] {result['experiment']['experiment_id']}: "
                f"{metrics['lift'] * 100:+.2f}% lift, {metrics['duration_days']} days"
            )

    if report['insights']:
        lines.append("\n💡 Insights:")
        lines.extend(f"  • {insight}" for insight in report['insights'])
    return "\n".join(lines)


def format_quality_summary(report: Dict[str, Any]) -> str:
    summary = report['summary']
    lines = [
        f"\n=== Quality Scores - {summary['total_pages']} pages ===",
        f"📊 Average overall: {summary['average_overall']}",
        f"✅ Meets target: {summary['meets_target']}",
        f"⚠️  Needs improvement: {summary['needs_improvement']}",
        "Grades: " + ", ".join(f"{letter}={count}" for letter, count in summary['grade_distribution'].items())
    ]
    for rec in report['recommendations']:
        lines.append(f"  [{rec['priority']}] {rec['category']}: {rec['affected_pages']} pages, gap {rec['average_gap']}")
    return "\n".join(lines)


def format_strategy_summary(report: Dict[str, Any]) -> str:
    strategy = report['analysis']['strategy_recommendations']
    optimized = strategy['optimized']
    impact = strategy['expected_impact']
    points = report['data_points']
    lines = [
        "\n=== Optimized Iteration Strategy ===",
        f"📅 Frequency: {optimized['frequency']}",
        f"📐 Scope: {optimized['scope']}",
        f"🎯 Focus: {optimized['focus']}",
        f"🔒 Confidence: {optimized['confidence']}",
        f"📈 Expected: +{impact['per_iteration']} per iteration, +{impact['per_month']} per month",
        f"Data points: {points['iterations']} iterations, {points['ux_snapshots']} UX snapshots"
    ]
    return "\n".join(lines)
