#!/usr/bin/env python3
"""
Slack message formatting for report alerts.

Builds Block Kit payloads summarizing a Core Web Vitals report or an
experiment report.
"""

from typing import List, Dict, Any


class AlertFormatter:
    """Formats report alerts as Slack payloads."""

    SEVERITY_ICONS = {
        'critical': '🚨',
        'high': '🔶',
        'warning': '⚠️',
        'info': 'ℹ️',
        'default': '📌'
    }

    def __init__(self, max_alerts: int = 10):
        self.max_alerts = max_alerts

    def get_severity_icon(self, severity: str) -> str:
        return self.SEVERITY_ICONS.get(severity.lower().strip(), self.SEVERITY_ICONS['default'])

    def _alert_lines(self, alerts: List[Dict[str, Any]]) -> List[str]:
        lines = []
        for alert in alerts[:self.max_alerts]:
            icon = self.get_severity_icon(alert['severity'])
            lines.append(f"{icon} *{alert['page']}* - {alert['metric']}: {alert['message']}")
        if len(alerts) > self.max_alerts:
            lines.append(f"_... and {len(alerts) - self.max_alerts} more_")
        return lines

    def format_cwv_alerts(self, report: Dict[str, Any]) -> Dict[str, Any]:
        """
        Format the alert summary of a CWV report.

        Args:
            report: Report dict from ``build_report``

        Returns:
            Slack webhook payload
        """
        summary = report['summary']
        alerts = report['alerts']
        critical = [a for a in alerts if a['severity'] == 'critical']
        others = [a for a in alerts if a['severity'] != 'critical']

        blocks = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": "📊 Core Web Vitals Alerts", "emoji": True}
            },
            {
                "type": "context",
                "elements": [{
                    "type": "mrkdwn",
                    "text": f"📅 {report['timestamp']} | {report['date_range']} | source: {report['source']}"
                }]
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        f"*{summary['total_pages']} pages*: "
                        f"✨ {summary['excellent_pages']} excellent, ✅ {summary['good_pages']} good, "
                        f"⚠️ {summary['needs_work_pages']} needs work, ❌ {summary['poor_pages']} poor"
                    )
                }
            },
            {"type": "divider"}
        ]

        if not alerts:
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": "✅ No critical alerts detected!"}
            })
        else:
            if critical:
                blocks.append({
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": f"*Critical ({len(critical)})*\n" + "\n".join(self._alert_lines(critical))
                    }
                })
            if others:
                blocks.append({
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": f"*Warnings ({len(others)})*\n" + "\n".join(self._alert_lines(others))
                    }
                })

        for rec in report.get('recommendations', [])[:3]:
            blocks.append({
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": f"💡 *{rec['title']}* - {rec['action']}"}]
            })

        fallback = f"CWV report: {len(critical)} critical, {len(others)} other alerts"
        return {
            "text": fallback,
            "blocks": blocks,
            "username": "CWV Monitor",
            "icon_emoji": ":bar_chart:"
        }

    def format_experiment_summary(self, report: Dict[str, Any]) -> Dict[str, Any]:
        summary = report['summary']
        lines = [
            f"🏆 {summary['winners']} winners | 📉 {summary['losers']} losers | "
            f"➖ {summary['neutral']} neutral | ⏳ {summary['running']} running"
        ]
        lines.extend(f"• {insight}" for insight in report.get('insights', []))

        return {
            "text": "\n".join(lines),
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": "🧪 Experiment Monitor", "emoji": True}
                },
                {"type": "section", "text": {"type": "mrkdwn", "text": "\n".join(lines)}}
            ],
            "username": "Experiment Monitor",
            "icon_emoji": ":test_tube:"
        }
