#!/usr/bin/env python3
"""
Self-contained HTML dashboard for the Core Web Vitals report.
"""

from html import escape
from typing import Dict, Any

STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
      background: #f5f5f7; color: #1d1d1f; line-height: 1.6; padding: 20px;
    }
    .container {
      max-width: 1200px; margin: 0 auto; background: white; border-radius: 12px;
      box-shadow: 0 2px 20px rgba(0, 0, 0, 0.05); overflow: hidden;
    }
    header {
      background: linear-gradient(135deg, #1a73e8 0%, #4285f4 100%);
      color: white; padding: 40px; text-align: center;
    }
    header h1 { font-size: 2.5rem; font-weight: 700; margin-bottom: 10px; }
    header p { font-size: 1.1rem; opacity: 0.9; }
    .meta {
      padding: 20px 40px; background: #f8f9fa; border-bottom: 1px solid #e0e0e0;
      display: flex; justify-content: space-between; align-items: center;
    }
    .summary {
      display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
      gap: 20px; padding: 40px; border-bottom: 1px solid #e0e0e0;
    }
    .summary-card { background: #f8f9fa; padding: 24px; border-radius: 8px; text-align: center; }
    .summary-card h3 {
      font-size: 0.9rem; text-transform: uppercase; letter-spacing: 0.5px;
      color: #5f6368; margin-bottom: 8px;
    }
    .summary-card .value { font-size: 2.5rem; font-weight: 700; color: #1a73e8; }
    .alerts { padding: 40px; border-bottom: 1px solid #e0e0e0; }
    .alert { padding: 16px; border-radius: 8px; margin-bottom: 12px; border-left: 4px solid; }
    .alert.critical { background: #fef3f2; border-color: #ea4335; }
    .alert.high, .alert.warning { background: #fef7e0; border-color: #fbbc04; }
    .alert.info { background: #e8f0fe; border-color: #1a73e8; }
    .metrics { padding: 40px; }
    .metric-grid {
      display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr));
      gap: 24px; margin-top: 24px;
    }
    .metric-card { background: #f8f9fa; padding: 24px; border-radius: 8px; }
    .metric-card h3 { font-size: 1.2rem; margin-bottom: 16px; }
    .metric-value { font-size: 2rem; font-weight: 700; margin-bottom: 8px; }
    .metric-bar { height: 8px; background: #e0e0e0; border-radius: 4px; overflow: hidden; margin: 12px 0; }
    .metric-bar-fill { height: 100%; border-radius: 4px; background: #34a853; }
    .metric-breakdown { display: flex; justify-content: space-between; margin-top: 8px; font-size: 0.9rem; }
    .recommendations { padding: 40px; background: #f8f9fa; }
    .recommendation {
      background: white; padding: 24px; border-radius: 8px; margin-bottom: 16px;
      border-left: 4px solid #1a73e8;
    }
    .recommendation h3 { font-size: 1.1rem; margin-bottom: 8px; color: #1a73e8; }
    .priority-badge {
      display: inline-block; padding: 4px 12px; border-radius: 12px; font-size: 0.8rem;
      font-weight: 600; text-transform: uppercase; margin-left: 8px;
    }
    .priority-critical { background: #fef3f2; color: #ea4335; }
    .priority-high { background: #fef7e0; color: #f9ab00; }
    .priority-medium { background: #e8f0fe; color: #1a73e8; }
    footer { padding: 24px 40px; text-align: center; color: #5f6368; font-size: 0.9rem; }
    .badge { display: inline-block; padding: 4px 8px; border-radius: 4px; font-size: 0.75rem; font-weight: 600; }
    .badge-excellent { background: #e6f4ea; color: #137333; }
    .badge-good { background: #e8f0fe; color: #1967d2; }
    .badge-needs-work { background: #fef7e0; color: #f9ab00; }
    .badge-poor { background: #fef3f2; color: #c5221f; }
"""


def good_color(good: float) -> str:
    if good >= 75:
        return '#34a853'
    if good >= 50:
        return '#fbbc04'
    return '#ea4335'


def _summary_cards(summary: Dict[str, Any]) -> str:
    cards = [
        ('Excellent', summary['excellent_pages'], '#34a853', 'excellent', '≥90% Good CWV'),
        ('Good', summary['good_pages'], '#1a73e8', 'good', '75-90% Good CWV'),
        ('Needs Work', summary['needs_work_pages'], '#fbbc04', 'needs-work', '50-75% Good CWV'),
        ('Poor', summary['poor_pages'], '#ea4335', 'poor', '&lt;50% Good CWV')
    ]
    return '\n'.join(
        f'      <div class="summary-card">\n'
        f'        <h3>{title}</h3>\n'
        f'        <div class="value" style="color: {color};">{count}</div>\n'
        f'        <div class="badge badge-{badge}">{label}</div>\n'
        f'      </div>'
        for title, count, color, badge, label in cards
    )


def _alerts(report: Dict[str, Any]) -> str:
    alerts = report['alerts']
    if not alerts:
        return ''
    items = '\n'.join(
        f'      <div class="alert {escape(alert["severity"])}">'
        f'<strong>{escape(alert["page"])}</strong> - {escape(alert["metric"])}: {escape(alert["message"])}</div>'
        for alert in alerts
    )
    return (
        '    <div class="alerts">\n'
        f'      <h2 style="margin-bottom: 20px;">⚠️ Alerts ({len(alerts)})</h2>\n'
        f'{items}\n'
        '    </div>'
    )


def _metric_cards(aggregate: Dict[str, Dict[str, float]]) -> str:
    cards = []
    for metric, data in aggregate.items():
        cards.append(
            '        <div class="metric-card">\n'
            f'          <h3>{escape(metric.upper())}</h3>\n'
            f'          <div class="metric-value" style="color: {good_color(data["good"])};">{data["good"]}% Good</div>\n'
            '          <div class="metric-bar">\n'
            f'            <div class="metric-bar-fill" style="width: {data["good"]}%;"></div>\n'
            '          </div>\n'
            '          <div class="metric-breakdown">\n'
            f'            <span style="color: #34a853;">✓ {data["good"]}% Good</span>\n'
            f'            <span style="color: #fbbc04;">~ {data["needs_improvement"]}% Needs Improvement</span>\n'
            f'            <span style="color: #ea4335;">✗ {data["poor"]}% Poor</span>\n'
            '          </div>\n'
            '        </div>'
        )
    return '      <div class="metric-grid">\n' + '\n'.join(cards) + '\n      </div>'


def _recommendations(report: Dict[str, Any]) -> str:
    recommendations = report['recommendations']
    if not recommendations:
        return ''
    items = '\n'.join(
        '      <div class="recommendation">\n'
        f'        <h3>{escape(rec["title"])}'
        f'<span class="priority-badge priority-{escape(rec["priority"])}">{escape(rec["priority"])}</span></h3>\n'
        f'        <p>{escape(rec["description"])}</p>\n'
        f'        <p style="margin-top: 8px;"><strong>Action:</strong> {escape(rec["action"])}</p>\n'
        '      </div>'
        for rec in recommendations
    )
    return (
        '    <div class="recommendations">\n'
        '      <h2 style="margin-bottom: 24px;">💡 Recommendations</h2>\n'
        f'{items}\n'
        '    </div>'
    )


def render_cwv_dashboard(report: Dict[str, Any]) -> str:
    """
    Render the CWV report as a standalone HTML page.

    Every value taken from the report is HTML-escaped; the page carries its own
    inline stylesheet and loads nothing external.
    """
    summary = report['summary']
    source = 'Simulated Data' if report['source'] == 'simulated' else escape(str(report['source']))
    timestamp = escape(str(report['timestamp']))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Core Web Vitals Dashboard</title>
  <style>{STYLE}  </style>
</head>
<body>
  <div class="container">
    <header>
      <h1>📊 Core Web Vitals Dashboard</h1>
      <p>Real User Metrics - Landing Pages</p>
    </header>

    <div class="meta">
      <div>
        <strong>Date Range:</strong> {escape(str(report['date_range']))}<br>
        <strong>Last Updated:</strong> {timestamp}
      </div>
      <div style="text-align: right;">
        <strong>Total Pages:</strong> {summary['total_pages']}<br>
        <strong>Data Source:</strong> {source}
      </div>
    </div>

    <div class="summary">
{_summary_cards(summary)}
    </div>

{_alerts(report)}

    <div class="metrics">
      <h2 style="margin-bottom: 24px;">📈 Core Web Vitals Overview</h2>
{_metric_cards(report['aggregate'])}
    </div>

{_recommendations(report)}

    <footer>
      Generated by Core Web Vitals Production Monitoring System<br>
      Last updated: {timestamp}
    </footer>
  </div>
</body>
</html>
"""
