import json

import pytest

from cli_router import CLIRouter, main
from commands import get_command, list_commands


@pytest.fixture
def router():
    return CLIRouter()


def _single(directory, pattern):
    matches = sorted(directory.glob(pattern))
    assert len(matches) == 1, matches
    return matches[0]


def test_registered_commands():
    """Test every command is registered."""
    assert list(list_commands()) == [
        "cwv", "experiments", "quality", "strategy", "history", "health", "integrations"
    ]
    with pytest.raises(ValueError):
        get_command("unknown")


def test_cwv_full_run_writes_all_outputs(router, reports_dir, capsys):
    """Test the default cwv mode writes report, dashboard, alerts and history."""
    assert router.route_command(["cwv", "--seed", "1"]) == 0

    report = json.loads(_single(reports_dir, "cwv-monitoring-report-*.json").read_text(encoding="utf-8"))
    assert report["source"] == "simulated"
    assert report["summary"]["total_pages"] == 14
    assert _single(reports_dir, "cwv-monitoring-report-*.md").exists()
    assert (reports_dir / "dashboards" / "latest.html").exists()
    alerts = json.loads(_single(reports_dir / "alerts", "alerts-*.json").read_text(encoding="utf-8"))
    assert set(alerts) == {"critical", "warning", "info"}
    history = json.loads((reports_dir / "history" / "cwv-history.json").read_text(encoding="utf-8"))["snapshots"]
    assert len(history) == 1
    assert list((reports_dir / "runs").glob("*.json"))

    assert "Core Web Vitals Production Monitoring System" in capsys.readouterr().out


def test_cwv_history_grows_across_runs(router, reports_dir):
    """Test repeated runs append to the trend history."""
    router.route_command(["cwv", "--seed", "1"])
    router.route_command(["cwv", "--seed", "2"])

    history = json.loads((reports_dir / "history" / "cwv-history.json").read_text(encoding="utf-8"))["snapshots"]
    assert len(history) == 2


def test_cwv_analyze_mode_writes_nothing(router, reports_dir, capsys):
    """Test analyze mode only prints."""
    assert router.route_command(["cwv", "analyze", "--seed", "3"]) == 0

    assert not list(reports_dir.glob("cwv-monitoring-report-*"))
    assert "Analysis complete" in capsys.readouterr().out


def test_cwv_replays_snapshot_file(router, reports_dir, tmp_path, make_snapshot, healthy_page,
                                   struggling_page, write_json_file):
    """Test the file source and the alerts-only mode."""
    snapshot = make_snapshot({"healthy.html": healthy_page, "struggling.html": struggling_page})
    path = write_json_file(tmp_path / "snapshot.json", snapshot.to_dict())

    assert router.route_command(["cwv", "alerts", "--source", "file", "--snapshot", str(path)]) == 0

    alerts = json.loads(_single(reports_dir / "alerts", "alerts-*.json").read_text(encoding="utf-8"))
    assert [a["page"] for a in alerts["critical"]] == ["struggling.html"]


def test_cwv_error_exit_codes(router, tmp_path):
    """Test missing snapshot files and missing arguments map to exit codes."""
    assert router.route_command(["cwv", "--source", "file", "--snapshot", str(tmp_path / "none.json")]) == 2
    assert router.route_command(["cwv", "--source", "file"]) == 22


def test_cwv_slack_without_webhook_still_succeeds(router, capsys):
    """Test an unconfigured Slack webhook is reported but not fatal."""
    assert router.route_command(["cwv", "analyze", "--seed", "1", "--slack"]) == 0
    assert "Slack not configured" in capsys.readouterr().out


def test_cwv_unknown_mode_runs_full_report(router, reports_dir, caplog):
    """Test unrecognized cwv modes and options fall back to the full run."""
    assert router.route_command(["cwv", "bogus", "--seed", "1"]) == 0
    assert (reports_dir / "dashboards" / "latest.html").exists()
    assert _single(reports_dir, "cwv-monitoring-report-*.json").exists()
    assert "Unknown cwv mode 'bogus'" in caplog.text

    assert router.route_command(["cwv", "--full", "--seed", "2"]) == 0
    assert "Ignoring unrecognized cwv arguments: --full" in caplog.text
    history = json.loads((reports_dir / "history" / "cwv-history.json").read_text(encoding="utf-8"))["snapshots"]
    assert len(history) == 2


def test_missing_subcommand_shows_help(router, capsys):
    """Test a command without its subcommand prints that command's help and fails."""
    assert router.route_command(["experiments"]) == 1
    assert "monitor" in capsys.readouterr().out


def test_experiments_monitor(router, reports_dir):
    """Test the experiment report is written with a latest alias."""
    assert router.route_command(["experiments", "monitor", "--seed", "1"]) == 0

    report = json.loads((reports_dir / "experiments" / "latest.json").read_text(encoding="utf-8"))
    assert report["summary"]["total"] == 4
    assert _single(reports_dir / "experiments", "experiment-report-*.md").exists()


def test_experiments_monitor_missing_file(router, tmp_path):
    """Test a missing experiments file."""
    assert router.route_command(["experiments", "monitor", "--file", str(tmp_path / "none.json")]) == 2


def test_quality_score(router, reports_dir):
    """Test quality scoring with a custom target."""
    assert router.route_command(["quality", "score", "--target", "90"]) == 0

    report = json.loads((reports_dir / "quality" / "latest.json").read_text(encoding="utf-8"))
    assert report["targets"]["overall"] == 90
    assert report["summary"]["total_pages"] == 13


def test_strategy_optimize_simulated(router, reports_dir):
    """Test strategy optimization on simulated iterations."""
    assert router.route_command(["strategy", "optimize", "--simulate", "4", "--seed", "2"]) == 0

    report = json.loads((reports_dir / "iterations" / "strategy-optimization.json").read_text(encoding="utf-8"))
    assert report["data_points"]["iterations"] == 4
    assert (reports_dir / "iterations" / "strategy-optimization.md").exists()
    trend = json.loads((reports_dir / "iterations" / "trend-data.json").read_text(encoding="utf-8"))["snapshots"]
    assert len(trend) == 1


def test_strategy_optimize_without_iterations(router):
    """Test that stored reports are required without --simulate."""
    assert router.route_command(["strategy", "optimize"]) == 2


def test_history_commands(router, capsys):
    """Test history show and stats before and after a run."""
    assert router.route_command(["history", "show"]) == 0
    assert router.route_command(["history", "stats"]) == 0

    router.route_command(["cwv", "--seed", "4"])
    capsys.readouterr()

    assert router.route_command(["history", "show", "--kind", "cwv", "--limit", "5"]) == 0
    assert router.route_command(["history", "stats", "--days", "1"]) == 0
    out = capsys.readouterr().out
    assert "CWV Trend History (1 snapshots)" in out
    assert "Total runs: 1" in out


def test_history_show_limit(router, capsys):
    """Test --limit trims the listing and rejects values below one."""
    for seed in (1, 2, 3):
        router.route_command(["cwv", "--seed", str(seed)])
    capsys.readouterr()

    assert router.route_command(["history", "show", "--limit", "2"]) == 0
    out = capsys.readouterr().out
    assert "CWV Trend History (3 snapshots)" in out
    assert out.count("📅") == 2

    assert router.route_command(["history", "show", "--limit", "0"]) == 22
    assert router.route_command(["history", "stats", "--days", "0"]) == 22


def test_health_check(router, capsys):
    """Test a healthy default configuration."""
    assert router.route_command(["health", "check"]) == 0
    assert "Overall Status: HEALTHY" in capsys.readouterr().out


def test_health_check_invalid_configuration(router, monkeypatch, capsys):
    """Test invalid settings make the system unhealthy."""
    monkeypatch.setenv("TREND_HISTORY_LIMIT", "0")
    assert router.route_command(["health", "check"]) == 1
    assert "UNHEALTHY" in capsys.readouterr().out


def test_integrations(router, capsys):
    """Test integration status and Slack without a webhook."""
    assert router.route_command(["integrations", "status"]) == 0
    assert router.route_command(["integrations", "slack"]) == 1


def test_integrations_slack_send(router, monkeypatch):
    """Test sending a message through a configured webhook."""
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/T/B/X")
    sent = []

    class Response:
        status_code = 200
        text = "ok"

    def fake_post(url, json=None, timeout=None, headers=None):
        sent.append(json["text"])
        return Response()

    monkeypatch.setattr("integrations.slack_notifier.requests.post", fake_post)

    assert router.route_command(["integrations", "slack", "--action", "send", "--message", "hi"]) == 0
    assert sent == ["hi"]


def test_argument_errors(router):
    """Test argparse exits become exit codes."""
    assert router.route_command([]) == 1
    assert router.route_command(["quality", "score", "--target", "x"]) == 2
    assert router.route_command(["experiments", "monitor", "--full"]) == 2
    assert router.route_command(["--help"]) == 0


def test_main_entry_point(capsys):
    """Test the console entry point."""
    assert main(["health", "check"]) == 0
    assert "System Health Check" in capsys.readouterr().out
