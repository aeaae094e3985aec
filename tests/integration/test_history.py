import pytest

from core.exceptions import ReportReadError
from core.history import TrendHistory


def test_missing_file_is_empty_history(tmp_path):
    """Test that a history file that does not exist reads as empty."""
    history = TrendHistory(tmp_path / "history" / "cwv-history.json")
    assert history.load() == []
    assert history.latest() is None
    assert len(history) == 0


def test_append_creates_file_and_parents(tmp_path):
    """Test the first append writes the snapshots wrapper."""
    path = tmp_path / "history" / "cwv-history.json"
    history = TrendHistory(path)

    assert history.append({"date": "2025-03-01", "score": 1}) == 1
    assert path.exists()
    assert history.latest() == {"date": "2025-03-01", "score": 1}


def test_retention_keeps_most_recent_entries(tmp_path):
    """Test that only the last ``limit`` snapshots survive, oldest dropped first."""
    history = TrendHistory(tmp_path / "trend.json", limit=90)
    for index in range(95):
        size = history.append({"index": index})

    assert size == 90
    stored = history.load()
    assert len(stored) == 90
    assert stored[0] == {"index": 5}
    assert stored[-1] == {"index": 94}


def test_values_skips_entries_without_key(tmp_path):
    """Test collecting one field across snapshots."""
    history = TrendHistory(tmp_path / "trend.json")
    history.append({"roi": 12.5})
    history.append({"velocity": "stable"})
    history.append({"roi": 14.0})

    assert history.values("roi") == [12.5, 14.0]


def test_invalid_json_raises_report_read_error(tmp_path):
    """Test a corrupt history file is reported, not silently reset."""
    path = tmp_path / "trend.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ReportReadError) as excinfo:
        TrendHistory(path).load()

    details = excinfo.value.to_dict()
    assert details["error_code"] == "ReportReadError"
    assert details["context"]["path"] == str(path)


def test_wrong_shape_raises_report_read_error(tmp_path):
    """Test a file without a snapshots list is rejected."""
    path = tmp_path / "trend.json"
    path.write_text('{"history": []}', encoding="utf-8")

    with pytest.raises(ReportReadError, match="Failed to read report data"):
        TrendHistory(path).load()


def test_limit_must_be_positive(tmp_path):
    """Test that a zero limit is rejected."""
    with pytest.raises(ValueError):
        TrendHistory(tmp_path / "trend.json", limit=0)
