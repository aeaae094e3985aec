import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

import pytest
import pytz

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Also add the project root to handle absolute imports
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import reset_config  # noqa: E402
from core.container import reset_container  # noqa: E402
from core.models.metrics import MetricSample, MetricsSnapshot, PageMetrics  # noqa: E402

CONFIG_ENV_VARS = [
    "REPORTS_DIR",
    "TREND_HISTORY_LIMIT",
    "SIMULATION_SEED",
    "REPORT_TIMEZONE",
    "EXPERIMENTS_FILE",
    "LOG_LEVEL",
    "VERBOSE_LOGGING",
    "ALERT_CRITICAL_PERCENT",
    "ALERT_WARNING_PERCENT",
    "SLACK_WEBHOOK_URL",
    "GA4_ENABLED",
    "GA4_PROPERTY_ID",
    "GA4_CREDENTIALS_PATH",
    "ENVIRONMENT",
]


@pytest.fixture
def reports_dir(tmp_path) -> Path:
    return tmp_path / "reports"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, reports_dir):
    """Point configuration at a temporary reports directory and drop cached services."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("REPORTS_DIR", str(reports_dir))
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 30, tzinfo=pytz.UTC)


MetricTuple = Tuple[float, float, float, float, int]


@pytest.fixture
def make_snapshot():
    """Build a snapshot from {page: {metric: (p75, good, needs_improvement, poor, samples)}}."""
    def _factory(pages: Dict[str, Dict[str, MetricTuple]], source: str = "test") -> MetricsSnapshot:
        page_metrics = {}
        for page, metrics in pages.items():
            samples = {
                name: MetricSample(name=name, p75=p75, good=good, needs_improvement=ni, poor=poor, samples=count)
                for name, (p75, good, ni, poor, count) in metrics.items()
            }
            page_metrics[page] = PageMetrics(page=page, metrics=samples)
        return MetricsSnapshot(
            date_range="last7days",
            timestamp=datetime(2025, 3, 10, 9, 0),
            source=source,
            pages=page_metrics,
        )

    return _factory


@pytest.fixture
def healthy_page() -> Dict[str, MetricTuple]:
    return {
        "lcp": (2000, 90, 6, 4, 1000),
        "fid": (50, 95, 3, 2, 800),
        "inp": (150, 92, 5, 3, 700),
        "cls": (0.05, 94, 4, 2, 900),
    }


@pytest.fixture
def struggling_page() -> Dict[str, MetricTuple]:
    return {
        "lcp": (4500, 40, 30, 30, 1000),
        "fid": (200, 70, 18, 12, 800),
        "inp": (150, 80, 12, 8, 700),
        "cls": (0.05, 90, 6, 4, 900),
    }


@pytest.fixture
def write_json_file():
    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
