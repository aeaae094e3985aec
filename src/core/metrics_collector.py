#!/usr/bin/env python3
"""
Run metrics collection for the reporting commands.

Every command run records how long its stages took and a few counters
(pages analyzed, alerts raised, reports written, Slack delivery). Runs are
appended to one JSON file per day under ``<reports>/runs`` and the day's
totals are recomputed from the stored runs on every write.
"""

import time
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, List, Any, Optional, Union
from contextlib import contextmanager
from dataclasses import dataclass, asdict, field
import logging

logger = logging.getLogger(__name__)

RUN_COUNTERS = ("pages_analyzed", "alerts_raised", "reports_written")


@dataclass
class TimingMetrics:
    """Timing of one stage inside a run."""
    operation: str
    start_time: float
    end_time: float
    duration: float
    success: bool
    error_message: Optional[str] = None


@dataclass
class RunMetrics:
    """One finished command run."""
    run_id: str
    timestamp: datetime
    command: str
    total_duration: float
    operations: List[TimingMetrics] = field(default_factory=list)
    pages_analyzed: int = 0
    alerts_raised: int = 0
    reports_written: int = 0
    slack_sent: bool = False
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RunMetrics':
        """Create from a stored run; missing counters default to zero."""
        operations = [
            TimingMetrics(
                operation=op["operation"],
                start_time=op["start_time"],
                end_time=op["end_time"],
                duration=op["duration"],
                success=op["success"],
                error_message=op.get("error_message")
            )
            for op in data.get("operations", [])
        ]
        counters = {name: data.get(name, 0) for name in RUN_COUNTERS}
        return cls(
            run_id=data["run_id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            command=data["command"],
            total_duration=data["total_duration"],
            operations=operations,
            slack_sent=data.get("slack_sent", False),
            success=data["success"],
            **counters
        )


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_runs(runs: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totals for a list of stored run dicts."""
    totals = {name: sum(run.get(name, 0) for run in runs) for name in RUN_COUNTERS}
    totals["runs"] = len(runs)
    totals["slack_messages_sent"] = sum(1 for run in runs if run.get("slack_sent"))
    totals["successful_runs"] = sum(1 for run in runs if run.get("success"))
    totals["failed_runs"] = totals["runs"] - totals["successful_runs"]
    totals["avg_runtime"] = _average([run["total_duration"] for run in runs])

    stage_times: Dict[str, List[float]] = {}
    for run in runs:
        for op in run.get("operations", []):
            if op["success"]:
                stage_times.setdefault(op["operation"], []).append(op["duration"])
    totals["avg_stage_seconds"] = {name: round(_average(times), 4) for name, times in sorted(stage_times.items())}
    return totals


class MetricsCollector:
    """
    Tracks the current run and stores finished runs.

    Only one run is tracked at a time; ``start_run`` discards an unfinished one.
    """

    def __init__(self, base_path: Union[str, Path] = "reports",
                 clock: Callable[[], datetime] = datetime.now):
        self.base_path = Path(base_path)
        self.clock = clock
        self.runs_dir = self.base_path / "runs"
        self._run: Optional[Dict[str, Any]] = None

    @property
    def active(self) -> bool:
        return self._run is not None

    def start_run(self, run_id: str, command: str) -> None:
        if self._run is not None:
            logger.warning(f"Discarding unfinished run {self._run['run_id']}")
        self._run = {
            "run_id": run_id,
            "command": command,
            "started": time.time(),
            "operations": [],
            "stats": {name: 0 for name in RUN_COUNTERS},
        }
        logger.debug(f"Started tracking run {run_id} for command '{command}'")

    def end_run(self, success: bool = True) -> Optional[RunMetrics]:
        """Finish the current run, store it and return its metrics."""
        if self._run is None:
            logger.warning("No active run to end")
            return None

        run, self._run = self._run, None
        stats = run["stats"]
        metrics = RunMetrics(
            run_id=run["run_id"],
            timestamp=self.clock(),
            command=run["command"],
            total_duration=time.time() - run["started"],
            operations=run["operations"],
            pages_analyzed=stats.get("pages_analyzed", 0),
            alerts_raised=stats.get("alerts_raised", 0),
            reports_written=stats.get("reports_written", 0),
            slack_sent=bool(stats.get("slack_sent", False)),
            success=success
        )
        self._store(metrics)
        logger.info(f"Completed run {metrics.run_id} in {metrics.total_duration:.2f}s")
        return metrics

    @contextmanager
    def time_operation(self, operation_name: str):
        """Time a stage of the current run; exceptions are recorded and re-raised."""
        start = time.time()
        error_message = None
        try:
            yield
        except Exception as e:
            error_message = str(e)
            raise
        finally:
            end = time.time()
            timing = TimingMetrics(operation_name, start, end, end - start,
                                   success=error_message is None, error_message=error_message)
            if self._run is not None:
                self._run["operations"].append(timing)
            logger.debug(f"Operation '{operation_name}' took {timing.duration:.2f}s (success: {timing.success})")

    def record_stat(self, key: str, value: Any) -> None:
        if self._run is not None:
            self._run["stats"][key] = value

    def increment_stat(self, key: str, amount: int = 1) -> None:
        if self._run is not None:
            stats = self._run["stats"]
            stats[key] = stats.get(key, 0) + amount

    def _daily_path(self, day: datetime) -> Path:
        return self.runs_dir / f"{day.strftime('%Y-%m-%d')}.json"

    def _store(self, metrics: RunMetrics) -> None:
        """Append a run to its day's file, written via a temp file and rename."""
        path = self._daily_path(metrics.timestamp)
        runs = []
        if path.exists():
            daily = self.get_daily_metrics(metrics.timestamp)
            if daily is None:
                logger.error(f"Error loading run metrics file {path}; starting a new one")
            else:
                runs = daily.get("runs", [])
        runs.append(metrics.to_dict())

        daily = {
            "date": metrics.timestamp.strftime('%Y-%m-%d'),
            "last_updated": self.clock().isoformat(),
            "daily_totals": summarize_runs(runs),
            "runs": runs
        }

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix('.tmp')
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(daily, f, ensure_ascii=False, indent=2)
            temp_path.replace(path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise RuntimeError(f"Failed to store run metrics: {e}") from e
        logger.debug(f"Stored metrics for run {metrics.run_id}")

    def get_daily_metrics(self, day: datetime) -> Optional[Dict[str, Any]]:
        path = self._daily_path(day)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error loading run metrics for {day.strftime('%Y-%m-%d')}: {e}")
            return None

    def get_recent_metrics(self, days: int = 7) -> List[Dict[str, Any]]:
        """Daily files for the last N days, newest first."""
        today = self.clock()
        found = (self.get_daily_metrics(today - timedelta(days=i)) for i in range(days))
        return sorted((daily for daily in found if daily), key=lambda d: d["date"], reverse=True)

    def get_summary_stats(self, days: int = 7) -> Dict[str, Any]:
        """Totals and averages over the last N days."""
        recent = self.get_recent_metrics(days)
        if not recent:
            return {"error": "No run metrics available"}

        runs = [run for daily in recent for run in daily.get("runs", [])]
        totals = summarize_runs(runs)
        total_runs = totals["runs"]

        return {
            "period_days": days,
            "date_range": {"start": recent[-1]["date"], "end": recent[0]["date"]},
            "totals": {
                "runs": total_runs,
                "pages_analyzed": totals["pages_analyzed"],
                "alerts_raised": totals["alerts_raised"],
                "successful_runs": totals["successful_runs"],
                "failed_runs": totals["failed_runs"],
                "success_rate": (totals["successful_runs"] / total_runs * 100) if total_runs else 0
            },
            "averages": {
                "alerts_per_run": totals["alerts_raised"] / total_runs if total_runs else 0,
                "runtime_seconds": totals["avg_runtime"]
            }
        }
