import pytest

from cli_router import CLIRouter
from core.config import get_config
from core.container import Container, get_container, reset_container, singleton
from core.reporting import ReportWriter


def test_singleton_and_factory_lifecycles():
    """Test singletons are built once and factories on every call."""
    container = Container()
    built = []

    container.register_singleton("shared", lambda: built.append("shared") or object())
    container.register_factory("fresh", lambda: object())

    assert container.get("shared") is container.get("shared")
    assert container.get("fresh") is not container.get("fresh")
    assert built == ["shared"]
    with pytest.raises(KeyError):
        container.get("missing")


def test_singleton_decorator():
    """Test decorated factories keep their singleton marker."""
    @singleton
    def create_value():
        return []

    container = Container()
    container.register_factory("value", create_value)
    assert container.get("value") is container.get("value")


def test_default_services_share_configuration(reports_dir):
    """Test the default writer and collector use the configured reports directory."""
    container = get_container()

    assert container.get("config") is get_config()
    assert container.get("report_writer").base_dir == reports_dir
    assert container.get("metrics_collector").runs_dir == reports_dir / "runs"
    assert container.get("metrics_collector").clock().tzinfo is not None

    reset_container()
    assert get_container() is not container


def test_registered_instance_is_used_by_commands(tmp_path, fixed_now):
    """Test a prepared writer replaces the default one."""
    writer = ReportWriter(tmp_path / "custom", clock=lambda: fixed_now)
    get_container().register_instance("report_writer", writer)

    assert CLIRouter().route_command(["quality", "score"]) == 0
    assert (tmp_path / "custom" / "quality" / "quality-report-2025-03-10.md").exists()
