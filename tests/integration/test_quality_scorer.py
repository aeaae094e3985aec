import json

import pytest

from core.analysis.quality_scorer import (
    QualityScorer, grade, improvement_priority, overall_score, recommendation_priority, round_half_up, status
)


def _page(name, performance, accessibility, seo, best_practices, mobile_ux):
    return {
        "name": name,
        "file": f"{name.lower()}.html",
        "scores": {
            "performance": performance,
            "accessibility": accessibility,
            "seo": seo,
            "best_practices": best_practices,
            "mobile_ux": mobile_ux,
        },
    }


@pytest.mark.parametrize("value,digits,expected", [
    (84.5, 0, 85),
    (84.49, 0, 84),
    (92.25, 1, 92.3),
    (93.6, 0, 94),
])
def test_round_half_up(value, digits, expected):
    """Test that halves round up rather than to even."""
    assert round_half_up(value, digits) == expected


def test_overall_score_is_equal_weighted_mean():
    """Test the overall score of five equally weighted categories."""
    scores = {"performance": 97, "accessibility": 94, "seo": 95, "best_practices": 96, "mobile_ux": 93}
    assert overall_score(scores) == 95
    scores = {"performance": 95, "accessibility": 92, "seo": 93, "best_practices": 94, "mobile_ux": 91}
    assert overall_score(scores) == 93


@pytest.mark.parametrize("score,expected", [
    (95, "A"), (94.9, "B"), (90, "B"), (85, "C"), (80, "D"), (79, "F"),
])
def test_grade(score, expected):
    """Test grade boundaries."""
    assert grade(score) == expected


def test_status_and_priorities():
    """Test target status and priority bands."""
    assert status(95) == "Meets Target"
    assert status(93) == "Close to Target"
    assert status(92) == "Below Target"
    assert status(85, target=85) == "Meets Target"
    assert [improvement_priority(g) for g in (4, 2, 1)] == ["High", "Medium", "Low"]
    assert [recommendation_priority(n) for n in (6, 3, 1)] == ["High", "Medium", "Low"]


def test_analyze_page_orders_improvements_by_gap():
    """Test shortfalls are listed largest gap first."""
    scorer = QualityScorer(pages=[])
    result = scorer.analyze_page(_page("Valentine", 94, 91, 92, 93, 90))

    assert result["overall"] == 92
    assert result["grade"] == "B"
    assert result["status"] == "Below Target"
    assert [imp["category"] for imp in result["improvements"]] == [
        "mobile_ux", "accessibility", "performance", "seo", "best_practices"
    ]
    assert result["improvements"][0]["gap"] == 5
    assert result["improvements"][0]["priority"] == "High"


def test_analyze_builtin_pages():
    """Test the report over the built-in page scores."""
    report = QualityScorer().analyze("2025-03-10T09:30:00+00:00")
    summary = report["summary"]

    assert summary["total_pages"] == 13
    assert sum(summary["grade_distribution"].values()) == 13
    assert summary["meets_target"] + summary["needs_improvement"] == 13
    workspace = next(p for p in report["pages"] if p["file"] == "workspace.html")
    assert (workspace["overall"], workspace["grade"], workspace["status"]) == (95, "A", "Meets Target")


def test_recommendations_group_by_category():
    """Test category recommendations and their ordering."""
    pages = [_page(f"P{i}", 90, 94, 95, 96, 95) for i in range(5)] + [_page("Q", 97, 90, 95, 96, 95)]
    report = QualityScorer(pages=pages).analyze("2025-03-10")

    first, second = report["recommendations"]
    assert (first["category"], first["affected_pages"], first["priority"]) == ("performance", 5, "High")
    assert first["total_impact"] == 35
    assert first["average_gap"] == 7.0
    assert (second["category"], second["affected_pages"], second["priority"]) == ("accessibility", 6, "High")
    assert second["actions"]


def test_custom_target_changes_status():
    """Test the overall target override."""
    report = QualityScorer(targets={"overall": 99}).analyze("2025-03-10")
    assert report["summary"]["meets_target"] == 0
    assert report["targets"]["overall"] == 99
    assert report["targets"]["performance"] == 97


def test_empty_page_list():
    """Test that no pages produce an empty report instead of an error."""
    report = QualityScorer(pages=[]).analyze("2025-03-10")
    assert report["summary"]["total_pages"] == 0
    assert report["summary"]["average_overall"] == 0.0
    assert report["recommendations"] == []


def test_analyze_report_is_json_ready():
    """Test the quality report survives a JSON round trip unchanged."""
    report = QualityScorer().analyze("2025-03-10T09:30:00+00:00")

    assert json.loads(json.dumps(report)) == report
    assert list(report["summary"]["grade_distribution"]) == ["A", "B", "C", "D", "F"]
