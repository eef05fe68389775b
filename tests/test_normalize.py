"""Tests for protoloop.utils.normalize."""

from protoloop.utils.normalize import (
    coerce_score,
    normalize_feedback,
    normalize_test_plan,
    normalize_visual_feedback,
)


class TestCoerceScore:
    def test_in_range_float_unchanged(self):
        assert coerce_score(0.85) == 0.85

    def test_numeric_string_converted(self):
        assert coerce_score("0.7") == 0.7

    def test_above_one_clamped_with_warning(self, capsys):
        assert coerce_score(85) == 1.0
        assert "Clamped" in capsys.readouterr().err

    def test_negative_clamped(self):
        assert coerce_score(-0.2) == 0.0

    def test_missing_becomes_zero(self, capsys):
        assert coerce_score(None) == 0.0
        assert "not a number" in capsys.readouterr().err

    def test_non_numeric_becomes_zero(self):
        assert coerce_score("great") == 0.0

    def test_bool_is_not_a_score(self):
        assert coerce_score(True) == 0.0

    def test_nan_becomes_zero(self):
        assert coerce_score(float("nan")) == 0.0


class TestNormalizeFeedback:
    def test_empty_object_gets_defaults(self):
        assert normalize_feedback({}) == {
            "overallScore": 0.0,
            "positives": [],
            "issues": [],
            "improvements": [],
            "reasoning": "",
        }

    def test_complete_feedback_preserved(self, feedback_failing):
        assert normalize_feedback(feedback_failing) == feedback_failing

    def test_non_list_issues_become_empty(self):
        result = normalize_feedback({"overallScore": 0.9, "issues": "none"})
        assert result["issues"] == []


class TestNormalizeVisualFeedback:
    def test_empty_object_gets_defaults(self):
        result = normalize_visual_feedback({})
        assert result["visualScore"] == 0.0
        assert result["designIssues"] == []
        assert result["visualReasoning"] == ""

    def test_values_preserved(self):
        data = {
            "visualScore": 0.6,
            "designPositives": ["Clean"],
            "designIssues": ["Low contrast"],
            "designImprovements": ["Darken text"],
            "visualReasoning": "Mostly fine.",
        }
        assert normalize_visual_feedback(data) == data


class TestNormalizeTestPlan:
    def test_missing_scenarios_become_empty(self):
        assert normalize_test_plan({}) == {
            "testScenarios": [],
            "usabilityChecks": [],
            "accessibilityChecks": [],
        }

    def test_non_object_scenarios_dropped(self, valid_test_plan):
        valid_test_plan["testScenarios"].append("just a string")
        result = normalize_test_plan(valid_test_plan)
        assert len(result["testScenarios"]) == 1

    def test_unnamed_scenario_gets_numbered_name(self):
        result = normalize_test_plan({"testScenarios": [{"steps": ["Click"]}]})
        scenario = result["testScenarios"][0]
        assert scenario["name"] == "Scenario 1"
        assert scenario["steps"] == ["Click"]
        assert scenario["expectedOutcome"] == ""
