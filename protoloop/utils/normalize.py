"""Normalisation of parsed LLM replies into the shapes the loop consumes.

The parser accepts any JSON object; these helpers fill in missing keys
(absent arrays become empty, absent strings become "") and coerce scores
into [0, 1] so downstream code can iterate without guarding every field.
"""

import sys


def coerce_score(value, label: str = "score") -> float:
    """Return value as a float clamped to [0, 1].

    Non-numeric values become 0.0. Both cases print a warning.
    """
    if isinstance(value, bool):
        value = None
    try:
        score = float(value)
    except (TypeError, ValueError):
        print(
            f"[protoloop] Warning: {label} {value!r} is not a number. Using 0.0.",
            file=sys.stderr,
        )
        return 0.0

    if score != score:  # NaN
        print(f"[protoloop] Warning: {label} is NaN. Using 0.0.", file=sys.stderr)
        return 0.0
    if score < 0 or score > 1:
        clamped = min(max(score, 0.0), 1.0)
        print(
            f"[protoloop] Warning: {label} {score} outside [0, 1]. Clamped to {clamped}.",
            file=sys.stderr,
        )
        return clamped
    return score


def _str_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def normalize_test_plan(data: dict) -> dict:
    """Fill in a TestPlan, dropping scenarios that are not objects."""
    scenarios = []
    raw_scenarios = data.get("testScenarios")
    if isinstance(raw_scenarios, list):
        for i, scenario in enumerate(raw_scenarios, 1):
            if not isinstance(scenario, dict):
                continue
            scenarios.append({
                "name": _text(scenario.get("name")) or f"Scenario {i}",
                "description": _text(scenario.get("description")),
                "steps": _str_list(scenario.get("steps")),
                "expectedOutcome": _text(scenario.get("expectedOutcome")),
            })

    return {
        "testScenarios": scenarios,
        "usabilityChecks": _str_list(data.get("usabilityChecks")),
        "accessibilityChecks": _str_list(data.get("accessibilityChecks")),
    }


def normalize_feedback(data: dict) -> dict:
    """Fill in a FeedbackReport."""
    return {
        "overallScore": coerce_score(data.get("overallScore"), "overallScore"),
        "positives": _str_list(data.get("positives")),
        "issues": _str_list(data.get("issues")),
        "improvements": _str_list(data.get("improvements")),
        "reasoning": _text(data.get("reasoning")),
    }


def normalize_visual_feedback(data: dict) -> dict:
    """Fill in a VisualFeedbackReport."""
    return {
        "visualScore": coerce_score(data.get("visualScore"), "visualScore"),
        "designPositives": _str_list(data.get("designPositives")),
        "designIssues": _str_list(data.get("designIssues")),
        "designImprovements": _str_list(data.get("designImprovements")),
        "visualReasoning": _text(data.get("visualReasoning")),
    }
