"""Loop state — single source of truth passed through the graph."""

from typing import Literal, TypedDict


class TestScenario(TypedDict, total=False):
    name: str
    description: str
    steps: list[str]
    expectedOutcome: str


class TestPlan(TypedDict):
    testScenarios: list[TestScenario]
    usabilityChecks: list[str]
    accessibilityChecks: list[str]


class FeedbackReport(TypedDict):
    overallScore: float  # 0..1
    positives: list[str]
    issues: list[str]
    improvements: list[str]
    reasoning: str


class VisualFeedbackReport(TypedDict):
    visualScore: float  # 0..1
    designPositives: list[str]
    designIssues: list[str]
    designImprovements: list[str]
    visualReasoning: str


class IterationRecord(TypedDict):
    iteration: int  # 1-indexed
    score: float
    visual_score: float | None
    feedback: FeedbackReport
    visual_feedback: VisualFeedbackReport | None
    degraded: list[str]  # steps whose reply fell back to a placeholder


class LoopState(TypedDict):
    design_prompt: str  # Original user input. Immutable after init.
    current_code: str  # The one current code artifact.
    test_plan: TestPlan | None  # Regenerated every iteration.
    observations: dict | None  # Raw browser observations for this iteration.
    feedback: FeedbackReport | None
    visual_feedback: VisualFeedbackReport | None
    iteration: int  # Current loop count. Starts at 0.
    history: list[IterationRecord]  # Append-only, in order.
    degraded_steps: list[str]  # Reset at the start of each iteration.
    status: Literal["in_progress", "threshold_met", "stopped_by_user", "max_iterations_reached"]


def initial_state(design_prompt: str) -> LoopState:
    """Return a fresh LoopState for a validated design prompt."""
    return {
        "design_prompt": design_prompt,
        "current_code": "",
        "test_plan": None,
        "observations": None,
        "feedback": None,
        "visual_feedback": None,
        "iteration": 0,
        "history": [],
        "degraded_steps": [],
        "status": "in_progress",
    }
