"""Scorer Agent — judges the test observations and records the iteration.

Required output schema:
{
  "overallScore": 0.0-1.0,
  "positives": ["string"],
  "issues": ["string"],
  "improvements": ["string"],
  "reasoning": "string"
}
"""

import json

from langchain_openai import ChatOpenAI

from protoloop.state import IterationRecord, LoopState
from protoloop.utils.normalize import normalize_feedback
from protoloop.utils.parsing import invoke_with_retry, parse_json_response, report_fallback

SYSTEM_PROMPT = """\
You are a UX testing expert analyzing test results. Provide structured feedback on the \
prototype's usability.

CRITICAL: Return ONLY valid JSON, no explanations or additional text. The response must \
start with { and end with }.

Return a JSON object with this exact structure:
{
  "overallScore": 0.85,
  "positives": ["Good thing 1", "Good thing 2"],
  "issues": ["Issue 1", "Issue 2"],
  "improvements": ["Suggestion 1", "Suggestion 2"],
  "reasoning": "Detailed explanation of the score"
}

Score should be between 0 and 1 (e.g., 0.85 for 85%). Leave issues empty when nothing \
needs to change.
"""

FEEDBACK_FALLBACK = {
    "overallScore": 0.5,
    "positives": ["Component loads successfully"],
    "issues": ["Unable to analyze detailed feedback"],
    "improvements": ["Try regenerating with clearer requirements"],
    "reasoning": "Fallback response due to JSON parsing error",
}


def _build_user_prompt(state: LoopState) -> str:
    """Construct the user prompt from state."""
    parts = [
        f"Test Plan: {json.dumps(state['test_plan'], indent=2)}",
        f"Test Results: {json.dumps(state['observations'], indent=2)}",
    ]
    if state.get("visual_feedback"):
        parts.append(f"Visual Feedback: {json.dumps(state['visual_feedback'], indent=2)}")
    return "\n\n".join(parts)


def scorer_node(state: LoopState, config: dict) -> dict:
    """Scorer node for the loop graph.

    Scores the iteration, then appends its IterationRecord to history. The
    record is built here so every scored iteration is recorded exactly once.
    """
    print("[protoloop] Getting LLM feedback on test results...")
    llm = ChatOpenAI(model=config["scorer_model"], temperature=0.1, max_retries=0)

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _build_user_prompt(state)},
    ]

    response = invoke_with_retry(llm, messages, config.get("llm_max_retries", 0))
    result = parse_json_response(response.content, FEEDBACK_FALLBACK)
    report_fallback("feedback", result)
    feedback = normalize_feedback(result.value)

    degraded = state["degraded_steps"] + (["feedback"] if result.degraded else [])
    visual = state.get("visual_feedback")

    record: IterationRecord = {
        "iteration": state["iteration"],
        "score": feedback["overallScore"],
        "visual_score": visual["visualScore"] if visual else None,
        "feedback": feedback,
        "visual_feedback": visual,
        "degraded": degraded,
    }

    print(f"\n[protoloop] Iteration {state['iteration']} Results:")
    print(f"[protoloop] Score: {feedback['overallScore']}")
    if visual:
        print(f"[protoloop] Visual score: {visual['visualScore']}")
    print(f"[protoloop] Positives: {', '.join(feedback['positives'])}")
    print(f"[protoloop] Issues: {', '.join(feedback['issues'])}")

    return {
        "feedback": feedback,
        "degraded_steps": degraded,
        "history": state["history"] + [record],
    }
