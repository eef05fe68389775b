"""Planner Agent — derives a usability test plan from the current component.

Required output schema:
{
  "testScenarios": [
    {"name": "string", "description": "string", "steps": ["string"], "expectedOutcome": "string"}
  ],
  "usabilityChecks": ["string"],
  "accessibilityChecks": ["string"]
}
"""

from langchain_openai import ChatOpenAI

from protoloop.state import LoopState
from protoloop.utils.normalize import normalize_test_plan
from protoloop.utils.parsing import invoke_with_retry, parse_json_response, report_fallback

SYSTEM_PROMPT = """\
You are a UX testing expert. Create a comprehensive usability test plan for the React \
component provided.

CRITICAL: Return ONLY valid JSON, no explanations or additional text. The response must \
start with { and end with }.

Return a JSON object with this exact structure:
{
  "testScenarios": [
    {
      "name": "Test name",
      "description": "What to test",
      "steps": ["Step 1", "Step 2", "Step 3"],
      "expectedOutcome": "What should happen"
    }
  ],
  "usabilityChecks": [
    "Check 1",
    "Check 2"
  ],
  "accessibilityChecks": [
    "A11y check 1",
    "A11y check 2"
  ]
}
"""

TEST_PLAN_FALLBACK = {
    "testScenarios": [
        {
            "name": "Basic interaction test",
            "description": "Test basic UI interactions",
            "steps": ["Click available buttons", "Fill any input fields", "Check for responses"],
            "expectedOutcome": "UI should respond to user interactions",
        }
    ],
    "usabilityChecks": [
        "Check if buttons are clickable",
        "Check if text is readable",
    ],
    "accessibilityChecks": [
        "Check for alt text on images",
        "Check for proper heading structure",
    ],
}


def planner_node(state: LoopState, config: dict) -> dict:
    """Planner node for the loop graph.

    Sends current_code to the configured planner model and returns a
    normalised test_plan. Unparseable replies fall back to a generic plan and
    are recorded in degraded_steps.
    """
    print("[protoloop] Generating usability test plan...")
    llm = ChatOpenAI(model=config["planner_model"], temperature=0.1, max_retries=0)

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Component code:\n{state['current_code']}"},
    ]

    response = invoke_with_retry(llm, messages, config.get("llm_max_retries", 0))
    result = parse_json_response(response.content, TEST_PLAN_FALLBACK)
    report_fallback("test plan", result)

    updates = {"test_plan": normalize_test_plan(result.value)}
    if result.degraded:
        updates["degraded_steps"] = state["degraded_steps"] + ["test_plan"]
    else:
        print("[protoloop] Test plan generated")
    return updates
