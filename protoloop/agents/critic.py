"""Critic Agent — optional visual review of the rendered component.

Sends the initial screenshot of the running app, alongside the design
prompt, to a vision-capable model.

Required output schema:
{
  "visualScore": 0.0-1.0,
  "designPositives": ["string"],
  "designIssues": ["string"],
  "designImprovements": ["string"],
  "visualReasoning": "string"
}
"""

import base64
import mimetypes
import sys
from pathlib import Path

from langchain_openai import ChatOpenAI

from protoloop.state import LoopState
from protoloop.utils.normalize import normalize_visual_feedback
from protoloop.utils.parsing import invoke_with_retry, parse_json_response, report_fallback

SYSTEM_PROMPT = """\
You are a senior visual and interaction designer reviewing a screenshot of a rendered \
React component against the designer's original request.

Judge layout, spacing, typography, colour and contrast, visual hierarchy, and how well \
the screenshot matches the request. Ignore anything you cannot see.

CRITICAL: Return ONLY valid JSON, no explanations or additional text. The response must \
start with { and end with }.

Return a JSON object with this exact structure:
{
  "visualScore": 0.85,
  "designPositives": ["Good thing 1", "Good thing 2"],
  "designIssues": ["Issue 1", "Issue 2"],
  "designImprovements": ["Suggestion 1", "Suggestion 2"],
  "visualReasoning": "Detailed explanation of the score"
}

Score should be between 0 and 1 (e.g., 0.85 for 85%). Leave designIssues empty when \
nothing needs to change.
"""

VISUAL_FALLBACK = {
    "visualScore": 0.5,
    "designPositives": [],
    "designIssues": ["Unable to analyze screenshot"],
    "designImprovements": [],
    "visualReasoning": "Fallback response: the screenshot could not be analyzed",
}


def encode_image_to_data_url(path: str) -> str:
    """Read an image file and return it as a base64 data: URL."""
    mime = mimetypes.guess_type(path)[0] or "image/png"
    b64 = base64.b64encode(Path(path).read_bytes()).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def _request_visual_feedback(screenshot: str, design_prompt: str, config: dict):
    llm = ChatOpenAI(model=config["vision_model"], temperature=0.1, max_retries=0)
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": [
            {"type": "image_url", "image_url": {"url": encode_image_to_data_url(screenshot)}},
            {"type": "text", "text": f"Original design prompt:\n{design_prompt}"},
        ]},
    ]
    response = invoke_with_retry(llm, messages, config.get("llm_max_retries", 0))
    return parse_json_response(response.content, VISUAL_FALLBACK)


def critic_node(state: LoopState, config: dict) -> dict:
    """Critic node for the loop graph.

    Returns visual_feedback=None when visual feedback is disabled. A missing
    screenshot or a failed vision call yields the low-confidence fallback so
    the iteration still gets scored.
    """
    if not config.get("visual_feedback_enabled", False):
        return {"visual_feedback": None}

    print("[protoloop] Analyzing screenshot...")
    screenshot = (state.get("observations") or {}).get("screenshot", "")

    try:
        result = _request_visual_feedback(screenshot, state["design_prompt"], config)
    except Exception as exc:
        print(
            f"[protoloop] Warning: screenshot analysis failed ({exc!r}), using fallback.",
            file=sys.stderr,
        )
        return {
            "visual_feedback": normalize_visual_feedback(VISUAL_FALLBACK),
            "degraded_steps": state["degraded_steps"] + ["visual_feedback"],
        }

    report_fallback("visual feedback", result)
    visual = normalize_visual_feedback(result.value)
    print(f"[protoloop] Visual score: {visual['visualScore']}")

    updates = {"visual_feedback": visual}
    if result.degraded:
        updates["degraded_steps"] = state["degraded_steps"] + ["visual_feedback"]
    return updates
