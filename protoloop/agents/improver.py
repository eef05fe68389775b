"""Improver Agent — revises the current component from the latest feedback."""

from langchain_openai import ChatOpenAI

from protoloop.agents.generator import write_component
from protoloop.state import LoopState
from protoloop.utils.extraction import extract_code
from protoloop.utils.guidance import load_guidance
from protoloop.utils.parsing import invoke_with_retry

SYSTEM_PROMPT = """\
You are a React TypeScript developer improving a component based on UX feedback.

CRITICAL INSTRUCTIONS:
- Return ONLY the raw TypeScript React code, no markdown formatting, no code blocks, no explanations
- Do NOT wrap the code in ```jsx or ```tsx or any other formatting
- The response should start directly with "import" and end with the component export
- Keep the core functionality intact
- Address the specific issues mentioned in the feedback
- Implement the suggested improvements
- Use modern React patterns and Tailwind CSS
- Use TypeScript with proper type annotations
"""


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "- (none)"


def _build_system_prompt(state: LoopState, config: dict) -> str:
    """Append the outstanding feedback (functional and visual) to the system prompt."""
    feedback = state["feedback"] or {}
    visual = state.get("visual_feedback") or {}

    issues = feedback.get("issues", []) + visual.get("designIssues", [])
    improvements = feedback.get("improvements", []) + visual.get("designImprovements", [])

    parts = [
        SYSTEM_PROMPT,
        f"Current issues to address:\n{_bullets(issues)}",
        f"\nSuggested improvements:\n{_bullets(improvements)}",
    ]

    if len(state["history"]) > 1:
        scores = ", ".join(
            f"iteration {r['iteration']}: {r['score']}" for r in state["history"]
        )
        parts.append(f"\nScore history (do not regress): {scores}")

    guidance = load_guidance(config)
    if guidance:
        parts.append(f"\n## UI Guidelines\n{guidance}")

    return "\n".join(parts)


def improver_node(state: LoopState, config: dict) -> dict:
    """Improver node for the loop graph.

    Sends current_code plus the latest feedback to the improver model,
    overwrites the component file, and returns the revised current_code.
    """
    print("[protoloop] Improving prototype based on feedback...")
    llm = ChatOpenAI(model=config["improver_model"], temperature=0.3, max_retries=0)

    messages = [
        {"role": "system", "content": _build_system_prompt(state, config)},
        {"role": "user", "content": f"Current component code:\n{state['current_code']}"},
    ]

    response = invoke_with_retry(llm, messages, config.get("llm_max_retries", 0))
    code = extract_code(response.content)

    path = write_component(code, config)
    print(f"[protoloop] Prototype improved and saved to {path}")
    return {"current_code": code}
