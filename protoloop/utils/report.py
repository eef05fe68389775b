"""Report writer — serialises the run history and final code as JSON."""

import json
from pathlib import Path

from protoloop.state import LoopState


def _render_iteration(record: dict) -> dict:
    return {
        "iteration": record["iteration"],
        "score": record["score"],
        "visualScore": record.get("visual_score"),
        "feedback": record["feedback"],
        "visualFeedback": record.get("visual_feedback"),
        "degraded": record.get("degraded", []),
    }


def build_report(state: LoopState, config: dict) -> dict:
    """Return the report dictionary for a finished run."""
    return {
        "designPrompt": state["design_prompt"],
        "status": state["status"],
        "threshold": config["feedback_threshold"],
        "iterations": [_render_iteration(r) for r in state["history"]],
        "finalCode": state["current_code"],
    }


def render_summary(state: LoopState) -> str:
    """Plain-text score summary printed at the end of a run."""
    lines = ["Final Results:"]
    for record in state["history"]:
        line = f"Iteration {record['iteration']}: {record['score']}"
        if record.get("visual_score") is not None:
            line += f" (visual {record['visual_score']})"
        if record.get("degraded"):
            line += f" [fallback: {', '.join(record['degraded'])}]"
        lines.append(line)
    lines.append(f"Status: {state['status']}")
    return "\n".join(lines)


def write_report(state: LoopState, config: dict) -> Path:
    """Write the final report to the configured path.

    Never overwrites an earlier report: if the file exists a counter is
    appended (final-report (2).json, final-report (3).json, ...).

    Returns the Path to the written file.
    """
    base_path = Path(config["report_path"])
    output_dir = base_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    output_path = base_path
    counter = 1
    while output_path.exists():
        counter += 1
        output_path = output_dir / f"{base_path.stem} ({counter}){base_path.suffix}"

    output_path.write_text(
        json.dumps(build_report(state, config), indent=2), encoding="utf-8"
    )
    return output_path
