"""Entry point: validates input, runs the loop, writes the final report."""

import sys
from pathlib import Path

from protoloop.config import load_config
from protoloop.graph import (
    ITERATION_STEPS,
    build_graph,
    recursion_limit,
    route_after_score,
    run_single_step,
    should_confirm_continue,
)
from protoloop.state import LoopState, initial_state
from protoloop.utils.report import render_summary, write_report
from protoloop.utils.validator import validate_input

DEFAULT_PROMPT = (
    "Create a modern todo list app with add, delete, and mark complete functionality. "
    "Use a clean, minimalist design with good spacing and hover effects."
)


def _confirm_continue(state: LoopState) -> bool:
    """Ask the user in the terminal whether to keep improving past the threshold.

    Blocks on stdin with no timeout. EOF counts as "no".
    """
    feedback = state["feedback"] or {}
    visual = state.get("visual_feedback") or {}

    print("\n--- Threshold met, but issues remain ---\n")
    for issue in feedback.get("issues", []):
        print(f"  - {issue}")
    for issue in visual.get("designIssues", []):
        print(f"  - [visual] {issue}")

    try:
        answer = input("Keep improving? [y/N]: ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def _run_interactive(state: LoopState, config: dict) -> LoopState:
    """Manual loop with a confirmation pause when the threshold is met early."""
    state = run_single_step(state, "generate", config)

    while True:
        for step in ITERATION_STEPS:
            state = run_single_step(state, step, config)

        route = route_after_score(state, config)
        if route == "accept":
            if not should_confirm_continue(state, config):
                return run_single_step(state, "accept", config)
            if not _confirm_continue(state):
                return run_single_step(state, "stop", config)
        elif route == "timeout":
            return run_single_step(state, "timeout", config)

        state = run_single_step(state, "improve", config)


def run(design_prompt: str, config: dict) -> tuple[LoopState, Path]:
    """Run the full loop on a design prompt and write the report.

    Args:
        design_prompt: Natural-language description of the component.
        config: Loaded configuration, already carrying any CLI overrides.

    Returns the final state and the path of the written report.
    """
    validated = validate_input(design_prompt)
    state = initial_state(validated)

    print("[protoloop] Starting agentic prototyping workflow...")
    print(f"[protoloop] Design prompt: {validated}\n")

    if not config.get("hitl_enabled", False):
        graph = build_graph(config)
        final_state = graph.invoke(state, {"recursion_limit": recursion_limit(config)})
    else:
        final_state = _run_interactive(state, config)

    print(f"\n{render_summary(final_state)}")
    output_path = write_report(final_state, config)
    print(f"[protoloop] Iterations: {final_state['iteration']}")
    print(f"[protoloop] Report written to: {output_path}")
    return final_state, output_path


def parse_args(args: list[str]) -> tuple[str, dict]:
    """Split CLI arguments into the design prompt and config overrides."""
    args = list(args)
    overrides = {}

    for flag in ("--skip-generation", "-s"):
        while flag in args:
            overrides["skip_generation"] = True
            args.remove(flag)

    for flag in ("--no-human-input", "-n"):
        while flag in args:
            overrides["hitl_enabled"] = False
            args.remove(flag)

    design_prompt = " ".join(args) if args else DEFAULT_PROMPT
    return design_prompt, overrides


def main() -> None:
    """CLI entry point — accepts the design prompt as arguments."""
    design_prompt, overrides = parse_args(sys.argv[1:])

    try:
        config = load_config(overrides=overrides)
        run(design_prompt, config)
    except Exception as exc:
        print(f"[protoloop] Workflow failed: {exc!r}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
