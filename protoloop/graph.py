"""LangGraph StateGraph definition for the generate → test → score → improve loop."""

import time

from langgraph.graph import END, StateGraph

from protoloop.agents.critic import critic_node
from protoloop.agents.generator import generator_node
from protoloop.agents.improver import improver_node
from protoloop.agents.planner import planner_node
from protoloop.agents.scorer import scorer_node
from protoloop.agents.tester import tester_node
from protoloop.state import LoopState

# Nodes run, in order, for every iteration after the increment.
ITERATION_STEPS = ("increment", "wait", "plan", "test", "critique", "score")


def _route_after_score(state: LoopState, config: dict) -> str:
    """Conditional edge: decide next step after the Scorer node.

    Priority order:
    1. score >= threshold → accept
    2. iteration >= max_iterations → timeout (no improvement on the last round)
    3. otherwise → improve
    """
    if state["feedback"]["overallScore"] >= config["feedback_threshold"]:
        return "accept"

    if state["iteration"] >= config["max_iterations"]:
        return "timeout"

    return "improve"


def _increment_iteration(state: LoopState) -> dict:
    """Bump the iteration counter and clear the previous round's degraded steps."""
    iteration = state["iteration"] + 1
    print(f"\n[protoloop] Iteration {iteration}")
    return {"iteration": iteration, "degraded_steps": []}


def _wait_for_reload(config: dict) -> dict:
    """Give the dev server time to pick up the rewritten component.

    A fixed delay only; nothing confirms the reload actually happened.
    """
    time.sleep(config.get("reload_delay_seconds", 0))
    return {}


def _accept(state: LoopState, config: dict) -> dict:
    """Set status to threshold_met when the score clears the threshold."""
    print(
        f"\n[protoloop] Success! Reached feedback threshold of {config['feedback_threshold']}"
    )
    return {"status": "threshold_met"}


def _set_timeout(state: LoopState) -> dict:
    """Set status to max_iterations_reached when the loop ceiling is hit."""
    return {"status": "max_iterations_reached"}


def _stop_by_user(state: LoopState) -> dict:
    """Set status to stopped_by_user when the human declines further rounds."""
    return {"status": "stopped_by_user"}


def _build_nodes(config: dict) -> dict:
    """Bind config into every node."""
    return {
        "generate": lambda state: generator_node(state, config),
        "increment": lambda state: _increment_iteration(state),
        "wait": lambda state: _wait_for_reload(config),
        "plan": lambda state: planner_node(state, config),
        "test": lambda state: tester_node(state, config),
        "critique": lambda state: critic_node(state, config),
        "score": lambda state: scorer_node(state, config),
        "improve": lambda state: improver_node(state, config),
        "accept": lambda state: _accept(state, config),
        "timeout": lambda state: _set_timeout(state),
        "stop": lambda state: _stop_by_user(state),
    }


def build_graph(config: dict):
    """Compile the autonomous loop (no human confirmation) for this config."""
    workflow = StateGraph(LoopState)

    for name, node_fn in _build_nodes(config).items():
        if name != "stop":
            workflow.add_node(name, node_fn)

    workflow.set_entry_point("generate")

    workflow.add_edge("generate", "increment")
    for current, following in zip(ITERATION_STEPS, ITERATION_STEPS[1:]):
        workflow.add_edge(current, following)

    workflow.add_conditional_edges(
        "score",
        lambda state: _route_after_score(state, config),
        {
            "accept": "accept",
            "timeout": "timeout",
            "improve": "improve",
        },
    )

    workflow.add_edge("improve", "increment")
    workflow.add_edge("accept", END)
    workflow.add_edge("timeout", END)

    return workflow.compile()


def recursion_limit(config: dict) -> int:
    """Graph step budget large enough for max_iterations full rounds."""
    steps_per_iteration = len(ITERATION_STEPS) + 1  # + improve
    return steps_per_iteration * config["max_iterations"] + 10


# --- Step-execution helpers for the human-in-the-loop manual loop ---


def run_single_step(state: LoopState, node_name: str, config: dict) -> LoopState:
    """Run a single node and return the updated state.

    Used by the CLI for manual step-by-step execution with confirmation.
    """
    node_fn = _build_nodes(config)[node_name]
    updates = node_fn(state)
    return {**state, **updates}


def has_outstanding_issues(state: LoopState) -> bool:
    """Return True if the latest functional or visual feedback lists any issue."""
    feedback = state.get("feedback") or {}
    visual = state.get("visual_feedback") or {}
    return bool(feedback.get("issues")) or bool(visual.get("designIssues"))


def should_confirm_continue(state: LoopState, config: dict) -> bool:
    """Return True when a human should decide whether to keep improving.

    Only offered when the score has met the threshold but issues remain and
    there are iterations left to spend on them.
    """
    if not config.get("hitl_enabled", False):
        return False
    if _route_after_score(state, config) != "accept":
        return False
    if state["iteration"] >= config["max_iterations"]:
        return False
    return has_outstanding_issues(state)


def route_after_score(state: LoopState, config: dict) -> str:
    """Public wrapper around _route_after_score for manual loop usage."""
    return _route_after_score(state, config)
