"""Shared fixtures for the protoloop test suite."""

import pytest

from protoloop.state import initial_state


@pytest.fixture
def config(tmp_path):
    """Test-friendly config with every output under tmp_path."""
    return {
        "project_path": str(tmp_path / "prototype"),
        "component_path": "src/components/GeneratedPrototype.tsx",
        "app_url": "http://localhost:5173",
        "generator_model": "test-generator",
        "planner_model": "test-planner",
        "scorer_model": "test-scorer",
        "improver_model": "test-improver",
        "vision_model": "test-vision",
        "max_iterations": 3,
        "feedback_threshold": 0.8,
        "reload_delay_seconds": 0,
        "headless": True,
        "screenshot_dir": str(tmp_path / "screenshots"),
        "report_path": str(tmp_path / "final-report.json"),
        "max_nav_links": 3,
        "interaction_wait_ms": 0,
        "visual_feedback_enabled": False,
        "hitl_enabled": False,
        "skip_generation": False,
        "guidance_enabled": False,
        "llm_max_retries": 0,
    }


@pytest.fixture
def base_state():
    """Minimal valid LoopState."""
    return initial_state("Build a counter")


@pytest.fixture
def sample_code():
    return (
        "import React, { useState } from 'react';\n"
        "\n"
        "const Counter: React.FC = () => {\n"
        "  const [count, setCount] = useState<number>(0);\n"
        "  return <button onClick={() => setCount(count + 1)}>{count}</button>;\n"
        "};\n"
        "\n"
        "export default Counter;"
    )


@pytest.fixture
def feedback_passing():
    """Scorer feedback above the default threshold with nothing left to fix."""
    return {
        "overallScore": 0.9,
        "positives": ["Counter increments"],
        "issues": [],
        "improvements": [],
        "reasoning": "Works as requested.",
    }


@pytest.fixture
def feedback_failing():
    """Scorer feedback below the default threshold."""
    return {
        "overallScore": 0.5,
        "positives": ["Renders"],
        "issues": ["No reset button"],
        "improvements": ["Add a reset button"],
        "reasoning": "Missing requested functionality.",
    }


@pytest.fixture
def valid_test_plan():
    return {
        "testScenarios": [
            {
                "name": "Increment counter",
                "description": "Click the button",
                "steps": ["Click the button"],
                "expectedOutcome": "Count goes up",
            }
        ],
        "usabilityChecks": ["Button is obvious"],
        "accessibilityChecks": ["Button has a label"],
    }
