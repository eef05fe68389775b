"""Config loading — built once at process start and passed to every node."""

from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of protoloop/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"


def _validate_config(config: dict) -> None:
    """Reject values the iteration controller cannot work with."""
    threshold = config.get("feedback_threshold")
    if not isinstance(threshold, (int, float)) or not 0 <= threshold <= 1:
        raise ValueError(f"feedback_threshold must be between 0 and 1, got {threshold!r}.")

    max_iterations = config.get("max_iterations")
    if not isinstance(max_iterations, int) or max_iterations < 1:
        raise ValueError(f"max_iterations must be a positive integer, got {max_iterations!r}.")

    delay = config.get("reload_delay_seconds", 0)
    if not isinstance(delay, (int, float)) or delay < 0:
        raise ValueError(f"reload_delay_seconds must be non-negative, got {delay!r}.")


def load_config(path: Path | None = None, overrides: dict | None = None) -> dict:
    """Read the YAML config, apply overrides, and return a fresh dictionary.

    Args:
        path: Alternate YAML file. Defaults to the packaged config.yaml.
        overrides: Values that win over the file (e.g. CLI flags).
    """
    load_dotenv(_PROJECT_ROOT / ".env")

    config_path = Path(path) if path else CONFIG_PATH
    config = yaml.safe_load(config_path.read_text()) or {}
    if overrides:
        config.update(overrides)

    _validate_config(config)
    return config
