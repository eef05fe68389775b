"""Tests for protoloop.config.load_config."""

from unittest.mock import patch

import pytest

from protoloop.config import load_config


@pytest.fixture
def yaml_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "max_iterations: 4\n"
        "feedback_threshold: 0.75\n"
        "reload_delay_seconds: 1\n"
        "hitl_enabled: true\n"
    )
    return path


@patch("protoloop.config.load_dotenv")
class TestLoadConfig:
    def test_packaged_config_loads(self, _dotenv):
        config = load_config()
        assert config["max_iterations"] >= 1
        assert 0 <= config["feedback_threshold"] <= 1
        assert config["llm_max_retries"] == 0

    def test_reads_given_file(self, _dotenv, yaml_path):
        config = load_config(yaml_path)
        assert config["max_iterations"] == 4
        assert config["feedback_threshold"] == 0.75

    def test_overrides_win(self, _dotenv, yaml_path):
        config = load_config(yaml_path, overrides={"hitl_enabled": False})
        assert config["hitl_enabled"] is False

    def test_each_call_returns_a_fresh_dict(self, _dotenv, yaml_path):
        first = load_config(yaml_path)
        first["max_iterations"] = 99
        assert load_config(yaml_path)["max_iterations"] == 4

    def test_threshold_out_of_range_raises(self, _dotenv, yaml_path):
        with pytest.raises(ValueError, match="feedback_threshold"):
            load_config(yaml_path, overrides={"feedback_threshold": 1.5})

    def test_zero_iterations_raises(self, _dotenv, yaml_path):
        with pytest.raises(ValueError, match="max_iterations"):
            load_config(yaml_path, overrides={"max_iterations": 0})

    def test_negative_delay_raises(self, _dotenv, yaml_path):
        with pytest.raises(ValueError, match="reload_delay_seconds"):
            load_config(yaml_path, overrides={"reload_delay_seconds": -1})
