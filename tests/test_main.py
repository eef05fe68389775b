"""Tests for the CLI entry point: argument parsing and exit codes."""

from unittest.mock import patch

import pytest

from protoloop.main import DEFAULT_PROMPT, main, parse_args


class TestParseArgs:
    def test_no_args_uses_default_prompt(self):
        assert parse_args([]) == (DEFAULT_PROMPT, {})

    def test_words_joined_into_prompt(self):
        prompt, overrides = parse_args(["Build", "a", "counter"])
        assert prompt == "Build a counter"
        assert overrides == {}

    @pytest.mark.parametrize("flag", ["--skip-generation", "-s"])
    def test_skip_generation_flag(self, flag):
        prompt, overrides = parse_args([flag, "Build a counter"])
        assert prompt == "Build a counter"
        assert overrides == {"skip_generation": True}

    @pytest.mark.parametrize("flag", ["--no-human-input", "-n"])
    def test_no_human_input_flag(self, flag):
        prompt, overrides = parse_args(["Build a counter", flag])
        assert prompt == "Build a counter"
        assert overrides == {"hitl_enabled": False}

    def test_both_flags_with_default_prompt(self):
        prompt, overrides = parse_args(["-s", "-n"])
        assert prompt == DEFAULT_PROMPT
        assert overrides == {"skip_generation": True, "hitl_enabled": False}


class TestMain:
    @patch("protoloop.main.run")
    @patch("protoloop.main.load_config", return_value={"hitl_enabled": False})
    def test_success_passes_prompt_and_config(self, mock_load, mock_run):
        with patch("sys.argv", ["protoloop", "-n", "Build a counter"]):
            main()

        mock_load.assert_called_once_with(overrides={"hitl_enabled": False})
        mock_run.assert_called_once_with("Build a counter", {"hitl_enabled": False})

    @patch("protoloop.main.run", side_effect=RuntimeError("401 Unauthorized"))
    @patch("protoloop.main.load_config", return_value={})
    def test_failure_exits_non_zero(self, _load, _run, capsys):
        with patch("sys.argv", ["protoloop"]), pytest.raises(SystemExit) as excinfo:
            main()

        assert excinfo.value.code == 1
        assert "Workflow failed" in capsys.readouterr().err
