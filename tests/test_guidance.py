"""Tests for protoloop.utils.guidance."""

from protoloop.utils.guidance import load_guidance


def test_enabled_returns_rules():
    rules = load_guidance({"guidance_enabled": True})
    assert "alt text" in rules
    assert rules.startswith("- ")


def test_disabled_returns_empty():
    assert load_guidance({"guidance_enabled": False}) == ""


def test_missing_key_returns_empty():
    assert load_guidance({}) == ""
