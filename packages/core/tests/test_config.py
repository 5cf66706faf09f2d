"""Tests for configuration loading."""

import pytest

from ticketmatch_core.config import load_config
from ticketmatch_core.exceptions import ConfigError


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["jira_url"] == "https://tickets.puppetlabs.com"
    assert config["project"] is None
    assert config["terminal_states"] == ["Resolved", "Closed", "Done"]
    assert "UNMARKED" in config["exempt_tokens"]
    assert config["timeout"] == 30


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("project: FACT\njira_url: https://jira.example.com\n")
    config = load_config(config_path=str(cfg))
    assert config["project"] == "FACT"
    assert config["jira_url"] == "https://jira.example.com"


def test_terminal_states_loaded(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("terminal_states:\n  - Shipped\n  - Won't Do\n")
    config = load_config(config_path=str(cfg))
    assert config["terminal_states"] == ["Shipped", "Won't Do"]


def test_empty_config_file_keeps_defaults(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["timeout"] == 30


def test_env_vars_loaded(monkeypatch):
    monkeypatch.setenv("JIRA_USER", "release-bot")
    monkeypatch.setenv("JIRA_TOKEN", "secret")
    config = load_config(config_path="nonexistent.yml")
    assert config["jira_user"] == "release-bot"
    assert config["jira_token"] == "secret"


def test_missing_env_vars_are_none(monkeypatch):
    monkeypatch.delenv("JIRA_USER", raising=False)
    monkeypatch.delenv("JIRA_TOKEN", raising=False)
    config = load_config(config_path="nonexistent.yml")
    assert config["jira_user"] is None
    assert config["jira_token"] is None


def test_list_defaults_are_not_shared_reference(tmp_path):
    """Mutating one config's lists must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["exempt_tokens"].append("CHORE")
    config_a["terminal_states"].append("Shipped")
    assert "CHORE" not in config_b["exempt_tokens"]
    assert "Shipped" not in config_b["terminal_states"]


def test_scalar_terminal_states_rejected(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("terminal_states: Resolved\n")
    with pytest.raises(ConfigError, match="terminal_states"):
        load_config(config_path=str(cfg))


def test_scalar_exempt_tokens_rejected(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("exempt_tokens: MAINT\n")
    with pytest.raises(ConfigError, match="exempt_tokens"):
        load_config(config_path=str(cfg))


def test_non_string_list_items_rejected(tmp_path):
    cfg = tmp_path / ".ticketmatch.yml"
    cfg.write_text("terminal_states:\n  - Resolved\n  - 42\n")
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))
