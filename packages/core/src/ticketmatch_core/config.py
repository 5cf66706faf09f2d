import os
from pathlib import Path

import yaml

from ticketmatch_core.exceptions import ConfigError

DEFAULT_CONFIG: dict = {
    "jira_url": "https://tickets.puppetlabs.com",
    "project": None,  # None = ask, or fail in --ci mode
    "terminal_states": ["Resolved", "Closed", "Done"],
    # commit tokens that never need a ticket
    "exempt_tokens": ["MAINT", "DOC", "DOCS", "TRIVIAL", "PACKAGING", "UNMARKED"],
    "team_field": "customfield_14200",
    "release_note_field": "customfield_11100",
    "timeout": 30,
}

_LIST_KEYS = ("terminal_states", "exempt_tokens")


def load_config(config_path: str = ".ticketmatch.yml") -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .ticketmatch.yml in the current directory

    Raises ConfigError if a list setting is given as anything but a list of strings.
    """
    config = {**DEFAULT_CONFIG}
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for key in _LIST_KEYS:
        value = config[key]
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ConfigError(f"{config_path}: '{key}' must be a list of strings, got {value!r}")

    # Jira credentials come from the environment only
    config["jira_user"] = os.environ.get("JIRA_USER")
    config["jira_token"] = os.environ.get("JIRA_TOKEN")

    return config
