import os
from pathlib import Path
from typing import Optional

import yaml

from prcomments_core.errors import InvalidArgumentError

DEFAULT_CONFIG: dict = {
    "github_api_url": "https://api.github.com",
    "hide_reason": "resolved",  # classifier used by `hide` when --reason is omitted
    "auto_cleanup": True,  # minimize fully-resolved reviews after `resolve`
    "list_body_width": 40,
    "tree_body_width": 60,
    "review_body_width": 50,
}

_BOOL_KEYS = ("auto_cleanup",)
_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _coerce_bool(key: str, value) -> bool:
    # YAML only yields a bool for unquoted true/false; quoted values arrive as str.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise InvalidArgumentError(f"invalid value for {key}: {value!r} (expected true or false)")


def load_config(config_path: str = ".prcomments.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prcomments.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    for key in _BOOL_KEYS:
        config[key] = _coerce_bool(key, config[key])

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
