"""
CodeVault configuration: db.yaml (store location) and settings.yaml
(auth, snippet, badge and custom-role defaults).
"""

import os
import yaml

CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))


def _load_yaml(filename: str) -> dict:
    path = os.path.join(CONFIG_DIR, filename)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_database_config() -> dict:
    return _load_yaml("db.yaml")


def get_system_config() -> dict:
    return _load_yaml("settings.yaml")


def get_setting(section: str, key: str, default=None):
    return get_system_config().get(section, {}).get(key, default)
