import yaml
import os


def load_config(config_path):
    if not os.path.exists(config_path):
        print(f"⚠️ Config file not found: {config_path}, using defaults")
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_setting(config: dict, dotted_key: str, default=None):
    """
    Reads `player.executable` style keys from the nested config dict.
    """
    node = config
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node if node is not None else default
