"""
function_agent/config_loader.py
Loads the JSON runtime config and picks out per-node sections.

Expected shape:
    {"runtime_nodes": {"<node module path>": {...node settings...}}}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from function_agent.consts import CHAT_CONFIG_PATH
from function_agent.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = CHAT_CONFIG_PATH


def _runtime_nodes(full_config: Dict[str, Any]) -> Dict[str, Any]:
    runtime_nodes = full_config.get("runtime_nodes")
    if not isinstance(runtime_nodes, dict):
        raise ConfigurationError("Runtime config needs a 'runtime_nodes' mapping")
    return runtime_nodes


def load_runtime_config(config_path: Optional[Path | str] = None) -> Dict[str, Any]:
    """
    Reads the runtime config and checks it has a 'runtime_nodes' section.
    """
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            full_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(full_config, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object")
    nodes = _runtime_nodes(full_config)
    logger.info(f"Loaded runtime config from {path} ({len(nodes)} node(s))")
    return full_config


def get_node_config(full_config: Dict[str, Any], module_path: str) -> Dict[str, Any]:
    """
    Returns the settings of one node, keyed by its module path.
    A node without an entry is a configuration error, not an empty config.
    """
    node_config = _runtime_nodes(full_config).get(module_path)
    if node_config is None:
        raise ConfigurationError(f"No runtime config for node '{module_path}'")
    if not isinstance(node_config, dict):
        raise ConfigurationError(f"Runtime config for node '{module_path}' must be an object")
    return node_config
