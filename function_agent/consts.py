import os
from pathlib import Path

# Base Directories
BASE_DIR = Path(__file__).resolve().parent.parent

# ENV
ENV_PATH = BASE_DIR / ".env"

# Runtime config (runtime_nodes keyed by module path)
CHAT_CONFIG_PATH = BASE_DIR / "config.json"
FUNCTION_AGENT_NODE = "function_agent.nodes.function_agent"

# Agent defaults
DEFAULT_SYSTEM_MESSAGE = "You are a helpful AI assistant."
DEFAULT_HUMAN_MESSAGE = "{input}"
DEFAULT_MAX_ITERATIONS = 15

# Verbose agent tracing follows the DEBUG env flag
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

FINAL_RESULT_BANNER = "*****FINAL RESULT*****"
