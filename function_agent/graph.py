"""
function_agent/graph.py
"""

from typing import Any, Dict, Optional, Sequence

from dotenv import load_dotenv
from langgraph.graph import END, StateGraph

from function_agent.consts import ENV_PATH, FUNCTION_AGENT_NODE
from function_agent.config_loader import get_node_config
from function_agent.memory import ConversationMemory
from function_agent.nodes import make_function_agent_node
from function_agent.state import AgentState

load_dotenv(ENV_PATH)


def build_graph(
    config: Dict[str, Any],
    tools: Optional[Sequence[Any]] = None,
    memory: Optional[ConversationMemory] = None,
    **node_kwargs: Any,
):
    """
    Builds the StateGraph around the Function Agent node.

    Args:
        config: Full runtime config (with "runtime_nodes").
        tools: Tools handed to the agent.
        memory: Session memory shared across turns.
    """
    # 1. Instantiate Nodes
    agent_node = make_function_agent_node(
        get_node_config(config, FUNCTION_AGENT_NODE),
        tools=tools,
        memory=memory,
        **node_kwargs,
    )

    # 2. Build Graph
    workflow = StateGraph(AgentState)

    workflow.add_node("FUNCTION_AGENT", agent_node)

    workflow.set_entry_point("FUNCTION_AGENT")
    workflow.add_edge("FUNCTION_AGENT", END)

    return workflow.compile()
