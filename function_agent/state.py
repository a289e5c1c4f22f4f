"""
function_agent/state.py

LangGraph state schema for the Function Agent graph.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, TypedDict, Union

from langgraph.graph.message import add_messages


class AgentState(TypedDict, total=False):
    """
    Execution-time container for one agent turn.

    Attributes:
        messages: Ordered chat history; the last message is the live user input.
        prompt_values: Per-turn values for template variables (overrides the node config).
        response: Display text of the agent's reply.
        result: The raw agent result (string, or dict for templated runs).
    """

    messages: Annotated[List[Any], add_messages]
    prompt_values: Optional[Dict[str, Any]]
    response: Optional[str]
    result: Optional[Union[str, Dict[str, Any]]]
