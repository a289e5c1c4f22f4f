"""
function_agent/defaults/function_agent.py
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from function_agent.config_schemas import LLMConfig
from function_agent.consts import (DEBUG, DEFAULT_HUMAN_MESSAGE,
                                   DEFAULT_MAX_ITERATIONS,
                                   DEFAULT_SYSTEM_MESSAGE)


class FunctionAgentNodeConfig(BaseModel):
    """
    Configuration for the tool-calling Function Agent node.
    """

    llm: LLMConfig
    system_message: str = Field(
        default=DEFAULT_SYSTEM_MESSAGE,
        description="Preamble handed to the agent as its system prompt.",
    )
    human_message: str = Field(
        default=DEFAULT_HUMAN_MESSAGE,
        description="f-string template for the user turn.",
    )
    prompt_values: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Values pre-bound to template variables by the flow designer.",
    )
    max_history_limit: int = Field(default=10, gt=0)
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERATIONS, ge=1, description="Max ReAct loops before stopping."
    )
    verbose: bool = DEBUG

    @field_validator("prompt_values", mode="before")
    @classmethod
    def parse_prompt_values(cls, value: Any) -> Any:
        # Flow editors store the map as a JSON string
        if isinstance(value, str):
            return json.loads(value) if value.strip() else None
        return value
