"""
function_agent/nodes/function_agent.py
Factory for the Function Agent graph node.
Builds the tool-calling agent once and runs the orchestrator per turn.
===
"""

from typing import Any, Callable, Dict, Optional, Sequence

from langchain.chat_models import init_chat_model
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, convert_to_messages
from langchain_core.runnables import RunnableConfig
from pydantic import ValidationError

from function_agent.agents.function_agent import FunctionAgent, build_function_agent
from function_agent.defaults.function_agent import FunctionAgentNodeConfig
from function_agent.errors import ConfigurationError
from function_agent.helpers import content_to_text
from function_agent.memory import ConversationMemory
from function_agent.orchestrator import run_agent
from function_agent.prompts.function_agent import AgentTemplate
from function_agent.schemas import ExecutionRequest
from function_agent.state import AgentState


def make_function_agent_node(
    config_dict: Dict[str, Any],
    tools: Optional[Sequence[Any]] = None,
    memory: Optional[ConversationMemory] = None,
    llm: Optional[BaseChatModel] = None,
) -> Callable[[AgentState, RunnableConfig], Dict[str, Any]]:
    """
    Factory that builds the function agent node.

    Args:
        config_dict: Raw dictionary from config.json.
                     Validated internally against FunctionAgentNodeConfig.
        tools: Tools the agent may call (nested lists are flattened).
        memory: Session memory; in-process memories take the graph's history each turn.
        llm: Pre-built chat model; built from config.llm when omitted.
    """

    # 1. Validate Configuration (Fail fast if invalid)
    try:
        node_config = FunctionAgentNodeConfig(**config_dict)
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid function agent config: {e}") from e

    # 2. Instantiate LLM from Config
    if llm is None:
        llm = init_chat_model(**node_config.llm.model_dump(exclude_none=True))

    if memory is not None and memory.max_messages is None:
        memory.max_messages = node_config.max_history_limit

    # 3. Build the agent once at startup
    template = AgentTemplate(
        system_message=node_config.system_message, human_message=node_config.human_message
    )
    agent = FunctionAgent(
        build_function_agent(llm, tools or [], template, verbose=node_config.verbose),
        template,
        memory=memory,
        max_iterations=node_config.max_iterations,
    )

    # 4. Define Runtime Node
    def function_agent_node(state: AgentState, config: RunnableConfig) -> Dict[str, Any]:
        """
        Runs the agent on the last message of the state.

        The streaming target and extra callbacks travel in
        config["configurable"] ("streaming_target", "agent_callbacks")
        since they are not serializable state.
        """
        messages = convert_to_messages(state.get("messages", []))
        if not messages:
            return {}

        last_msg = messages[-1]
        user_text = content_to_text(last_msg.content)

        configurable = (config or {}).get("configurable", {}) or {}
        prompt_values = state.get("prompt_values")
        if prompt_values is None:
            prompt_values = node_config.prompt_values

        request = ExecutionRequest(
            raw_input=user_text,
            prompt_values=prompt_values,
            streaming_target=configurable.get("streaming_target"),
            chat_history=list(messages[:-1]),
        )

        result = run_agent(agent, request, callbacks=configurable.get("agent_callbacks"))
        response = result if isinstance(result, str) else content_to_text(result.get("text", ""))

        return {
            "messages": [AIMessage(content=response)],
            "response": response,
            "result": result,
        }

    return function_agent_node
