"""
function_agent/agents/function_agent.py

The tool-calling agent capability: given input text, produce a result,
possibly invoking tools along the way. Built on LangChain v1.0+ create_agent.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from langchain.agents import create_agent
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from function_agent.callbacks import StreamingCallbackHandler
from function_agent.consts import DEFAULT_MAX_ITERATIONS
from function_agent.helpers import content_to_text, flatten_tools, last_ai_message
from function_agent.memory import ConversationMemory
from function_agent.prompts.function_agent import AgentTemplate

logger = logging.getLogger(__name__)


class AgentCapability(Protocol):
    template: AgentTemplate
    memory: Optional[ConversationMemory]

    def invoke(self, text: str, callbacks: Sequence[BaseCallbackHandler]) -> str: ...

    def invoke_with_template(
        self, values: Dict[str, Any], callbacks: Sequence[BaseCallbackHandler]
    ) -> Dict[str, Any]: ...


def build_function_agent(
    llm: BaseChatModel,
    tools: Sequence[Any],
    template: AgentTemplate,
    verbose: bool = False,
) -> Runnable:
    """
    Build the tool-calling agent graph.

    The template's system message becomes the agent preamble. Tools may be
    passed as nested lists and are flattened first.
    """
    return create_agent(
        model=llm,
        tools=flatten_tools(tools),
        system_prompt=template.system_message,
        debug=verbose,
    )


class FunctionAgent:
    """
    Wraps an agent runnable ({"messages": [...]} in and out) with its
    template and conversation memory.
    """

    def __init__(
        self,
        agent: Runnable,
        template: AgentTemplate,
        memory: Optional[ConversationMemory] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        self.agent = agent
        self.template = template
        self.memory = memory
        self.max_iterations = max_iterations

    def invoke(self, text: str, callbacks: Sequence[BaseCallbackHandler]) -> str:
        """
        Free-form invocation: the raw text is the user turn.

        Only the last AI message is returned. A streaming handler sees the
        tokens of every model step, so text a model writes next to a tool
        call reaches the channel but not the result.
        """
        new_messages = self._run([HumanMessage(content=text)], callbacks)
        answer = content_to_text(last_ai_message(new_messages).content)
        self._remember(text, answer)
        return answer

    def invoke_with_template(
        self, values: Dict[str, Any], callbacks: Sequence[BaseCallbackHandler]
    ) -> Dict[str, Any]:
        """Templated invocation: the user turn is the template with `values` bound."""
        turn = self.template.render(values)
        new_messages = self._run(turn, callbacks)
        reply = last_ai_message(new_messages)
        rendered = content_to_text(turn[-1].content)
        text = content_to_text(reply.content)
        self._remember(rendered, text)

        return {
            "text": text,
            "input": rendered,
            "messages": new_messages,
            "tool_calls": [
                call
                for msg in new_messages
                for call in (getattr(msg, "tool_calls", None) or [])
            ],
        }

    # --- internals ---

    def _history(self) -> List[BaseMessage]:
        if self.memory is None:
            return []
        history = self.memory.get_history()
        if isinstance(history, str):
            return [SystemMessage(content=f"Conversation so far:\n{history}")] if history else []
        return list(history)

    def _run(
        self, turn: List[BaseMessage], callbacks: Sequence[BaseCallbackHandler]
    ) -> List[BaseMessage]:
        messages = self._history() + list(turn)
        inputs = {"messages": messages}
        config = {
            "callbacks": list(callbacks),
            # Each ReAct loop is a model step plus a tool step
            "recursion_limit": 2 * self.max_iterations + 1,
        }
        if any(isinstance(handler, StreamingCallbackHandler) for handler in callbacks):
            # "messages" mode streams the chat model even when built with streaming unset
            result: Dict[str, Any] = {}
            for mode, payload in self.agent.stream(
                inputs, config=config, stream_mode=["messages", "values"]
            ):
                if mode == "values":
                    result = payload
        else:
            result = self.agent.invoke(inputs, config=config)
        # The agent echoes the input messages back; keep only what it added
        return list(result["messages"])[len(messages):]

    def _remember(self, input_text: str, output_text: str) -> None:
        if self.memory is not None:
            self.memory.save_turn(input_text, output_text)
            logger.debug(f"Saved turn to {self.memory!r}")
