"""
function_agent/memory.py

Conversation memory shared by the agent and the orchestrator.
Handles:
1. Short-Term: Context window trimming (message count).
2. Storage kind: in-process history (replaceable per request) vs. an
   externally persisted history (never replaced by a request override).
3. Output mode: structured chat messages or a flattened transcript.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from langchain_core.chat_history import (BaseChatMessageHistory,
                                         InMemoryChatMessageHistory)
from langchain_core.messages import (AIMessage, BaseMessage, HumanMessage,
                                     convert_to_messages, get_buffer_string,
                                     trim_messages)

# ─────────────────────────────────────────────────────────────────────────────
# 1. SHORT-TERM MEMORY (Context Window)
# ─────────────────────────────────────────────────────────────────────────────


def trim_conversation_history(
    messages: List[BaseMessage], max_messages: int = 10
) -> List[BaseMessage]:
    """
    Truncates conversation history to fit within the model's context window.
    Always preserves the System Message and the most recent N messages.
    """
    return trim_messages(
        messages,
        max_tokens=max_messages,  # Using message count as proxy for tokens here
        strategy="last",
        token_counter=len,  # 1 message = 1 token (simplification)
        include_system=True,
        allow_partial=False,
        start_on="human",  # Don't cut in the middle of a Q&A pair
    )


# Flow-builder history records use these type tags
_HISTORY_ROLES = {
    "userMessage": "human",
    "apiMessage": "ai",
}


def map_chat_history(history: Sequence[Any]) -> List[BaseMessage]:
    """
    Converts a request-scoped chat history into LangChain messages.

    Accepts LangChain messages, role/content dicts and
    {"type": "userMessage" | "apiMessage", "message": ...} records.
    """
    normalized: List[Any] = []
    for item in history:
        if isinstance(item, dict) and item.get("type") in _HISTORY_ROLES:
            normalized.append(
                {"role": _HISTORY_ROLES[item["type"]], "content": item.get("message", "")}
            )
        else:
            normalized.append(item)
    return convert_to_messages(normalized)


# ─────────────────────────────────────────────────────────────────────────────
# 2. CONVERSATION MEMORY
# ─────────────────────────────────────────────────────────────────────────────


class MemoryKind(str, Enum):
    IN_PROCESS = "in_process"
    EXTERNAL = "external"


class OutputMode(str, Enum):
    STRUCTURED = "structured"  # list of chat messages, for chat models
    FLATTENED = "flattened"  # single "Human: ... / AI: ..." transcript


class ConversationMemory:
    """
    Mutable store of prior turns for one session.

    The kind is fixed at construction; use `in_process_memory` or
    `external_memory` rather than building one directly.
    """

    def __init__(
        self,
        chat_history: BaseChatMessageHistory,
        kind: MemoryKind,
        output_mode: OutputMode = OutputMode.FLATTENED,
        max_messages: Optional[int] = None,
    ):
        self.chat_history = chat_history
        self.kind = kind
        self.output_mode = output_mode
        self.max_messages = max_messages

    @property
    def is_in_process(self) -> bool:
        return self.kind is MemoryKind.IN_PROCESS

    def get_history(self) -> Union[List[BaseMessage], str]:
        messages = list(self.chat_history.messages)
        if self.max_messages:
            messages = trim_conversation_history(messages, max_messages=self.max_messages)

        if self.output_mode is OutputMode.STRUCTURED:
            return messages
        return get_buffer_string(messages)

    def set_history(self, messages: Sequence[Any]) -> None:
        self.chat_history.clear()
        self.chat_history.add_messages(map_chat_history(messages))

    def set_output_mode(self, mode: OutputMode) -> None:
        self.output_mode = OutputMode(mode)

    def save_turn(self, input_text: str, output_text: str) -> None:
        self.chat_history.add_messages(
            [HumanMessage(content=input_text), AIMessage(content=output_text)]
        )

    def clear(self) -> None:
        self.chat_history.clear()

    def __repr__(self) -> str:
        return (
            f"ConversationMemory(kind={self.kind.value}, "
            f"output_mode={self.output_mode.value}, "
            f"messages={len(self.chat_history.messages)})"
        )


def in_process_memory(
    messages: Optional[Sequence[Any]] = None, max_messages: Optional[int] = None
) -> ConversationMemory:
    """Memory backed by a plain in-process message list."""
    history = InMemoryChatMessageHistory()
    if messages:
        history.add_messages(map_chat_history(messages))
    return ConversationMemory(history, MemoryKind.IN_PROCESS, max_messages=max_messages)


def external_memory(
    chat_history: BaseChatMessageHistory, max_messages: Optional[int] = None
) -> ConversationMemory:
    """
    Memory backed by an externally persisted history (database, cache, ...).
    Request-scoped history overrides never replace it.
    """
    return ConversationMemory(chat_history, MemoryKind.EXTERNAL, max_messages=max_messages)
