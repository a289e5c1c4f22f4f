from typing import Any, Iterable, List

from langchain_core.messages import AIMessage, BaseMessage


def content_to_text(content: Any) -> str:
    """
    Flattens message content into plain text.

    Some providers (Anthropic, Gemini) return a list of content blocks instead
    of a string; only the text blocks are kept.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def format_response(raw: Any) -> str:
    """Display text for a templated agent result."""
    return content_to_text(raw).strip()


def last_ai_message(messages: List[BaseMessage]) -> AIMessage:
    for msg in reversed(messages):
        if isinstance(msg, AIMessage):
            return msg
    raise ValueError("Agent returned no AI message")


def flatten_tools(tools: Iterable[Any]) -> List[Any]:
    """Tool inputs may arrive as nested lists (one list per toolkit)."""
    flat: List[Any] = []
    for tool in tools or []:
        if isinstance(tool, (list, tuple)):
            flat.extend(flatten_tools(tool))
        elif tool is not None:
            flat.append(tool)
    return flat
