"""
function_agent/prompts/function_agent.py

Prompt template for the Function Agent.
The system message is the agent preamble; the human message is the
f-string template whose placeholders are the node's prompt variables.
"""

import re
from string import Formatter
from typing import Any, Dict, List, Optional

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from function_agent.consts import DEFAULT_HUMAN_MESSAGE, DEFAULT_SYSTEM_MESSAGE
from function_agent.escaping import encode


def get_ordered_variables(template: str) -> List[str]:
    """
    Placeholder names in order of first appearance.
    (LangChain sorts input_variables, which loses the declared order.)
    """
    variables: List[str] = []
    for _, field_name, _, _ in Formatter().parse(template):
        if field_name is None:
            continue
        name = re.split(r"[.\[]", field_name, maxsplit=1)[0]
        if name and name not in variables:
            variables.append(name)
    return variables


class AgentTemplate(BaseModel):
    """Preamble and user-turn template of a Function Agent."""

    system_message: str = DEFAULT_SYSTEM_MESSAGE
    human_message: str = DEFAULT_HUMAN_MESSAGE
    variables: Optional[List[str]] = Field(
        default=None, description="Explicit variable order; parsed from human_message when unset."
    )

    @property
    def input_variables(self) -> List[str]:
        if self.variables is not None:
            return list(dict.fromkeys(self.variables))
        return get_ordered_variables(self.human_message)

    def bake(self, values: Dict[str, Any]) -> str:
        """
        Writes bound values into the human template text in one pass.
        Literal text and values are escaped so the formatting pass that follows
        leaves them intact; placeholders without a value stay as they are.
        """
        parts: List[str] = []
        for literal, field_name, format_spec, conversion in Formatter().parse(self.human_message):
            # parse() has already collapsed '{{' and '}}' in the literal text
            parts.append(encode(literal))
            if field_name is None:
                continue
            value = values.get(field_name)
            if value is not None:
                parts.append(encode(str(value)))
                continue
            placeholder = field_name
            if conversion:
                placeholder += f"!{conversion}"
            if format_spec:
                placeholder += f":{format_spec}"
            parts.append("{" + placeholder + "}")
        return "".join(parts)

    def render(self, values: Dict[str, Any]) -> List[BaseMessage]:
        """Formats the user turn with every variable bound."""
        prompt = ChatPromptTemplate.from_messages([("human", self.bake(values))])
        return prompt.format_messages()
