"""
function_agent/executor.py

Picks the invocation shape for a resolved request and runs it.

| resolution | call                                     | result               |
|------------|------------------------------------------|----------------------|
| FREE_FORM  | agent.invoke(raw_input, callbacks)       | returned as-is (str) |
| TEMPLATED  | agent.invoke_with_template(values, ...)  | formatted `text`     |
| ERROR      | none                                     | MissingVariablesError|

Streaming never changes the call, only the callback pipeline it receives.
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Sequence, Union

from langchain_core.callbacks import BaseCallbackHandler

from function_agent.agents.function_agent import AgentCapability
from function_agent.errors import MissingVariablesError
from function_agent.helpers import format_response
from function_agent.schemas import Resolution, ResolutionOutcome, StreamingTarget

Invocation = Literal["free_form", "templated"]


@dataclass(frozen=True)
class ExecutionMode:
    invocation: Invocation
    streaming: bool


def select_execution_mode(
    outcome: ResolutionOutcome, streaming_target: Optional[StreamingTarget]
) -> ExecutionMode:
    if outcome.kind is Resolution.ERROR:
        raise MissingVariablesError(outcome.missing)

    invocation: Invocation = (
        "templated" if outcome.kind is Resolution.TEMPLATED else "free_form"
    )
    return ExecutionMode(invocation=invocation, streaming=streaming_target is not None)


def normalize_templated_result(result: Any) -> Union[str, Dict[str, Any]]:
    if isinstance(result, dict) and "text" in result:
        return format_response(result["text"])
    return result


def run_prediction(
    agent: AgentCapability,
    raw_input: str,
    outcome: ResolutionOutcome,
    callbacks: Sequence[BaseCallbackHandler],
    mode: Optional[ExecutionMode] = None,
) -> Union[str, Dict[str, Any]]:
    mode = mode or select_execution_mode(outcome, None)

    if mode.invocation == "free_form":
        return agent.invoke(raw_input, callbacks)

    result = agent.invoke_with_template(outcome.bound_values, callbacks)
    return normalize_templated_result(result)
