"""
function_agent/orchestrator.py

Runs one ExecutionRequest against a Function Agent:
1. Inject request-scoped chat history (in-process memory only).
2. Switch memory to structured messages for chat models.
3. Build the callback pipeline.
4. Resolve prompt variables (fail fast when ambiguous).
5. Select the invocation shape and run it.
6. Log and return the result.

Memory is mutated without locking; callers serialize requests per session.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

from langchain_core.callbacks import BaseCallbackHandler

from function_agent.agents.function_agent import AgentCapability
from function_agent.callbacks import build_callbacks
from function_agent.consts import FINAL_RESULT_BANNER
from function_agent.executor import run_prediction, select_execution_mode
from function_agent.memory import OutputMode
from function_agent.resolver import resolve_prompt_variables
from function_agent.schemas import ExecutionRequest

logger = logging.getLogger(__name__)


def prepare_memory(agent: AgentCapability, request: ExecutionRequest) -> None:
    memory = agent.memory
    if memory is None:
        return

    if request.chat_history is not None:
        # Externally persisted histories are never replaced by a request-scoped one
        if memory.is_in_process:
            memory.set_history(request.chat_history)
        else:
            logger.debug(f"Keeping external history, ignoring override for {memory!r}")

    memory.set_output_mode(OutputMode.STRUCTURED)


def run_agent(
    agent: AgentCapability,
    request: ExecutionRequest,
    trace_logger: Optional[logging.Logger] = None,
    callbacks: Optional[Sequence[BaseCallbackHandler]] = None,
) -> Union[str, Dict[str, Any]]:
    """
    Executes a single agent request end to end.

    Args:
        agent: The configured agent capability.
        request: Raw input, prompt values, streaming target and history override.
        trace_logger: Logger for the lifecycle handler (defaults to 'function_agent.trace').
        callbacks: Extra handlers appended after the built-in ones.

    Raises:
        MissingVariablesError: Two or more template variables are unbound.
    """
    prepare_memory(agent, request)

    pipeline = build_callbacks(trace_logger, request.streaming_target, callbacks)

    outcome = resolve_prompt_variables(
        agent.template.input_variables, request.prompt_values, request.raw_input
    )
    mode = select_execution_mode(outcome, request.streaming_target)
    logger.info(
        f"Running agent: invocation={mode.invocation}, streaming={mode.streaming}, "
        f"handlers={len(pipeline)}"
    )

    result = run_prediction(agent, request.raw_input, outcome, pipeline, mode=mode)

    logger.info(f"\n{FINAL_RESULT_BANNER}\n{result}")
    return result
