"""
function_agent/callbacks.py

Callback pipeline for one agent invocation:
1. LoggingCallbackHandler  - always first, writes lifecycle events to a logger.
2. StreamingCallbackHandler - only when a streaming target is given.
3. Caller-supplied handlers - appended in the given order.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.messages import BaseMessage
from langchain_core.outputs import LLMResult

from function_agent.schemas import StreamingTarget


def _run_name(serialized: Optional[Dict[str, Any]], kwargs: Dict[str, Any]) -> str:
    if kwargs.get("name"):
        return kwargs["name"]
    serialized = serialized or {}
    if serialized.get("name"):
        return serialized["name"]
    ids = serialized.get("id") or []
    return ids[-1] if ids else "unknown"


def _preview(value: Any, limit: int = 200) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + "..."


class LoggingCallbackHandler(BaseCallbackHandler):
    """Writes chain, LLM and tool events to a logger with per-run timings."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("function_agent.trace")
        self._started: Dict[UUID, float] = {}

    def _start(self, run_id: UUID) -> None:
        self._started[run_id] = time.perf_counter()

    def _elapsed(self, run_id: UUID) -> str:
        started = self._started.pop(run_id, None)
        if started is None:
            return "?"
        return f"{(time.perf_counter() - started) * 1000:.0f}ms"

    # --- Chains ---

    def on_chain_start(
        self, serialized: Dict[str, Any], inputs: Dict[str, Any], *, run_id: UUID, **kwargs: Any
    ) -> None:
        self._start(run_id)
        self.logger.debug(f"[chain/start] {_run_name(serialized, kwargs)} ({run_id})")

    def on_chain_end(self, outputs: Dict[str, Any], *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.debug(f"[chain/end] ({run_id}) after {self._elapsed(run_id)}")

    def on_chain_error(self, error: BaseException, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.error(f"[chain/error] ({run_id}) after {self._elapsed(run_id)}: {error}")

    # --- Models ---

    def on_llm_start(
        self, serialized: Dict[str, Any], prompts: List[str], *, run_id: UUID, **kwargs: Any
    ) -> None:
        self._start(run_id)
        self.logger.info(
            f"[llm/start] {_run_name(serialized, kwargs)} with {len(prompts)} prompt(s)"
        )

    def on_chat_model_start(
        self,
        serialized: Dict[str, Any],
        messages: List[List[BaseMessage]],
        *,
        run_id: UUID,
        **kwargs: Any,
    ) -> None:
        self._start(run_id)
        count = sum(len(batch) for batch in messages)
        self.logger.info(f"[llm/start] {_run_name(serialized, kwargs)} with {count} message(s)")

    def on_llm_new_token(self, token: str, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.debug(f"[llm/token] {token!r}")

    def on_llm_end(self, response: LLMResult, *, run_id: UUID, **kwargs: Any) -> None:
        usage = (response.llm_output or {}).get("token_usage")
        suffix = f", usage={usage}" if usage else ""
        self.logger.info(f"[llm/end] after {self._elapsed(run_id)}{suffix}")

    def on_llm_error(self, error: BaseException, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.error(f"[llm/error] after {self._elapsed(run_id)}: {error}")

    # --- Tools ---

    def on_tool_start(
        self, serialized: Dict[str, Any], input_str: str, *, run_id: UUID, **kwargs: Any
    ) -> None:
        self._start(run_id)
        self.logger.info(
            f"[tool/start] {_run_name(serialized, kwargs)} input={_preview(input_str)}"
        )

    def on_tool_end(self, output: Any, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.info(f"[tool/end] after {self._elapsed(run_id)} output={_preview(output)}")

    def on_tool_error(self, error: BaseException, *, run_id: UUID, **kwargs: Any) -> None:
        self.logger.error(f"[tool/error] after {self._elapsed(run_id)}: {error}")


class StreamingCallbackHandler(BaseCallbackHandler):
    """
    Pushes every generated token to the addressed channel, unbuffered.
    Tokens of intermediate tool-calling steps are forwarded too.
    """

    def __init__(self, target: StreamingTarget):
        self.target = target

    def on_llm_new_token(self, token: str, **kwargs: Any) -> None:
        # Tool-call chunks arrive with empty text
        if token:
            self.target.channel.send(self.target.session_id, token)


def build_callbacks(
    logger: Optional[logging.Logger] = None,
    streaming_target: Optional[StreamingTarget] = None,
    callbacks: Optional[Sequence[BaseCallbackHandler]] = None,
) -> List[BaseCallbackHandler]:
    """
    Assembles a fresh handler list for exactly one invocation.
    """
    pipeline: List[BaseCallbackHandler] = [LoggingCallbackHandler(logger)]
    if streaming_target is not None:
        pipeline.append(StreamingCallbackHandler(streaming_target))
    pipeline.extend(callbacks or [])
    return pipeline
