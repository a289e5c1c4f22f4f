"""
function_agent/schemas.py

Per-request data containers for the Function Agent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from function_agent.channels import StreamChannel


@dataclass(frozen=True)
class StreamingTarget:
    """Addresses one live session on a stream channel."""

    channel: StreamChannel
    session_id: str


@dataclass
class ExecutionRequest:
    """
    One call into the agent.

    Attributes:
        raw_input: The live user message.
        prompt_values: Values pre-bound to template variables (may be partial or None).
        streaming_target: Where tokens are pushed as they are generated, if anywhere.
        chat_history: Request-scoped history replacing an in-process memory.
    """

    raw_input: str
    prompt_values: Optional[Dict[str, Any]] = None
    streaming_target: Optional[StreamingTarget] = None
    chat_history: Optional[Sequence[Any]] = None


class Resolution(str, Enum):
    FREE_FORM = "FREE_FORM"
    TEMPLATED = "TEMPLATED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ResolutionOutcome:
    kind: Resolution
    bound_values: Dict[str, Any] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
