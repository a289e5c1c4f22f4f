"""
function_agent/channels.py

Live delivery channels for streamed tokens.
A channel only needs `send(session_id, chunk)`; delivery is best effort.
"""

from collections import defaultdict
from typing import Dict, List, Protocol

from rich.console import Console


class StreamChannel(Protocol):
    def send(self, session_id: str, chunk: str) -> None: ...


class ConsoleChannel:
    """Prints tokens to the terminal as they arrive."""

    def __init__(self, console: Console | None = None, style: str = "green"):
        self.console = console or Console()
        self.style = style

    def send(self, session_id: str, chunk: str) -> None:
        self.console.print(chunk, end="", style=self.style, markup=False, highlight=False)


class BufferedChannel:
    """Collects chunks per session, in arrival order."""

    def __init__(self):
        self.chunks: Dict[str, List[str]] = defaultdict(list)

    def send(self, session_id: str, chunk: str) -> None:
        self.chunks[session_id].append(chunk)

    def text(self, session_id: str) -> str:
        return "".join(self.chunks.get(session_id, []))
