"""
chat.py

Console chat with the Function Agent. Tokens are streamed to the terminal.

Usage:
    python chat.py [--config config.json] [--session my-session]
"""

import argparse
import logging
import uuid

from dotenv import load_dotenv
from langchain_core.messages import HumanMessage
from rich.console import Console

from function_agent.channels import ConsoleChannel
from function_agent.config_loader import DEFAULT_CONFIG_PATH, load_runtime_config
from function_agent.consts import DEBUG, ENV_PATH
from function_agent.errors import FunctionAgentError
from function_agent.graph import build_graph
from function_agent.memory import in_process_memory
from function_agent.schemas import StreamingTarget

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Chat with the Function Agent.")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH))
    parser.add_argument("--session", default=None)
    args = parser.parse_args()

    load_dotenv(ENV_PATH, override=True)
    console = Console()

    app = build_graph(load_runtime_config(args.config), memory=in_process_memory())

    session_id = args.session or str(uuid.uuid4())
    target = StreamingTarget(channel=ConsoleChannel(console), session_id=session_id)
    messages = []

    console.rule(f"[bold green]Function Agent[/bold green] session {session_id}")
    console.print("[dim]Type 'exit' to quit.[/dim]")

    while True:
        try:
            user_text = console.input("\n[bold blue]You:[/bold blue] ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not user_text:
            continue
        if user_text.lower() in {"exit", "quit"}:
            break

        console.print("[bold magenta]Agent:[/bold magenta] ", end="")
        try:
            state = app.invoke(
                {"messages": messages + [HumanMessage(content=user_text)]},
                config={"configurable": {"streaming_target": target}},
            )
        except FunctionAgentError as e:
            console.print(f"\n[bold red]Error:[/bold red] {e}")
            continue

        console.print()
        messages = state["messages"]
        logger.debug(f"Session {session_id}: {len(messages)} messages")


if __name__ == "__main__":
    main()
