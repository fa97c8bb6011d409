"""Interactive REPL: the user's only way to talk to the Queen."""

from __future__ import annotations

import logging
from typing import (
    List,
    Tuple,
)

from hive.agent.base import Agent
from hive.common import (
    AnsiColors,
    colored_print,
)
from hive.core.schema import ConversationTurn
from hive.core.transport import TransportError

logger = logging.getLogger(__name__)

QUIT_COMMANDS = {"quit", "exit"}


# ---------------------------------------------------------------------------
# CLI Client
# ---------------------------------------------------------------------------
def get_user_message() -> Tuple[str, bool]:
    """
    Get a message from the user via standard input.

    Returns:
        Tuple of (user_input, success_flag)
        The success_flag is False if input couldn't be read (e.g., Ctrl+C)
    """
    try:
        user_input = input().strip()
        return user_input, True
    except (EOFError, KeyboardInterrupt):
        return "", False


def handle_message(coordinator: Agent, conversation: List[ConversationTurn], message: str) -> str:
    """
    Append *message* to the session and let the coordinator answer it.

    If the backend fails, every turn added for *message* is removed again before the
    :class:`TransportError` propagates, so the session is left as it was.
    """
    mark = len(conversation)
    conversation.append(ConversationTurn.user(message))
    try:
        return coordinator.run_loop(conversation).text
    except TransportError:
        del conversation[mark:]
        raise


def run_cli(coordinator: Agent) -> None:
    """Run the REPL until the user quits; the conversation lives for the whole session."""
    conversation = coordinator.new_conversation()
    colored_print("Queen is ready. Type 'quit' to exit.\n", AnsiColors.GREEN)

    while True:
        colored_print("You: ", AnsiColors.BLUE, end="", flush=True)
        user_msg, ok = get_user_message()
        if not ok:
            print()
            break  # Exit if user input couldn't be retrieved (e.g., Ctrl+C)
        if user_msg.lower() in QUIT_COMMANDS:
            print("Goodbye!")
            break
        if not user_msg:
            continue

        try:
            reply = handle_message(coordinator, conversation, user_msg)
        except TransportError as exc:
            logger.error("Turn failed: %s", exc)
            colored_print(f"Error: {exc}", AnsiColors.RED)
            continue

        colored_print(f"\nQueen: {reply}\n", AnsiColors.YELLOW)
