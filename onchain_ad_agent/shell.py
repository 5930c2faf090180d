import logging
import sys
import time
from typing import Callable, Iterable, Optional

from .agent import AdAgentSession
from .backends.base import Fragment
from .constants import AUTONOMOUS_INTERVAL_SECONDS, FRAGMENT_SEPARATOR

logger = logging.getLogger(__name__)

MODES = {"1": "chat", "chat": "chat", "2": "auto", "auto": "auto"}


def print_fragments(fragments: Iterable[Fragment], output: Callable[[str], None] = print) -> None:
    for fragment in fragments:
        output(fragment.content)
        output(FRAGMENT_SEPARATOR)


def choose_mode(input_fn: Callable[[str], str] = input, output: Callable[[str], None] = print) -> str:
    """Ask until the operator picks chat or auto, by number or name."""
    while True:
        output("\nAvailable modes:")
        output("1. chat    - Interactive chat mode")
        output("2. auto    - Autonomous action mode")

        choice = input_fn("\nChoose a mode (enter number or name): ").strip().lower()
        if choice in MODES:
            return MODES[choice]
        output("Invalid choice. Please try again.")


def run_chat_mode(
    session: AdAgentSession,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> None:
    """
    Run the agent interactively based on user input.

    'exit' (any case) or end of input stops the loop. Any error is logged
    and terminates the process with status 1.
    """
    output("Starting chat mode... Type 'exit' to end.")

    try:
        while True:
            try:
                user_input = input_fn("\nPrompt: ")
            except EOFError:
                break

            if user_input.lower() == "exit":
                break

            print_fragments(session.send(user_input), output)
    except Exception as e:
        logger.error(f"Chat mode failed: {e}", exc_info=True)
        output(f"Error: {e}")
        sys.exit(1)


def run_autonomous_mode(
    session: AdAgentSession,
    interval: float = AUTONOMOUS_INTERVAL_SECONDS,
    output: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
    max_iterations: Optional[int] = None,
) -> None:
    """
    Run the agent autonomously, sending the profile's instruction every `interval` seconds.

    Runs forever unless max_iterations is given. There is no retry: any error
    is logged and terminates the process with status 1.
    """
    output("Starting autonomous mode...")
    thought = session.profile.autonomous_instruction

    iterations = 0
    while max_iterations is None or iterations < max_iterations:
        try:
            print_fragments(session.send(thought), output)
            sleep(interval)
        except Exception as e:
            logger.error(f"Autonomous mode failed: {e}", exc_info=True)
            output(f"Error: {e}")
            sys.exit(1)
        iterations += 1
