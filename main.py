"""
Command line interface for Persona Dossier.

Loads the Gemini API key from environment variables (via `.env`), creates a
DossierAgent, and enters an interactive loop.  Plain text is analyzed;
`history`, `show N`, `clear` and `quit` manage the session.
"""

import logging
import os

from dotenv import load_dotenv

from agents import DossierAgent
from dossier_state_manager import DossierResult, DossierSession, ViewState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"quit", "exit", "q"}


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_result(result: DossierResult) -> str:
    lines = [result.text]
    if result.sources:
        lines.append("\nVerified Sources:")
        for idx, source in enumerate(result.sources, start=1):
            lines.append(f"  {idx}. {source.display_title} ({source.hostname})\n     {source.uri}")
    return "\n".join(lines)


def format_history(session: DossierSession) -> str:
    if not len(session.history):
        return "No analyses yet."
    return "\n".join(
        f"  {idx}. [{entry.timestamp}] {entry.label}"
        for idx, entry in enumerate(session.history, start=1)
    )


def handle_command(session: DossierSession, agent: DossierAgent, line: str) -> str:
    """Apply one line of console input to the session and return what to print."""

    command = line.strip()
    lowered = command.lower()
    if lowered == "history":
        return format_history(session)
    if lowered == "clear":
        session.clear_input()
        return "Input cleared."
    if lowered.startswith("show "):
        try:
            position = int(command.split(None, 1)[1])
        except ValueError:
            position = 0
        if not 1 <= position <= len(session.history):
            return "Unknown history entry. Type 'history' to list them."
        entry = session.history[position - 1]
        session.select_history_entry(entry)
        return format_result(entry.result)

    session.input_text = line
    if not session.submit(agent.analyze):
        return ""
    if session.view_state is ViewState.ERROR:
        return f"An error occurred: {session.error}"
    return format_result(session.result)


def main() -> None:
    """Run the command line loop for the dossier agent."""
    _configure_logging()
    logger.info("Loading environment variables from .env file...")
    load_dotenv()

    agent = DossierAgent()
    session = DossierSession()

    print(
        "\nWelcome to Persona Dossier!\n"
        "Describe a person and press Enter.  Commands: history, show N, clear, quit.\n"
    )

    while True:
        try:
            line = input("> ")
        except EOFError:
            logger.info("EOF received; exiting.")
            break

        if not line.strip():
            continue
        if line.strip().lower() in EXIT_COMMANDS:
            logger.info("User requested exit.")
            break

        output = handle_command(session, agent, line)
        if output:
            print(f"\n{output}\n")

    logger.info("Session ended. Goodbye!")
    print("Goodbye!")


if __name__ == "__main__":
    main()
