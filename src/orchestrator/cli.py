"""Interactive prompt.

Reads one query per line, prints the response, and exits on `quit`.
Queries are processed strictly one at a time.
"""

import asyncio
import sys
from typing import Callable

from shared.config import get_settings
from shared.errors import OrchestrationError
from shared.logging import get_logger, setup_logging
from orchestrator.pipeline import Orchestrator
from orchestrator.runtime import open_orchestrator

logger = get_logger(__name__)

BANNER = "\nResearch Assistant Started\nType your queries or 'quit' to exit."


async def chat_loop(
    orchestrator: Orchestrator,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print
) -> None:
    """
    Run the read-eval-print loop until `quit` or end of input.

    Failures of a single query are printed and the loop continues.
    """
    write(BANNER)

    while True:
        try:
            query = await asyncio.to_thread(read_line, "\nQuery: ")
        except EOFError:
            break

        if query.strip().lower() == "quit":
            break

        try:
            response = await orchestrator.process_query(query)
            write("\n" + response)
        except Exception as e:
            logger.error("Query failed in interactive session", error=str(e))
            write(f"Error: {e}")

    logger.info("Interactive session ended")


async def run(settings=None) -> None:
    settings = settings or get_settings()
    async with open_orchestrator(settings) as orchestrator:
        await chat_loop(orchestrator)


def main() -> int:
    """Entry point for the `research-assistant` script."""
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.environment == "production")

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        return 130
    except (OrchestrationError, ValueError) as e:
        print(f"Startup failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
