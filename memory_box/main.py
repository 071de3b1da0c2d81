"""Memory Box MCP server entry point."""

import asyncio
import logging
import sys

from memory_box.config import settings
from memory_box.server import run_stdio
from memory_box.system_prompt import validate_system_prompt

# stdout carries the protocol; basicConfig logs to stderr.
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


def log_configuration() -> None:
    """Log the effective configuration without revealing the token."""
    logger.info("Memory Box MCP Server starting with configuration:")
    logger.info("API URL: %s", settings.memory_box_api_url)
    logger.info("Token: %s", "Configured" if settings.token_configured else "Not configured")
    logger.info("Default Bucket: %s", settings.default_bucket)

    if settings.custom_prompt_configured and not validate_system_prompt(settings.system_prompt):
        logger.warning(
            "Custom system prompt may be missing required elements. "
            "Using it anyway, but formatting may not work as expected."
        )


def main() -> None:
    """Start the server on stdio; exit non-zero on any unhandled failure."""
    log_configuration()
    try:
        asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
