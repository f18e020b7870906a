"""FastMCP server for Story Graph - story dependency analysis with live rebuilds."""

import logging
import threading
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from .config import Settings, setup_logging
from .pipeline import run_build
from .tools import register_all_tools
from .watcher import FileWatcher

logger = logging.getLogger(__name__)


def create_file_change_handler(config: Settings, context: dict[str, Any]):
    """Create a callback that rebuilds the graph when sources change.

    Any story or component change can move edges anywhere in the graph, so
    the whole graph is rebuilt rather than patched.
    """

    def handle_changes(changes: dict[str, str]) -> None:
        for file_path, change_type in changes.items():
            logger.debug(f"{change_type}: {file_path}")
        logger.info(f"Rebuilding story graph after {len(changes)} file changes")
        run_build(config, context)

    return handle_changes


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Manage server lifecycle - initialize and cleanup resources."""
    try:
        config = Settings()
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

    setup_logging(config.log_level)
    logger.info(f"Starting Story Graph for repository: {config.repo_path}")
    if config.storybook_stories_path is not None:
        logger.info(f"Stories path: {config.storybook_stories_path}")

    # Build context for tools (before the first build so the MCP handshake completes quickly)
    context: dict[str, Any] = {
        "config": config,
        "result": None,
        "build_lock": threading.Lock(),
        "build_count": 0,
        "watcher": None,
        "watcher_active": False,
        "indexing_complete": False,
        "indexing_error": None,
        "indexing_phase": "starting",
    }

    build_thread = threading.Thread(target=run_build, args=(config, context), daemon=True)
    build_thread.start()

    logger.info("Starting file watcher...")
    watcher = FileWatcher(
        repo_path=config.repo_path,
        on_changes=create_file_change_handler(config, context),
        debounce_seconds=config.debounce_seconds,
    )
    watcher.start()

    context["watcher"] = watcher
    context["watcher_active"] = True

    logger.info("Story Graph ready (building in background)")

    yield context

    logger.info("Shutting down Story Graph...")
    watcher.stop()
    logger.info("Shutdown complete")


# Create the MCP server
mcp = FastMCP("Story Graph", lifespan=lifespan)

# Register all tools
register_all_tools(mcp)


def main():
    """Entry point for the Story Graph MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
