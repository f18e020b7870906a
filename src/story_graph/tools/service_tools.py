"""MCP tools for service management operations."""

import logging
from typing import Any

from fastmcp import Context

from ..pipeline import run_build

logger = logging.getLogger(__name__)


def register_service_tools(mcp) -> None:
    """Register service tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def get_index_status(ctx: Context) -> dict[str, Any]:
        """Get the current status of the story graph.

        Returns statistics about the latest build, the stories and
        components that were skipped, and watcher status.

        Returns:
            Graph statistics and status information
        """
        lifespan_context = ctx.request_context.lifespan_context
        config = lifespan_context["config"]
        result = lifespan_context.get("result")
        indexing_error = lifespan_context.get("indexing_error")

        if indexing_error:
            status = "error"
        elif lifespan_context.get("indexing_complete", False):
            status = "ready"
        else:
            status = "indexing"

        status_info: dict[str, Any] = {
            "status": status,
            "phase": lifespan_context.get("indexing_phase", "starting"),
            "repo_path": str(config.repo_path),
            "stories_path": (
                str(config.storybook_stories_path) if config.storybook_stories_path else None
            ),
            "output_path": str(config.graph_output_path),
            "build_count": lifespan_context.get("build_count", 0),
            "watcher_active": lifespan_context.get("watcher_active", False),
        }

        if result is not None:
            status_info["graph"] = result.graph.get_statistics()
            status_info["story_files"] = len(result.story_files)
            status_info["skipped_stories"] = [
                {"path": e.story_path, "reason": e.reason} for e in result.index_errors
            ]
            status_info["failed_components"] = [
                {"path": e.component_path, "reason": e.reason} for e in result.tree_errors
            ]

        if indexing_error:
            status_info["error"] = indexing_error

        return status_info

    @mcp.tool()
    def rebuild_story_graph(ctx: Context) -> dict[str, Any]:
        """Rebuild the story graph from the files on disk now.

        Use after large changes when waiting for the file watcher is not
        wanted. Runs synchronously and returns the new statistics.

        Returns:
            Build statistics or the build error
        """
        lifespan_context = ctx.request_context.lifespan_context
        logger.info("Manual rebuild requested")
        result = run_build(lifespan_context["config"], lifespan_context)
        if result is None:
            return {"status": "error", "error": lifespan_context.get("indexing_error")}
        return {
            "status": "ready",
            "graph": result.graph.get_statistics(),
            "skipped_stories": len(result.index_errors),
            "failed_components": len(result.tree_errors),
        }
