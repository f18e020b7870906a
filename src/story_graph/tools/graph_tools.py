"""MCP tools for story graph queries."""

from typing import Any

from fastmcp import Context

from ..graph import (
    StoryGraph,
    find_dependency_paths,
    get_story_dependencies,
    get_story_dependents,
    get_story_summary,
)


def _current_graph(ctx: Context) -> StoryGraph | None:
    """Get the graph of the latest finished build, if any."""
    result = ctx.request_context.lifespan_context.get("result")
    return result.graph if result is not None else None


def _not_ready() -> dict[str, Any]:
    return {"error": "Story graph is still being built, try again shortly"}


def register_graph_tools(mcp) -> None:
    """Register graph tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def tool_get_story_dependencies(
        ctx: Context,
        title: str,
    ) -> dict[str, Any]:
        """Get the documented components a story's component renders.

        Undocumented wrapper components are looked through, so the result
        lists the nearest documented components on every branch.

        Args:
            title: Story title (e.g. "Molecules/Card")

        Returns:
            Dependency titles of the story
        """
        graph = _current_graph(ctx)
        if graph is None:
            return _not_ready()
        dependencies = get_story_dependencies(graph, title)
        return {
            "title": title,
            "known": title in graph,
            "dependencies": dependencies,
            "count": len(dependencies),
        }

    @mcp.tool()
    def tool_get_story_dependents(
        ctx: Context,
        title: str,
    ) -> dict[str, Any]:
        """Get the documented components that render a story's component.

        Args:
            title: Story title

        Returns:
            Dependent titles of the story
        """
        graph = _current_graph(ctx)
        if graph is None:
            return _not_ready()
        dependents = get_story_dependents(graph, title)
        return {
            "title": title,
            "known": title in graph,
            "dependents": dependents,
            "count": len(dependents),
        }

    @mcp.tool()
    def tool_get_story_relations(
        ctx: Context,
        title: str,
    ) -> dict[str, Any]:
        """Get direct and transitive dependencies and dependents of a story.

        Args:
            title: Story title

        Returns:
            Relation summary, or an error if the title is unknown
        """
        graph = _current_graph(ctx)
        if graph is None:
            return _not_ready()
        summary = get_story_summary(graph, title)
        if summary is None:
            return {"error": f"Unknown story title: {title}"}
        return summary

    @mcp.tool()
    def tool_find_story_paths(
        ctx: Context,
        source_title: str,
        target_title: str,
        max_length: int = 10,
    ) -> dict[str, Any]:
        """Find chains of dependencies leading from one story to another.

        Args:
            source_title: Story to start from
            target_title: Story to reach
            max_length: Maximum chain length (default: 10)

        Returns:
            All simple dependency paths between the two stories
        """
        graph = _current_graph(ctx)
        if graph is None:
            return _not_ready()
        paths = find_dependency_paths(graph, source_title, target_title, max_length)
        return {
            "source": source_title,
            "target": target_title,
            "paths": paths,
            "count": len(paths),
        }
