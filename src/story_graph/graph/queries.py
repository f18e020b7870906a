"""Query functions for traversing the story dependency graph."""

import logging
from typing import Any

import networkx as nx

from .storage import StoryGraph

logger = logging.getLogger(__name__)


def _unique(titles: list[str]) -> list[str]:
    """Drop repeated titles, keeping first-seen order."""
    return list(dict.fromkeys(titles))


def get_story_dependencies(graph: StoryGraph, title: str) -> list[str]:
    """Get the stories a story's component renders.

    Args:
        graph: Story graph
        title: Title of the story to query

    Returns:
        Distinct dependency titles in traversal order (empty if unknown)
    """
    node = graph.get(title)
    if node is None:
        return []
    return _unique(node.dependencies)


def get_story_dependents(graph: StoryGraph, title: str) -> list[str]:
    """Get the stories whose components render a story's component.

    Args:
        graph: Story graph
        title: Title of the story to query

    Returns:
        Distinct dependent titles in discovery order (empty if unknown)
    """
    node = graph.get(title)
    if node is None:
        return []
    return _unique(node.dependents)


def get_transitive_dependencies(graph: StoryGraph, title: str) -> list[str]:
    """Get every story reachable through dependency edges, sorted by title."""
    nx_graph = graph.to_networkx()
    if title not in nx_graph:
        return []
    return sorted(nx.descendants(nx_graph, title))


def get_transitive_dependents(graph: StoryGraph, title: str) -> list[str]:
    """Get every story that reaches ``title`` through dependency edges, sorted by title."""
    nx_graph = graph.to_networkx()
    if title not in nx_graph:
        return []
    return sorted(nx.ancestors(nx_graph, title))


def find_dependency_paths(
    graph: StoryGraph,
    source_title: str,
    target_title: str,
    max_length: int = 10,
) -> list[list[str]]:
    """Find all dependency chains from one story to another.

    Args:
        graph: Story graph
        source_title: Story to start from
        target_title: Story to reach
        max_length: Maximum path length

    Returns:
        List of paths (each path is a list of titles)
    """
    nx_graph = graph.to_networkx()
    if source_title not in nx_graph or target_title not in nx_graph:
        return []
    try:
        return list(nx.all_simple_paths(nx_graph, source_title, target_title, cutoff=max_length))
    except nx.NetworkXError as e:
        logger.debug(f"No paths from {source_title} to {target_title}: {e}")
        return []


def get_story_summary(graph: StoryGraph, title: str) -> dict[str, Any] | None:
    """Get direct and transitive relations of one story.

    Returns:
        Summary dictionary, or None if the title is not in the graph
    """
    if title not in graph:
        return None
    dependencies = get_story_dependencies(graph, title)
    dependents = get_story_dependents(graph, title)
    return {
        "title": title,
        "dependencies": dependencies,
        "dependents": dependents,
        "transitive_dependencies": get_transitive_dependencies(graph, title),
        "transitive_dependents": get_transitive_dependents(graph, title),
    }


def get_dependency_cycles(graph: StoryGraph) -> list[list[str]]:
    """Find groups of stories that depend on each other in a cycle."""
    nx_graph = graph.to_networkx()
    return [sorted(cycle) for cycle in nx.simple_cycles(nx_graph)]
