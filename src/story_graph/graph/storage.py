"""Graph storage: story titles with their dependency and dependent lists."""

import logging
from pathlib import Path

import networkx as nx
from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)


class GraphNode(BaseModel):
    """Edges of one story title.

    Both lists keep traversal order and duplicates: a title reached along two
    branches is listed twice.
    """

    dependencies: list[str] = Field(
        default_factory=list, description="Titles rendered by this story's component"
    )
    dependents: list[str] = Field(
        default_factory=list, description="Titles whose components render this one"
    )


_NODES_ADAPTER = TypeAdapter(dict[str, GraphNode])


class StoryGraph:
    """Title-keyed story graph, materializing nodes on first reference."""

    def __init__(self, persist_path: Path | None = None):
        """Initialize an empty graph.

        Args:
            persist_path: JSON file used by save() and load()
        """
        self._nodes: dict[str, GraphNode] = {}
        self._persist_path = persist_path

    def node(self, title: str) -> GraphNode:
        """Get the node for a title, creating an empty one if needed."""
        if title not in self._nodes:
            self._nodes[title] = GraphNode()
        return self._nodes[title]

    def get(self, title: str) -> GraphNode | None:
        """Get the node for a title without creating it."""
        return self._nodes.get(title)

    def titles(self) -> list[str]:
        """Get all titles in the order they were first referenced."""
        return list(self._nodes)

    def __contains__(self, title: object) -> bool:
        return title in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        """Get the graph as plain data (``{title: {dependencies, dependents}}``)."""
        return {title: node.model_dump() for title, node in self._nodes.items()}

    def to_networkx(self) -> nx.DiGraph:
        """Build a NetworkX view with an edge from each story to each dependency.

        Duplicate edges collapse; ``count`` holds how many times an edge was seen.
        """
        graph = nx.DiGraph()
        graph.add_nodes_from(self._nodes)
        for title, node in self._nodes.items():
            for dependency in node.dependencies:
                self._add_counted_edge(graph, title, dependency)
        # Dependents seen from other roots that the dependency lists do not cover
        for title, node in self._nodes.items():
            for dependent in node.dependents:
                if not graph.has_edge(dependent, title):
                    self._add_counted_edge(graph, dependent, title)
        return graph

    def _add_counted_edge(self, graph: nx.DiGraph, source: str, target: str) -> None:
        if graph.has_edge(source, target):
            graph[source][target]["count"] += 1
        else:
            graph.add_edge(source, target, count=1)

    def get_statistics(self) -> dict[str, int]:
        """Get graph statistics.

        Returns:
            Dictionary with counts of stories, edges and isolated stories
        """
        stats = {
            "stories": len(self._nodes),
            "dependency_edges": 0,
            "dependent_edges": 0,
            "isolated": 0,
        }
        for node in self._nodes.values():
            stats["dependency_edges"] += len(node.dependencies)
            stats["dependent_edges"] += len(node.dependents)
            if not node.dependencies and not node.dependents:
                stats["isolated"] += 1
        return stats

    def save(self, path: Path | None = None) -> Path:
        """Write the graph as JSON.

        Args:
            path: Output file (defaults to the persist path)

        Returns:
            The path written to
        """
        target = path or self._persist_path
        if target is None:
            raise ValueError("No path to save the story graph to")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(_NODES_ADAPTER.dump_json(self._nodes, indent=2))
        logger.info(f"Saved story graph with {len(self._nodes)} stories to {target}")
        return target

    @classmethod
    def load(cls, path: Path) -> "StoryGraph":
        """Read a graph previously written by save()."""
        graph = cls(persist_path=path)
        graph._nodes = _NODES_ADAPTER.validate_json(path.read_bytes())
        logger.info(f"Loaded story graph with {len(graph._nodes)} stories from {path}")
        return graph
