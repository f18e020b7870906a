"""Graph builder for constructing story dependency graphs from usage trees."""

import logging
from pathlib import Path
from typing import Protocol

from ..errors import UsageTreeDepthError, UsageTreeError
from ..parser.entities import UsageNode
from ..parser.usage import DEFAULT_MAX_DEPTH
from .index import StoryIndex
from .resolver import TitleResolver
from .storage import StoryGraph

logger = logging.getLogger(__name__)


class TreeProvider(Protocol):
    """Produces the usage tree of a component file."""

    def parse(self, component_path: Path | str) -> UsageNode: ...


class DependencyGraphBuilder:
    """Builds the title-keyed story graph.

    For every documented component the builder walks its usage tree. A branch
    closes at the first documented component found on it: that title becomes a
    dependency of the root, and the nearest documented ancestor of the node is
    recorded as its dependent. Undocumented components in between are looked
    through. The subtree below a documented component is not walked here; it
    is covered when that component's own story is processed.
    """

    def __init__(
        self,
        index: StoryIndex,
        tree_provider: TreeProvider,
        resolver: TitleResolver | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """Initialize the graph builder.

        Args:
            index: Story index of documented components
            tree_provider: Source of usage trees, one per documented component
            resolver: Title resolver (direct lookups only by default)
            max_depth: Deepest usage tree level walked before a root is given up
        """
        self._index = index
        self._tree_provider = tree_provider
        self._resolver = resolver or TitleResolver(index)
        self._max_depth = max_depth
        self._graph = StoryGraph()
        self._errors: list[UsageTreeError] = []

    @property
    def graph(self) -> StoryGraph:
        """The graph of the current or most recent build."""
        return self._graph

    @property
    def errors(self) -> list[UsageTreeError]:
        """Usage tree failures of the most recent build."""
        return self._errors

    def build(self, graph: StoryGraph | None = None) -> StoryGraph:
        """Compute dependencies and dependents for every story in the index.

        A component whose usage tree fails keeps an empty dependency list; the
        failure is logged, collected in ``errors`` and the sweep goes on.

        Args:
            graph: Graph to fill (a new, empty one by default)

        Returns:
            The filled graph
        """
        self._graph = graph if graph is not None else StoryGraph()
        self._errors = []
        logger.info(f"Building story graph from {len(self._index)} documented components")

        for component_path, title in self._index.items():
            node = self._graph.node(title)
            try:
                root = self._tree_provider.parse(component_path)
                dependencies = self.collect_dependencies(root)
            except UsageTreeError as e:
                logger.error(f"Error building usage tree: {e}")
                self._errors.append(e)
                continue
            node.dependencies = dependencies

        stats = self._graph.get_statistics()
        logger.info(
            f"Story graph built: {stats['stories']} stories, "
            f"{stats['dependency_edges']} dependency edges, "
            f"{len(self._errors)} failed components"
        )
        return self._graph

    def collect_dependencies(self, node: UsageNode, _depth: int = 0) -> list[str]:
        """Collect the documented titles reachable below ``node``.

        Args:
            node: Node whose children are examined

        Returns:
            Titles in tree order, duplicates kept

        Raises:
            UsageTreeDepthError: If the tree is deeper than ``max_depth``
        """
        if _depth > self._max_depth:
            *_, root_path = node.lineage()
            raise UsageTreeDepthError(root_path, self._max_depth)

        dependencies: list[str] = []
        for child in node.children:
            title = self._resolver.resolve(child)
            if title is not None:
                self.register_dependent(title, child)
                dependencies.append(title)
            else:
                dependencies.extend(self.collect_dependencies(child, _depth + 1))
        return dependencies

    def register_dependent(self, title: str, node: UsageNode) -> None:
        """Record the nearest documented ancestor of ``node`` as a dependent of ``title``.

        Ancestors are looked up by path only; barrel indirection does not apply.
        """
        parent = node.parent
        if parent is None:
            return

        ancestor_title = self._resolver.resolve_direct(parent.file_path)
        if ancestor_title is None:
            self.register_dependent(title, parent)
            return

        self._graph.node(title).dependents.append(ancestor_title)
