"""Title resolution of usage tree nodes against the story index."""

from pathlib import Path
from typing import Protocol

from ..parser.entities import UsageNode
from .index import StoryIndex


class IndirectionResolver(Protocol):
    """Resolves a name exported by a barrel file to the defining module."""

    def resolve(self, name: str, file_path: Path | str) -> str | None: ...


class TitleResolver:
    """Finds the story title documenting a usage tree node, if there is one.

    A miss is not an error: it means the node is an undocumented component
    and the traversal should look beneath it.
    """

    def __init__(self, index: StoryIndex, indirection: IndirectionResolver | None = None):
        """Initialize the resolver.

        Args:
            index: Story index to look titles up in
            indirection: Resolver for ``error`` nodes; without one they never resolve
        """
        self._index = index
        self._indirection = indirection

    def resolve(self, node: UsageNode) -> str | None:
        """Get the title of a node, going through its barrel file when flagged."""
        if not node.error:
            return self._index.lookup(node.file_path)

        if self._indirection is None:
            return None
        real_path = self._indirection.resolve(node.name, node.file_path)
        if real_path is None:
            return None
        return self._index.lookup(real_path)

    def resolve_direct(self, path: Path | str) -> str | None:
        """Get the title for a path without any indirection handling."""
        return self._index.lookup(path)
