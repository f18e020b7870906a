"""Tree provider: builds the tree of components a component renders."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..errors import ModuleParseError, UsageTreeDepthError, UsageTreeError
from .entities import ModuleSummary, UsageNode
from .paths import resolve_relative_import
from .treesitter import ModuleReader

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256
DEFAULT_MAX_NODES = 10_000


@dataclass
class _Walk:
    """Limits and counters of one tree being built."""

    root_path: str
    nodes: int = 1


class UsageTreeParser:
    """Builds usage trees from JSX.

    A child is created for every capitalized JSX element a module renders whose
    name is bound by a relative import, once per name, in order of first use.
    Children importing from a module that does not define the component
    (a barrel, or a path that cannot be completed to a file) are marked with
    ``error=True`` and left unexpanded.

    Shared sub-components are expanded again on every path that reaches them,
    so tree size is bounded by ``max_depth`` and ``max_nodes`` per root.
    """

    def __init__(
        self,
        reader: ModuleReader | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
    ):
        self._reader = reader or ModuleReader()
        self._max_depth = max_depth
        self._max_nodes = max_nodes

    def parse(self, component_path: Path | str) -> UsageNode:
        """Build the usage tree rooted at a component file.

        Args:
            component_path: Absolute path of the component module

        Returns:
            Root node of the usage tree

        Raises:
            UsageTreeError: If the component module cannot be parsed, or the
                tree grows beyond ``max_nodes``
            UsageTreeDepthError: If the tree is deeper than ``max_depth``
        """
        path = Path(component_path)
        try:
            summary = self._reader.read(path)
        except ModuleParseError as e:
            raise UsageTreeError(path, str(e)) from e

        root = UsageNode(name=path.stem, file_path=str(path))
        self._expand(root, summary, _Walk(root_path=str(path)), 0)
        return root

    def _add(self, node: UsageNode, child: UsageNode, walk: _Walk) -> UsageNode:
        walk.nodes += 1
        if walk.nodes > self._max_nodes:
            raise UsageTreeError(
                walk.root_path, f"usage tree larger than {self._max_nodes} nodes"
            )
        return node.add_child(child)

    def _expand(self, node: UsageNode, summary: ModuleSummary, walk: _Walk, depth: int) -> None:
        """Attach the components rendered by ``node``'s module, recursively."""
        for rendered in summary.rendered:
            binding = summary.imports.get(rendered)
            # Locally defined components and package imports are not followed
            if binding is None or not binding.is_relative or binding.imported == "*":
                continue

            if depth + 1 > self._max_depth:
                raise UsageTreeDepthError(walk.root_path, self._max_depth)

            name = binding.local if binding.imported == "default" else binding.imported
            target = resolve_relative_import(binding.source, node.file_path)
            if target is None:
                unresolved = os.path.normpath(str(Path(node.file_path).parent / binding.source))
                self._add(node, UsageNode(name=name, file_path=unresolved, error=True), walk)
                continue

            target_path = str(target)
            try:
                child_summary = self._reader.read(target)
            except ModuleParseError as e:
                logger.warning(f"Not expanding {name} rendered by {node.file_path}: {e}")
                self._add(node, UsageNode(name=name, file_path=target_path), walk)
                continue

            if not child_summary.declares(binding.imported):
                self._add(node, UsageNode(name=name, file_path=target_path, error=True), walk)
                continue

            in_lineage = target_path in node.lineage()
            child = self._add(node, UsageNode(name=name, file_path=target_path), walk)
            if in_lineage:
                logger.debug(f"Cycle through {target_path}, not expanding {name} again")
                continue
            self._expand(child, child_summary, walk, depth + 1)
