"""Extraction of title and component path from CSF story files."""

from pathlib import Path

from tree_sitter import Node

from ..errors import ModuleParseError, StoryMetadataError
from .entities import ModuleSummary, StoryMetadata
from .treesitter import ModuleReader

# Expression wrappers around a meta object: `{...} satisfies Meta`, `{...} as Meta`, `({...})`
_WRAPPER_TYPES = frozenset({"satisfies_expression", "as_expression", "parenthesized_expression"})


class StoryParser:
    """Reads the default export (the "meta" object) of a story file.

    Supports ``export default { title, component }`` and ``export default meta``
    where ``meta`` is a top-level object declared in the same file.
    """

    def __init__(self, reader: ModuleReader | None = None):
        self._reader = reader or ModuleReader()

    def extract(self, story_path: Path | str) -> StoryMetadata:
        """Extract the story title and the relative path of its component.

        Args:
            story_path: Path to the story file

        Returns:
            Title and component import path as written in the story

        Raises:
            StoryMetadataError: If the file has no usable title/component
        """
        try:
            summary = self._reader.read(story_path)
        except ModuleParseError as e:
            raise StoryMetadataError(str(e)) from e

        meta = self._find_meta_object(summary)
        properties = self._object_properties(meta)

        title_node = properties.get("title")
        if title_node is None:
            raise StoryMetadataError("Story meta has no title")
        if title_node.type not in {"string", "template_string"} or any(
            child.type == "template_substitution" for child in title_node.named_children
        ):
            raise StoryMetadataError("Story title is not a string literal")
        title = self._node_text(title_node).strip("'\"`")

        component_node = properties.get("component")
        if component_node is None:
            raise StoryMetadataError(f"Story '{title}' has no component")
        if component_node.type not in {"identifier", "shorthand_property_identifier"}:
            raise StoryMetadataError(f"Story '{title}' component is not an identifier")
        component = self._node_text(component_node)

        binding = summary.imports.get(component)
        if binding is None or not binding.is_relative:
            raise StoryMetadataError(
                f"Story '{title}' component {component} is not imported from a relative path"
            )

        return StoryMetadata(title=title, relative_component_path=binding.source)

    def _find_meta_object(self, summary: ModuleSummary) -> Node:
        """Follow the default export to the object literal it names."""
        node = summary.default_export
        if node is None:
            raise StoryMetadataError("Story has no default export")

        node = self._unwrap(node)
        if node.type == "identifier":
            name = self._node_text(node)
            if name not in summary.variables:
                raise StoryMetadataError(f"Default export {name} is not a top-level variable")
            node = self._unwrap(summary.variables[name])

        if node.type != "object":
            raise StoryMetadataError(f"Default export is a {node.type}, not an object")
        return node

    def _unwrap(self, node: Node) -> Node:
        while node.type in _WRAPPER_TYPES and node.named_children:
            node = node.named_children[0]
        return node

    def _object_properties(self, node: Node) -> dict[str, Node]:
        """Map property names of an object literal to their value nodes."""
        properties: dict[str, Node] = {}
        for child in node.named_children:
            if child.type == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is not None and value is not None:
                    properties[self._node_text(key).strip("'\"")] = value
            elif child.type == "shorthand_property_identifier":
                # `{ component }` is `{ component: component }`; the value is the identifier
                properties[self._node_text(child)] = child
        return properties

    def _node_text(self, node: Node) -> str:
        return node.text.decode("utf-8", errors="replace")
