"""Models for stories, component usage trees and module summaries."""

import weakref
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from .paths import is_relative_specifier


class StoryMetadata(BaseModel):
    """What a story file declares about the component it documents."""

    title: str = Field(..., description="Title of the story (e.g. 'Atoms/Button')")
    relative_component_path: str = Field(
        ..., description="Import path of the component, relative to the story file"
    )


class StoryEntry(BaseModel):
    """A story resolved to the absolute path of its component."""

    story_path: str = Field(..., description="Absolute path of the story file")
    component_path: str = Field(
        ..., description="Absolute path of the documented component (extension included)"
    )
    title: str = Field(..., description="Title of the story")


@dataclass(eq=False)
class UsageNode:
    """A component in a usage tree.

    Children are owned by their node. The parent is only a weak back-reference,
    so the root must be kept alive by whoever walks the tree.

    ``error`` marks a node whose ``file_path`` is not the component definition
    itself (a barrel re-export, or an import that could not be completed to a
    file). Such nodes are never expanded.
    """

    name: str
    file_path: str
    error: bool = False
    children: list["UsageNode"] = field(default_factory=list)
    _parent: "weakref.ReferenceType[UsageNode] | None" = field(
        default=None, init=False, repr=False
    )

    @property
    def parent(self) -> "UsageNode | None":
        """The node rendering this one, or None for a root."""
        if self._parent is None:
            return None
        return self._parent()

    def add_child(self, child: "UsageNode") -> "UsageNode":
        """Attach a child node and point its parent back at this node."""
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def lineage(self):
        """Yield this node's file path and those of all its ancestors."""
        node: UsageNode | None = self
        while node is not None:
            yield node.file_path
            node = node.parent


@dataclass
class ImportBinding:
    """A local name bound by an import statement."""

    local: str  # Name used inside the importing module
    imported: str  # Name exported by the source module ("default" for default imports)
    source: str  # Module specifier as written (e.g. "./Button")

    @property
    def is_relative(self) -> bool:
        return is_relative_specifier(self.source)


@dataclass
class ReExport:
    """An ``export ... from`` clause."""

    exported: str  # Name other modules import ("*" for star re-exports)
    original: str  # Name in the source module
    source: str


@dataclass
class ModuleSummary:
    """Top-level imports, declarations and exports of a JS/TS module."""

    path: str
    imports: dict[str, ImportBinding] = field(default_factory=dict)
    declarations: set[str] = field(default_factory=set)
    local_exports: dict[str, str] = field(default_factory=dict)  # exported -> local name
    re_exports: list[ReExport] = field(default_factory=list)
    star_sources: list[str] = field(default_factory=list)
    has_default_export: bool = False
    default_export: Any = None  # tree-sitter node of `export default <value>`
    variables: dict[str, Any] = field(default_factory=dict)  # name -> initializer node
    rendered: list[str] = field(default_factory=list)  # JSX component names, first use order

    def declares(self, name: str) -> bool:
        """Check whether ``name`` is defined in this module rather than re-exported."""
        if name == "default":
            return self.has_default_export
        if name in self.local_exports:
            local = self.local_exports[name]
            return local in self.declarations or (local == "default" and self.has_default_export)
        return name in self.declarations
