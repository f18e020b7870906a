"""Graph module for story dependency analysis."""

from .builder import DEFAULT_MAX_DEPTH, DependencyGraphBuilder, TreeProvider
from .index import StoryIndex, StoryMetadataExtractor, build_story_index, resolve_story_entry
from .queries import (
    find_dependency_paths,
    get_dependency_cycles,
    get_story_dependencies,
    get_story_dependents,
    get_story_summary,
    get_transitive_dependencies,
    get_transitive_dependents,
)
from .resolver import IndirectionResolver, TitleResolver
from .storage import GraphNode, StoryGraph

__all__ = [
    # Storage
    "GraphNode",
    "StoryGraph",
    # Index
    "StoryIndex",
    "StoryMetadataExtractor",
    "build_story_index",
    "resolve_story_entry",
    # Resolution
    "IndirectionResolver",
    "TitleResolver",
    # Builder
    "DEFAULT_MAX_DEPTH",
    "DependencyGraphBuilder",
    "TreeProvider",
    # Queries
    "find_dependency_paths",
    "get_dependency_cycles",
    "get_story_dependencies",
    "get_story_dependents",
    "get_story_summary",
    "get_transitive_dependencies",
    "get_transitive_dependents",
]
