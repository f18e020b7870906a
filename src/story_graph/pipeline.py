"""End-to-end story graph build: discovery, indexing and graph construction."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import Settings
from .errors import StoryIndexError, UsageTreeError
from .graph import DependencyGraphBuilder, StoryGraph, StoryIndex, TitleResolver, build_story_index
from .parser import BarrelResolver, ModuleReader, StoryParser, UsageTreeParser, discover_story_files
from .parser.usage import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NODES

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of one build: the graph plus everything that was skipped."""

    graph: StoryGraph
    index: StoryIndex
    story_files: list[Path] = field(default_factory=list)
    index_errors: list[StoryIndexError] = field(default_factory=list)
    tree_errors: list[UsageTreeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every story and component was processed."""
        return not self.index_errors and not self.tree_errors


def build_story_graph(
    repo_path: Path,
    stories_path: Path | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
    persist_path: Path | None = None,
) -> BuildResult:
    """Discover stories under a repository and build their dependency graph.

    Args:
        repo_path: Repository root
        stories_path: Directory holding the stories, if not the whole repository
        max_depth: Usage tree depth limit per component
        max_nodes: Usage tree size limit per component
        persist_path: JSON file the returned graph saves to

    Returns:
        BuildResult with the graph and per-story/per-component failures
    """
    reader = ModuleReader()

    story_files = discover_story_files(repo_path, stories_path)
    index, index_errors = build_story_index(story_files, StoryParser(reader))

    builder = DependencyGraphBuilder(
        index=index,
        tree_provider=UsageTreeParser(reader, max_depth=max_depth, max_nodes=max_nodes),
        resolver=TitleResolver(index, BarrelResolver(reader)),
        max_depth=max_depth,
    )
    graph = builder.build(StoryGraph(persist_path=persist_path))

    return BuildResult(
        graph=graph,
        index=index,
        story_files=story_files,
        index_errors=index_errors,
        tree_errors=list(builder.errors),
    )


def run_build(config: Settings, context: dict[str, Any]) -> BuildResult | None:
    """Build the story graph, save it and publish it in a server context.

    Builds are serialized by the context's build lock; the previous result
    stays visible to readers until the new one is complete.

    Args:
        config: Settings to build with
        context: Server context dict updated with the result and status

    Returns:
        The new build result, or None if the build failed
    """
    with context["build_lock"]:
        context["indexing_phase"] = "building_graph"
        try:
            result = build_story_graph(
                repo_path=config.repo_path,
                stories_path=config.storybook_stories_path,
                max_depth=config.max_depth,
                max_nodes=config.max_tree_nodes,
                persist_path=config.graph_output_path,
            )
            result.graph.save()
        except Exception as e:
            logger.error(f"Story graph build failed: {e}")
            context["indexing_error"] = str(e)
            context["indexing_phase"] = "error"
            return None

        context["result"] = result
        context["indexing_error"] = None
        context["indexing_phase"] = "complete"
        context["indexing_complete"] = True
        context["build_count"] = context.get("build_count", 0) + 1
        logger.info(f"Story graph ready ({len(result.graph)} stories)")
        return result
