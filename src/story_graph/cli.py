"""One-shot command: build the story graph and write it as JSON."""

import logging
import sys

from pydantic import ValidationError

from .config import Settings, setup_logging
from .pipeline import build_story_graph

logger = logging.getLogger(__name__)


def main() -> int:
    """Entry point for the ``story-graph`` command.

    Configuration comes from the environment (``REPO_PATH``,
    ``STORYBOOK_STORIES_PATH``, ``OUTPUT_PATH``, ``LOG_LEVEL``, ``MAX_DEPTH``, ``MAX_TREE_NODES``).
    Skipped stories and components are reported but do not fail the run.
    """
    try:
        config = Settings()
    except ValidationError as e:
        setup_logging("INFO")
        logger.error(f"Failed to load configuration: {e}")
        return 2

    setup_logging(config.log_level)
    logger.info(f"Building story graph for {config.repo_path}")

    result = build_story_graph(
        repo_path=config.repo_path,
        stories_path=config.storybook_stories_path,
        max_depth=config.max_depth,
        max_nodes=config.max_tree_nodes,
        persist_path=config.graph_output_path,
    )
    result.graph.save()

    if not result.ok:
        logger.warning(
            f"Skipped {len(result.index_errors)} stories and "
            f"{len(result.tree_errors)} components, see errors above"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
