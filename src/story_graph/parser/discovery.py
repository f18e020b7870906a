"""Discovery of story files on disk."""

import logging
from pathlib import Path

from .languages import STORY_EXTENSIONS

logger = logging.getLogger(__name__)

# Without an explicit stories directory only PascalCase story files are picked up
DEFAULT_STORY_GLOB = "[A-Z]*.stories.*"
STORIES_DIR_GLOB = "*.stories.*"

# Story files in build output directories are still indexed
DISCOVERY_IGNORED_DIRECTORIES = frozenset({"node_modules"})


def discover_story_files(repo_path: Path, stories_path: Path | None = None) -> list[Path]:
    """Find story files to index.

    Args:
        repo_path: Repository root, searched when no stories directory is given
        stories_path: Directory holding the stories (``STORYBOOK_STORIES_PATH``);
            relative paths are taken from ``repo_path``

    Returns:
        Sorted absolute paths of the story files
    """
    if stories_path is not None:
        root = (repo_path / stories_path).resolve()
        pattern = STORIES_DIR_GLOB
    else:
        root = repo_path.resolve()
        pattern = DEFAULT_STORY_GLOB

    if not root.is_dir():
        logger.warning(f"Stories directory does not exist: {root}")
        return []

    story_files: list[Path] = []
    for file_path in root.rglob(pattern):
        relative_parts = file_path.relative_to(root).parts
        if not file_path.is_file() or DISCOVERY_IGNORED_DIRECTORIES.intersection(relative_parts):
            continue
        if stories_path is not None and file_path.suffix.lower() not in STORY_EXTENSIONS:
            continue
        story_files.append(file_path.resolve())

    story_files.sort()
    logger.info(f"Found {len(story_files)} story files under {root}")
    return story_files
