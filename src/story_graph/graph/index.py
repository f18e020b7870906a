"""Story index: documented component paths mapped to story titles."""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from ..errors import StoryIndexError, StoryMetadataError
from ..parser.entities import StoryEntry, StoryMetadata
from ..parser.paths import resolve_module_path

logger = logging.getLogger(__name__)


class StoryMetadataExtractor(Protocol):
    """Anything that can read a title and component path out of a story file."""

    def extract(self, story_path: Path | str) -> StoryMetadata: ...


class StoryIndex:
    """Mapping from absolute component path to story title.

    Insertion is last-write-wins: a second story for the same component
    replaces the title of the first one. Iteration follows first insertion
    order of each path.
    """

    def __init__(self):
        self._titles: dict[str, str] = {}

    def insert(self, component_path: Path | str, title: str) -> None:
        """Map a component path to a title, replacing any previous title."""
        key = str(component_path)
        previous = self._titles.get(key)
        if previous is not None and previous != title:
            logger.debug(f"Story '{title}' replaces '{previous}' for {key}")
        self._titles[key] = title

    def lookup(self, path: Path | str) -> str | None:
        """Get the title documenting the component at ``path``, if any."""
        return self._titles.get(str(path))

    def titles(self) -> set[str]:
        """Get all titles currently in the index."""
        return set(self._titles.values())

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over ``(component_path, title)`` pairs."""
        return iter(list(self._titles.items()))

    def __contains__(self, path: object) -> bool:
        return str(path) in self._titles

    def __len__(self) -> int:
        return len(self._titles)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return self.items()


def resolve_story_entry(story_path: Path, metadata: StoryMetadata) -> StoryEntry:
    """Resolve a story's relative component path against the story file.

    Raises:
        StoryIndexError: If the component path does not lead to a module file
    """
    component_path = resolve_module_path(story_path.parent / metadata.relative_component_path)
    if component_path is None:
        raise StoryIndexError(
            story_path,
            f"component path {metadata.relative_component_path} could not be resolved",
        )
    return StoryEntry(
        story_path=str(story_path),
        component_path=str(component_path),
        title=metadata.title,
    )


def build_story_index(
    story_paths: Iterable[Path | str],
    extractor: StoryMetadataExtractor,
    index: StoryIndex | None = None,
) -> tuple[StoryIndex, list[StoryIndexError]]:
    """Build the story index from story files.

    A story that cannot be read or resolved is logged, reported in the
    returned error list and left out; the remaining stories are still indexed.

    Args:
        story_paths: Story files in the order they should be indexed
        extractor: Reads title and component path from a story file
        index: Index to insert into (a new one by default)

    Returns:
        Tuple of (index, errors)
    """
    index = index if index is not None else StoryIndex()
    errors: list[StoryIndexError] = []

    for story_path in story_paths:
        story_path = Path(story_path)
        try:
            try:
                metadata = extractor.extract(story_path)
            except StoryMetadataError as e:
                raise StoryIndexError(story_path, str(e)) from e
            entry = resolve_story_entry(story_path, metadata)
        except StoryIndexError as e:
            logger.error(f"Error processing story path: {e}")
            errors.append(e)
            continue
        index.insert(entry.component_path, entry.title)

    logger.info(f"Indexed {len(index)} documented components ({len(errors)} stories skipped)")
    return index, errors
