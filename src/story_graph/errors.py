"""Exceptions raised while building the story dependency graph."""

from pathlib import Path


class StoryGraphError(Exception):
    """Base class for all story graph errors."""


class ModuleParseError(StoryGraphError):
    """A source file could not be read or is not a supported JS/TS module."""


class StoryMetadataError(StoryGraphError):
    """A story file does not declare a usable title/component pair."""


class StoryIndexError(StoryGraphError):
    """A story could not be added to the story index.

    Raised (and collected) per story file; the story is left out of the index
    and the remaining stories are still processed.
    """

    def __init__(self, story_path: Path | str, reason: str):
        self.story_path = str(story_path)
        self.reason = reason
        super().__init__(f"{self.story_path}: {reason}")


class UsageTreeError(StoryGraphError):
    """The usage tree of a documented component could not be produced."""

    def __init__(self, component_path: Path | str, reason: str):
        self.component_path = str(component_path)
        self.reason = reason
        super().__init__(f"{self.component_path}: {reason}")


class UsageTreeDepthError(UsageTreeError):
    """A usage tree traversal went deeper than the configured limit."""

    def __init__(self, component_path: Path | str, max_depth: int):
        self.max_depth = max_depth
        super().__init__(component_path, f"usage tree deeper than {max_depth} levels")
