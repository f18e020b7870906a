"""Parser module for reading stories and component usage trees using Tree-sitter."""

from .barrels import BarrelResolver
from .discovery import discover_story_files
from .entities import (
    ImportBinding,
    ModuleSummary,
    ReExport,
    StoryEntry,
    StoryMetadata,
    UsageNode,
)
from .languages import (
    IGNORED_DIRECTORIES,
    LANGUAGE_CONFIGS,
    LanguageConfig,
    get_language_for_file,
    is_story_file,
    is_supported_file,
    should_ignore_path,
)
from .paths import is_relative_specifier, resolve_module_path, resolve_relative_import
from .stories import StoryParser
from .treesitter import ModuleReader
from .usage import UsageTreeParser

__all__ = [
    # Entities
    "ImportBinding",
    "ModuleSummary",
    "ReExport",
    "StoryEntry",
    "StoryMetadata",
    "UsageNode",
    # Languages
    "IGNORED_DIRECTORIES",
    "LANGUAGE_CONFIGS",
    "LanguageConfig",
    "get_language_for_file",
    "is_story_file",
    "is_supported_file",
    "should_ignore_path",
    # Paths
    "is_relative_specifier",
    "resolve_module_path",
    "resolve_relative_import",
    # Parsers
    "BarrelResolver",
    "ModuleReader",
    "StoryParser",
    "UsageTreeParser",
    "discover_story_files",
]
