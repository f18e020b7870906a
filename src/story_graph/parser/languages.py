"""Language configurations for Tree-sitter parsing of component sources."""

from dataclasses import dataclass
from pathlib import Path

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language


@dataclass
class LanguageConfig:
    """Configuration for a component source language."""

    name: str
    extensions: tuple[str, ...]
    language: Language
    # Query for rendered JSX elements (None for grammars without JSX)
    jsx_query: str | None = None


# Component names are plain identifiers; member expressions like <Foo.Bar>
# and namespaced names are not followed.
JSX_QUERY = """
(jsx_opening_element
  name: (identifier) @jsx.name
)

(jsx_self_closing_element
  name: (identifier) @jsx.name
)
"""


def _create_language_configs() -> dict[str, LanguageConfig]:
    """Create one config per grammar; TypeScript without JSX, TSX and JavaScript with it."""
    return {
        "typescript": LanguageConfig(
            name="typescript",
            extensions=(".ts", ".mts", ".cts"),
            language=Language(tsts.language_typescript()),
        ),
        "tsx": LanguageConfig(
            name="tsx",
            extensions=(".tsx",),
            language=Language(tsts.language_tsx()),
            jsx_query=JSX_QUERY,
        ),
        "javascript": LanguageConfig(
            name="javascript",
            extensions=(".js", ".jsx", ".mjs", ".cjs"),
            language=Language(tsjs.language()),
            jsx_query=JSX_QUERY,
        ),
    }


LANGUAGE_CONFIGS = _create_language_configs()

EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ext: name for name, config in LANGUAGE_CONFIGS.items() for ext in config.extensions
}

# Order in which extensionless module specifiers are completed
MODULE_EXTENSIONS = (".tsx", ".ts", ".jsx", ".js", ".mjs", ".cjs")

# Extensions a story file may have
STORY_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mdx"})


def get_language_for_file(file_path: Path | str) -> str | None:
    """Get the grammar used for a source file, or None for non JS/TS files."""
    return EXTENSION_TO_LANGUAGE.get(Path(file_path).suffix.lower())


def is_supported_file(file_path: Path | str) -> bool:
    """Check if a file can be parsed as a component source."""
    return get_language_for_file(file_path) is not None


def is_story_file(file_path: Path | str) -> bool:
    """Check if a file name looks like a story (``Name.stories.tsx``)."""
    path = Path(file_path)
    return ".stories." in path.name and path.suffix.lower() in STORY_EXTENSIONS


# Directories to ignore when scanning for stories
IGNORED_DIRECTORIES = frozenset({
    # === Version Control ===
    ".git",
    ".svn",
    ".hg",

    # === JavaScript / Node ===
    "node_modules",
    ".yarn",
    ".pnpm-store",
    ".next",
    ".nuxt",
    ".turbo",
    ".cache",
    ".parcel-cache",

    # === Build output ===
    "dist",
    "build",
    "storybook-static",
    "coverage",
})


def should_ignore_path(path: Path) -> bool:
    """Check if any directory on a (repository relative) path is ignored."""
    return not IGNORED_DIRECTORIES.isdisjoint(path.parts)
