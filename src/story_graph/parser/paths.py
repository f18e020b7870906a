"""Completion of JS/TS module specifiers to files on disk."""

import logging
import os
from pathlib import Path

from .languages import MODULE_EXTENSIONS

logger = logging.getLogger(__name__)


def is_relative_specifier(source: str) -> bool:
    """Check if an import specifier points into the project ("./x", "../x", ".")."""
    return source in {".", ".."} or source.startswith("./") or source.startswith("../")


def resolve_module_path(path: Path | str) -> Path | None:
    """Complete a module path the way bundlers do.

    Tries, in order: the path itself, the path with each known extension
    appended, and an ``index`` file with each extension inside the directory.

    Args:
        path: Absolute path as written in an import, possibly without extension

    Returns:
        Resolved absolute file path, or None if nothing matches
    """
    base = Path(os.path.normpath(str(path)))

    possible_paths = [base]
    possible_paths.extend(Path(f"{base}{ext}") for ext in MODULE_EXTENSIONS)
    possible_paths.extend(base / f"index{ext}" for ext in MODULE_EXTENSIONS)

    for candidate in possible_paths:
        if candidate.is_file():
            return candidate.resolve()

    logger.debug(f"No module file found for {base}")
    return None


def resolve_relative_import(source: str, context_file: Path | str) -> Path | None:
    """Resolve a relative import specifier against the importing file.

    Args:
        source: Import specifier (e.g. "./Button", "../atoms")
        context_file: File containing the import

    Returns:
        Resolved absolute file path, or None for package imports and misses
    """
    if not is_relative_specifier(source):
        return None
    return resolve_module_path(Path(context_file).parent / source)
