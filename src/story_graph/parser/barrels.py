"""Resolution of components imported through barrel (re-export) files."""

import logging
from pathlib import Path

from ..errors import ModuleParseError
from .paths import resolve_relative_import
from .treesitter import ModuleReader

logger = logging.getLogger(__name__)


class BarrelResolver:
    """Follows re-exports from a barrel file to the module defining a component.

    Handles ``export { X } from``, ``export { Y as X } from``,
    ``export { default as X } from``, ``export * from`` and
    ``import X from ...; export { X }``, through any number of barrels.
    """

    def __init__(self, reader: ModuleReader | None = None):
        self._reader = reader or ModuleReader()

    def resolve(self, name: str, file_path: Path | str) -> str | None:
        """Find the file that actually defines ``name`` as exported by ``file_path``.

        Default imports reach a usage tree under their local name, so a name
        that is not exported at all is retried as the default export.

        Args:
            name: Exported name of the component
            file_path: Barrel file the component was imported from

        Returns:
            Absolute path of the defining module, or None if it cannot be found
        """
        found = self._find(name, Path(file_path), set())
        if found is None and name != "default":
            found = self._find("default", Path(file_path), set())
        if found is None:
            logger.debug(f"Could not resolve {name} through {file_path}")
        return found

    def _find(self, name: str, path: Path, visited: set[tuple[str, str]]) -> str | None:
        key = (str(path), name)
        if key in visited:
            return None
        visited.add(key)

        try:
            summary = self._reader.read(path)
        except ModuleParseError as e:
            logger.debug(f"Skipping barrel candidate: {e}")
            return None

        if summary.declares(name):
            return str(path)

        for re_export in summary.re_exports:
            if re_export.exported != name:
                continue
            # `export * as ns from` exports a namespace object, not a component
            if re_export.original == "*":
                return None
            target = resolve_relative_import(re_export.source, path)
            if target is None:
                return None
            return self._find(re_export.original, target, visited)

        if name in summary.local_exports:
            binding = summary.imports.get(summary.local_exports[name])
            if binding is None or not binding.is_relative or binding.imported == "*":
                return None
            target = resolve_relative_import(binding.source, path)
            if target is None:
                return None
            return self._find(binding.imported, target, visited)

        # Star re-exports never carry the default export
        if name == "default":
            return None
        for star_source in summary.star_sources:
            target = resolve_relative_import(star_source, path)
            if target is None:
                continue
            found = self._find(name, target, visited)
            if found is not None:
                return found

        return None
