"""Tree-sitter reader summarizing the imports, exports and JSX of JS/TS modules."""

import logging
import re
from pathlib import Path

from tree_sitter import Node, Parser, Query, QueryCursor

from ..errors import ModuleParseError
from .entities import ImportBinding, ModuleSummary, ReExport
from .languages import LANGUAGE_CONFIGS, get_language_for_file

logger = logging.getLogger(__name__)

# Top-level statements that bind a name in module scope
DECLARATION_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
})

VARIABLE_DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

_AS_SPLIT = re.compile(r"\s+as\s+")


class ModuleReader:
    """Reads JS/TS modules into :class:`ModuleSummary` objects.

    Summaries are cached per file path for the lifetime of the reader, so one
    reader should be used per graph build.
    """

    def __init__(self):
        self._parsers: dict[str, Parser] = {}
        self._jsx_queries: dict[str, Query] = {}
        self._cache: dict[str, ModuleSummary] = {}
        self._init_parsers()

    def _init_parsers(self) -> None:
        """Initialize Tree-sitter parsers and queries for all languages."""
        for lang_name, config in LANGUAGE_CONFIGS.items():
            self._parsers[lang_name] = Parser(config.language)
            if config.jsx_query:
                self._jsx_queries[lang_name] = Query(config.language, config.jsx_query)

    def _run_query(self, query: Query, node: Node) -> dict[str, list[Node]]:
        """Run a query and return captures as a dictionary."""
        cursor = QueryCursor(query)
        return cursor.captures(node)

    def read(self, file_path: Path | str) -> ModuleSummary:
        """Parse a module and summarize its top-level structure.

        Args:
            file_path: Absolute path of the module

        Returns:
            The module summary

        Raises:
            ModuleParseError: If the file is missing, unreadable or not JS/TS
        """
        key = str(file_path)
        if key in self._cache:
            return self._cache[key]

        path = Path(file_path)
        language = get_language_for_file(path)
        if not language:
            raise ModuleParseError(f"Unsupported file type: {path}")

        try:
            source = path.read_bytes()
        except OSError as e:
            raise ModuleParseError(f"Failed to read file {path}: {e}") from e

        tree = self._parsers[language].parse(source)
        if tree.root_node.has_error:
            logger.debug(f"Syntax errors in {path}, using partial parse")

        summary = ModuleSummary(path=key)
        for node in tree.root_node.children:
            if node.type == "import_statement":
                self._collect_import(node, source, summary)
            elif node.type == "export_statement":
                self._collect_export(node, source, summary)
            else:
                self._collect_declaration(node, source, summary)

        # `export { Button as default }` makes Button the default export
        for exported, local in summary.local_exports.items():
            if exported == "default" and local in summary.declarations:
                summary.has_default_export = True

        if language in self._jsx_queries:
            summary.rendered = self._extract_rendered(tree.root_node, source, language)

        self._cache[key] = summary
        return summary

    def _collect_import(self, node: Node, source: bytes, summary: ModuleSummary) -> None:
        """Record the names bound by an import statement."""
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        module = self._string_value(source_node, source)

        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    local = self._node_text(part, source)
                    summary.imports[local] = ImportBinding(local, "default", module)
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        imported, local = self._split_specifier(self._node_text(spec, source))
                        summary.imports[local] = ImportBinding(local, imported, module)
                elif part.type == "namespace_import":
                    names = [c for c in part.named_children if c.type == "identifier"]
                    if names:
                        local = self._node_text(names[-1], source)
                        summary.imports[local] = ImportBinding(local, "*", module)

    def _collect_export(self, node: Node, source: bytes, summary: ModuleSummary) -> None:
        """Record what an export statement makes visible to importers."""
        source_node = node.child_by_field_name("source")
        declaration = node.child_by_field_name("declaration")
        is_default = any(child.type == "default" for child in node.children)

        if source_node is not None:
            module = self._string_value(source_node, source)
            clause = self._first_named_child(node, "export_clause")
            namespace = self._first_named_child(node, "namespace_export")
            if clause is not None:
                for spec in clause.named_children:
                    if spec.type == "export_specifier":
                        original, exported = self._split_specifier(self._node_text(spec, source))
                        summary.re_exports.append(ReExport(exported, original, module))
            elif namespace is not None:
                names = [c for c in namespace.named_children if c.type in {"identifier", "string"}]
                if names:
                    exported = self._string_value(names[-1], source)
                    summary.re_exports.append(ReExport(exported, "*", module))
            else:
                summary.star_sources.append(module)
            return

        if declaration is not None:
            self._collect_declaration(declaration, source, summary)
            if is_default:
                summary.has_default_export = True
            return

        if is_default:
            value = node.child_by_field_name("value")
            summary.default_export = value
            # `import Button from "./Button"; export default Button;` re-exports
            if value is not None and value.type == "identifier":
                name = self._node_text(value, source)
                if name in summary.imports:
                    summary.local_exports["default"] = name
                    return
            summary.has_default_export = True
            return

        clause = self._first_named_child(node, "export_clause")
        if clause is not None:
            for spec in clause.named_children:
                if spec.type == "export_specifier":
                    local, exported = self._split_specifier(self._node_text(spec, source))
                    summary.local_exports[exported] = local

    def _collect_declaration(self, node: Node, source: bytes, summary: ModuleSummary) -> None:
        """Record names bound by a top-level declaration."""
        if node.type in DECLARATION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                summary.declarations.add(self._node_text(name_node, source))
        elif node.type in VARIABLE_DECLARATION_TYPES:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is None or name_node.type != "identifier":
                    continue
                name = self._node_text(name_node, source)
                summary.declarations.add(name)
                value = declarator.child_by_field_name("value")
                if value is not None:
                    summary.variables[name] = value

    def _extract_rendered(self, root: Node, source: bytes, language: str) -> list[str]:
        """Extract capitalized JSX element names in order of first use."""
        captures = self._run_query(self._jsx_queries[language], root)
        nodes = sorted(captures.get("jsx.name", []), key=lambda n: n.start_byte)

        rendered: list[str] = []
        for name_node in nodes:
            name = self._node_text(name_node, source)
            # Lowercase names are intrinsic HTML elements
            if name[:1].isupper() and name not in rendered:
                rendered.append(name)
        return rendered

    def _split_specifier(self, text: str) -> tuple[str, str]:
        """Split ``a as b`` into ``(a, b)``; a bare ``a`` gives ``(a, a)``."""
        text = text.strip()
        if text.startswith("type "):
            text = text[len("type ") :].strip()
        parts = [p.strip("'\"") for p in _AS_SPLIT.split(text, maxsplit=1)]
        if len(parts) == 2:
            return parts[0], parts[1]
        return parts[0], parts[0]

    def _first_named_child(self, node: Node, node_type: str) -> Node | None:
        for child in node.named_children:
            if child.type == node_type:
                return child
        return None

    def _string_value(self, node: Node, source: bytes) -> str:
        """Get the contents of a string literal node without its quotes."""
        return self._node_text(node, source).strip("'\"`")

    def _node_text(self, node: Node | None, source: bytes) -> str:
        """Get the text content of a node."""
        if node is None:
            return ""
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
