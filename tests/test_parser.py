"""Tests for the Tree-sitter module reader, usage trees, barrels and stories."""

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest

from story_graph.errors import (
    ModuleParseError,
    StoryMetadataError,
    UsageTreeDepthError,
    UsageTreeError,
)
from story_graph.parser import BarrelResolver, ModuleReader, StoryParser, UsageTreeParser


def read_source(code: str, suffix: str = ".tsx"):
    with NamedTemporaryFile(mode="w", suffix=suffix, delete=False) as f:
        f.write(code)
        f.flush()
        return ModuleReader().read(Path(f.name))


def count_nodes(node) -> int:
    return 1 + sum(count_nodes(child) for child in node.children)


class TestModuleReader:
    """Tests for ModuleReader class."""

    def test_imports(self):
        """Test default, named, aliased and namespace imports."""
        code = """
import React from "react";
import Icon from "./Icon";
import { Button, Link as Anchor } from "../atoms";
import * as Layout from "./layout";
"""
        summary = read_source(code)

        assert summary.imports["React"].imported == "default"
        assert summary.imports["React"].is_relative is False
        assert summary.imports["Icon"].imported == "default"
        assert summary.imports["Icon"].source == "./Icon"
        assert summary.imports["Button"].imported == "Button"
        assert summary.imports["Anchor"].imported == "Link"
        assert summary.imports["Anchor"].source == "../atoms"
        assert summary.imports["Layout"].imported == "*"

    def test_declarations_and_exports(self):
        """Test exported and local declarations."""
        code = """
export function Header() {
  return <header />;
}

export const Footer = () => <footer />;

class Panel {}

function Legacy() {
  return null;
}

export { Panel, Legacy as Old };
"""
        summary = read_source(code)

        assert {"Header", "Footer", "Panel", "Legacy"} <= summary.declarations
        assert summary.local_exports == {"Panel": "Panel", "Old": "Legacy"}
        assert summary.declares("Header")
        assert summary.declares("Old")
        assert not summary.declares("Missing")
        assert not summary.declares("default")

    def test_default_exports(self):
        """Test the different ways of exporting a default."""
        summary = read_source("export default function Icon() {\n  return <svg />;\n}\n")
        assert summary.declares("default")
        assert "Icon" in summary.declarations

        summary = read_source("const Badge = () => null;\nexport default Badge;\n")
        assert summary.declares("default")
        assert summary.default_export is not None
        assert summary.default_export.type == "identifier"

        summary = read_source("const Tag = () => null;\nexport { Tag as default };\n")
        assert summary.declares("default")

    def test_re_exports(self):
        """Test export-from clauses."""
        code = """
export { Button } from "./Button";
export { Link as Anchor } from "./Link";
export { default as Icon } from "./Icon";
export * from "./forms";
export * as layout from "./layout";
"""
        summary = read_source(code, suffix=".ts")

        re_exports = {(r.exported, r.original, r.source) for r in summary.re_exports}
        assert ("Button", "Button", "./Button") in re_exports
        assert ("Anchor", "Link", "./Link") in re_exports
        assert ("Icon", "default", "./Icon") in re_exports
        assert ("layout", "*", "./layout") in re_exports
        assert summary.star_sources == ["./forms"]
        assert summary.declarations == set()

    def test_rendered_components(self):
        """Test that capitalized JSX names are listed once in order of first use."""
        code = """
import { Card, Button, Icon } from "./components";

export const Page = () => (
  <Card>
    <Button />
    <div>
      <Icon />
      <Button />
    </div>
  </Card>
);
"""
        summary = read_source(code)

        assert summary.rendered == ["Card", "Button", "Icon"]

    def test_member_expressions_not_rendered(self):
        """Test that <Foo.Bar> elements are not treated as components."""
        code = """
import { Menu } from "./Menu";

export const Nav = () => <Menu.Item />;
"""
        summary = read_source(code)

        assert summary.rendered == []

    def test_jsx_in_js_files(self):
        """Test JSX extraction from plain JavaScript."""
        code = """
import Avatar from "./Avatar";

export function Profile() {
  return <Avatar />;
}
"""
        summary = read_source(code, suffix=".jsx")

        assert summary.rendered == ["Avatar"]
        assert summary.declares("Profile")

    def test_unsupported_file(self):
        """Test that non JS/TS files are rejected."""
        with NamedTemporaryFile(mode="w", suffix=".css", delete=False) as f:
            f.write(".button { color: red; }")
            f.flush()
            with pytest.raises(ModuleParseError):
                ModuleReader().read(Path(f.name))

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a parse error."""
        with pytest.raises(ModuleParseError):
            ModuleReader().read(tmp_path / "Missing.tsx")

    def test_summaries_are_cached(self, tmp_path):
        """Test that a module is parsed once per reader."""
        path = tmp_path / "Button.tsx"
        path.write_text("export const Button = () => null;\n")
        reader = ModuleReader()

        first = reader.read(path)
        path.write_text("export const Changed = () => null;\n")

        assert reader.read(path) is first
        assert ModuleReader().read(path).declares("Changed")

    def test_default_export_of_import(self):
        """Test that exporting an imported binding as default does not declare it."""
        summary = read_source('import Button from "./Button";\n\nexport default Button;\n', ".ts")

        assert not summary.declares("default")
        assert summary.local_exports == {"default": "Button"}

    def test_default_export_of_local(self):
        """Test that exporting a local binding as default declares it."""
        summary = read_source("const Button = () => null;\nexport default Button;\n")

        assert summary.declares("default")
        assert summary.local_exports == {}


class TestUsageTreeParser:
    """Tests for UsageTreeParser class."""

    def test_wrapper_and_barrel_children(self, component_repo):
        """Test the tree of a component rendering through a wrapper and a barrel."""
        components = component_repo / "src" / "components"

        root = UsageTreeParser().parse(components / "Card.tsx")

        assert root.name == "Card"
        assert root.file_path == str(components / "Card.tsx")
        assert [child.name for child in root.children] == ["Wrapper", "Icon"]

        wrapper, icon = root.children
        assert wrapper.file_path == str(components / "Wrapper.tsx")
        assert wrapper.error is False
        assert wrapper.parent is root

        assert icon.file_path == str(components / "index.ts")
        assert icon.error is True
        assert icon.children == []

        [button] = wrapper.children
        assert button.name == "Button"
        assert button.file_path == str(components / "Button.tsx")
        assert button.parent is wrapper
        assert list(button.lineage()) == [
            str(components / "Button.tsx"),
            str(components / "Wrapper.tsx"),
            str(components / "Card.tsx"),
        ]

    def test_default_import_uses_local_name(self, project):
        """Test that a default import is named as it is used."""
        root_dir = project({
            "Icon.tsx": "export default function Icon() {\n  return <svg />;\n}\n",
            "Toolbar.tsx": (
                'import SettingsIcon from "./Icon";\n\n'
                "export const Toolbar = () => <SettingsIcon />;\n"
            ),
        })

        root = UsageTreeParser().parse(root_dir / "Toolbar.tsx")

        [icon] = root.children
        assert icon.name == "SettingsIcon"
        assert icon.file_path == str(root_dir / "Icon.tsx")
        assert icon.error is False

    def test_package_and_local_components_skipped(self, project):
        """Test that only relatively imported components become children."""
        root_dir = project({
            "Page.tsx": """
import { Dialog } from "@acme/ui";

const Local = () => <span />;

export const Page = () => (
  <Dialog>
    <Local />
  </Dialog>
);
""",
        })

        root = UsageTreeParser().parse(root_dir / "Page.tsx")

        assert root.children == []

    def test_unresolvable_import(self, project):
        """Test that an import that cannot be completed yields an error leaf."""
        root_dir = project({
            "Page.tsx": 'import { Missing } from "./Missing";\n\nexport const Page = () => <Missing />;\n',
        })

        root = UsageTreeParser().parse(root_dir / "Page.tsx")

        [missing] = root.children
        assert missing.name == "Missing"
        assert missing.error is True
        assert missing.file_path == str(root_dir / "Missing")

    def test_unparseable_child_is_leaf(self, project):
        """Test that a non-JS import target is kept as an unexpanded leaf."""
        root_dir = project({
            "logo.svg": "<svg></svg>\n",
            "Header.tsx": 'import Logo from "./logo.svg";\n\nexport const Header = () => <Logo />;\n',
        })

        root = UsageTreeParser().parse(root_dir / "Header.tsx")

        [logo] = root.children
        assert logo.name == "Logo"
        assert logo.error is False
        assert logo.children == []

    def test_import_cycle(self, project):
        """Test that components rendering each other do not recurse forever."""
        root_dir = project({
            "Tree.tsx": 'import { TreeItem } from "./TreeItem";\n\nexport const Tree = () => <TreeItem />;\n',
            "TreeItem.tsx": 'import { Tree } from "./Tree";\n\nexport const TreeItem = () => <Tree />;\n',
        })

        root = UsageTreeParser().parse(root_dir / "Tree.tsx")

        [item] = root.children
        [tree] = item.children
        assert tree.file_path == str(root_dir / "Tree.tsx")
        assert tree.children == []

    def test_root_parse_failure(self, tmp_path):
        """Test that an unreadable root raises UsageTreeError."""
        with pytest.raises(UsageTreeError) as exc_info:
            UsageTreeParser().parse(tmp_path / "Gone.tsx")

        assert exc_info.value.component_path == str(tmp_path / "Gone.tsx")

    def test_default_re_export_is_barrel(self, project):
        """Test that an index re-exporting an imported default is left unexpanded."""
        root_dir = project({
            "Button/Button.tsx": "export default function Button() {\n  return <button />;\n}\n",
            "Button/index.ts": 'import Button from "./Button";\n\nexport default Button;\n',
            "Card.tsx": 'import Button from "./Button";\n\nexport const Card = () => <Button />;\n',
        })

        root = UsageTreeParser().parse(root_dir / "Card.tsx")

        [button] = root.children
        assert button.name == "Button"
        assert button.error is True
        assert button.file_path == str(root_dir / "Button" / "index.ts")

    def test_depth_limit(self, project, chain_sources):
        """Test that a chain deeper than max_depth fails the whole tree."""
        root_dir = project(chain_sources(5))

        with pytest.raises(UsageTreeDepthError) as exc_info:
            UsageTreeParser(max_depth=2).parse(root_dir / "Level0.tsx")

        assert exc_info.value.component_path == str(root_dir / "Level0.tsx")
        assert exc_info.value.max_depth == 2

        root = UsageTreeParser(max_depth=5).parse(root_dir / "Level0.tsx")
        assert len(root.children[0].children[0].children) == 1

    def test_node_limit(self, project, diamond_sources):
        """Test that shared sub-components multiply up to max_nodes."""
        root_dir = project(diamond_sources(4))

        root = UsageTreeParser().parse(root_dir / "Top.tsx")
        assert count_nodes(root) == 31

        with pytest.raises(UsageTreeError) as exc_info:
            UsageTreeParser(max_nodes=20).parse(root_dir / "Top.tsx")

        assert not isinstance(exc_info.value, UsageTreeDepthError)
        assert exc_info.value.component_path == str(root_dir / "Top.tsx")


class TestBarrelResolver:
    """Tests for BarrelResolver class."""

    def test_named_and_default_re_exports(self, component_repo):
        """Test resolving names through the components barrel."""
        components = component_repo / "src" / "components"
        resolver = BarrelResolver()

        assert resolver.resolve("Button", components / "index.ts") == str(components / "Button.tsx")
        assert resolver.resolve("Icon", components / "index.ts") == str(components / "Icon.tsx")
        assert resolver.resolve("Missing", components / "index.ts") is None

    def test_nested_barrels_and_star_exports(self, project):
        """Test following several levels of re-exports."""
        root_dir = project({
            "atoms/Chip.tsx": "export const Chip = () => null;\n",
            "atoms/index.ts": 'export * from "./Chip";\n',
            "index.ts": 'export { Chip as Tag } from "./atoms";\n',
        })

        resolved = BarrelResolver().resolve("Tag", root_dir / "index.ts")

        assert resolved == str(root_dir / "atoms" / "Chip.tsx")

    def test_import_then_export(self, project):
        """Test barrels that import a component and export it separately."""
        root_dir = project({
            "Badge.tsx": "const Badge = () => null;\nexport default Badge;\n",
            "index.ts": 'import Badge from "./Badge";\n\nexport { Badge };\n',
        })

        assert BarrelResolver().resolve("Badge", root_dir / "index.ts") == str(root_dir / "Badge.tsx")

    def test_default_fallback(self, project):
        """Test that a default-imported name falls back to the default export."""
        root_dir = project({
            "Avatar.tsx": "export default function Avatar() {\n  return null;\n}\n",
            "index.ts": 'export { default } from "./Avatar";\n',
        })

        resolved = BarrelResolver().resolve("UserAvatar", root_dir / "index.ts")

        assert resolved == str(root_dir / "Avatar.tsx")

    def test_star_does_not_carry_default(self, project):
        """Test that star re-exports never provide a default export."""
        root_dir = project({
            "Avatar.tsx": "export default function Avatar() {\n  return null;\n}\n",
            "index.ts": 'export * from "./Avatar";\n',
        })

        assert BarrelResolver().resolve("default", root_dir / "index.ts") is None

    def test_re_export_cycle(self, project):
        """Test that barrels re-exporting each other terminate."""
        root_dir = project({
            "a.ts": 'export * from "./b";\n',
            "b.ts": 'export * from "./a";\n',
        })

        assert BarrelResolver().resolve("Ghost", root_dir / "a.ts") is None

    def test_imported_default_re_export(self, project):
        """Test following `import X from; export default X` to the defining file."""
        root_dir = project({
            "Button/Button.tsx": "export default function Button() {\n  return <button />;\n}\n",
            "Button/index.ts": 'import Button from "./Button";\n\nexport default Button;\n',
        })
        index = root_dir / "Button" / "index.ts"

        assert BarrelResolver().resolve("Button", index) == str(root_dir / "Button" / "Button.tsx")
        assert BarrelResolver().resolve("default", index) == str(root_dir / "Button" / "Button.tsx")


class TestStoryParser:
    """Tests for StoryParser class."""

    def test_meta_variable(self, component_repo):
        """Test `export default meta` with a typed meta variable."""
        story = component_repo / "src" / "components" / "Button.stories.tsx"

        metadata = StoryParser().extract(story)

        assert metadata.title == "Atoms/Button"
        assert metadata.relative_component_path == "./Button"

    def test_satisfies_meta(self, component_repo):
        """Test an inline meta object wrapped in `satisfies`."""
        story = component_repo / "src" / "components" / "Icon.stories.tsx"

        metadata = StoryParser().extract(story)

        assert metadata.title == "Atoms/Icon"
        assert metadata.relative_component_path == "./Icon"

    def test_shorthand_component_and_template_title(self):
        """Test `{ component }` shorthand and a backtick title."""
        code = """
import component from "../ui/Switch";

export default {
  title: `Forms/Switch`,
  component,
};
"""
        with NamedTemporaryFile(mode="w", suffix=".stories.jsx", delete=False) as f:
            f.write(code)
            f.flush()
            metadata = StoryParser().extract(Path(f.name))

        assert metadata.title == "Forms/Switch"
        assert metadata.relative_component_path == "../ui/Switch"

    @pytest.mark.parametrize(
        "code",
        [
            'import { Card } from "./Card";\nexport const Primary = {};\n',
            'import { Card } from "./Card";\nexport default { component: Card };\n',
            'export default { title: "Orphan" };\n',
            'import { Card } from "@acme/ui";\nexport default { title: "Card", component: Card };\n',
            'import { Card } from "./Card";\nconst name = "Card";\n'
            "export default { title: `Cards/${name}`, component: Card };\n",
            'export default makeMeta("Card");\n',
        ],
        ids=[
            "no-default-export",
            "no-title",
            "no-component",
            "package-component",
            "dynamic-title",
            "call-expression",
        ],
    )
    def test_unusable_meta(self, code):
        """Test stories that cannot be indexed."""
        with NamedTemporaryFile(mode="w", suffix=".stories.tsx", delete=False) as f:
            f.write(code)
            f.flush()
            with pytest.raises(StoryMetadataError):
                StoryParser().extract(Path(f.name))

    def test_mdx_story(self, tmp_path):
        """Test that MDX stories are reported as unsupported."""
        story = tmp_path / "Intro.stories.mdx"
        story.write_text("# Introduction\n")

        with pytest.raises(StoryMetadataError):
            StoryParser().extract(story)
