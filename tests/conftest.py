"""Shared fixtures: a small component library with stories."""

from pathlib import Path

import pytest

COMPONENT_SOURCES = {
    "src/components/Button.tsx": """
export const Button = ({ label }: { label: string }) => <button>{label}</button>;
""",
    "src/components/Icon.tsx": """
export default function Icon() {
  return <svg />;
}
""",
    "src/components/index.ts": """
export { Button } from "./Button";
export { default as Icon } from "./Icon";
""",
    "src/components/Wrapper.tsx": """
import { Button } from "./Button";

export function Wrapper() {
  return (
    <div>
      <Button label="ok" />
    </div>
  );
}
""",
    "src/components/Card.tsx": """
import React from "react";
import { Wrapper } from "./Wrapper";
import { Icon } from ".";

export const Card = () => (
  <Wrapper>
    <Icon />
  </Wrapper>
);
""",
    "src/components/Button.stories.tsx": """
import type { Meta } from "@storybook/react";
import { Button } from "./Button";

const meta: Meta<typeof Button> = {
  title: "Atoms/Button",
  component: Button,
};

export default meta;
""",
    "src/components/Icon.stories.tsx": """
import type { Meta } from "@storybook/react";
import Icon from "./Icon";

export default {
  title: "Atoms/Icon",
  component: Icon,
} satisfies Meta<typeof Icon>;
""",
    "src/components/Card.stories.tsx": """
import { Card } from "./Card";

export default { title: "Molecules/Card", component: Card };
""",
}


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: source}`` under root."""
    for relative, source in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source.lstrip())
    return root


@pytest.fixture
def project(tmp_path):
    """Callable writing source files into a fresh repository directory."""

    def write(files: dict[str, str]) -> Path:
        return write_files(tmp_path.resolve(), files)

    return write


@pytest.fixture
def component_repo(tmp_path) -> Path:
    """Repository with Button, Icon and Card stories.

    Card renders Button through an undocumented Wrapper and Icon through
    the components barrel.
    """
    return write_files(tmp_path.resolve(), COMPONENT_SOURCES)


def _chain_sources(length: int) -> dict[str, str]:
    """Components Level0 .. Level<length>, each rendering the next one."""
    files = {f"Level{length}.tsx": f"export const Level{length} = () => null;\n"}
    for i in range(length):
        files[f"Level{i}.tsx"] = (
            f'import {{ Level{i + 1} }} from "./Level{i + 1}";\n\n'
            f"export const Level{i} = () => <Level{i + 1} />;\n"
        )
    return files


def _pair_source(name: str, layer: int) -> str:
    left, right = f"Left{layer}", f"Right{layer}"
    return (
        f'import {{ {left} }} from "./{left}";\n'
        f'import {{ {right} }} from "./{right}";\n\n'
        f"export const {name} = () => (\n  <div>\n    <{left} />\n    <{right} />\n  </div>\n);\n"
    )


def _diamond_sources(layers: int) -> dict[str, str]:
    """Top renders Left1 and Right1, every layer renders both of the next."""
    files = {"Top.tsx": _pair_source("Top", 1)}
    for i in range(1, layers + 1):
        for side in ("Left", "Right"):
            name = f"{side}{i}"
            if i == layers:
                files[f"{name}.tsx"] = f"export const {name} = () => null;\n"
            else:
                files[f"{name}.tsx"] = _pair_source(name, i + 1)
    return files


@pytest.fixture
def chain_sources():
    """Callable giving sources of a straight chain of nested components."""
    return _chain_sources


@pytest.fixture
def diamond_sources():
    """Callable giving sources of layers that all render the next two components."""
    return _diamond_sources
