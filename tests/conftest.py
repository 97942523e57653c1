"""Shared fixtures and helpers for tests."""

import textwrap
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from route_codemod.core.ast import ParsedSource, parse_source
from route_codemod.core.config import RewriteConfig

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: every test under tests/unit runs without external services
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


def outdent(source: str) -> str:
    """Dedent a triple-quoted snippet and drop its leading newline."""
    return textwrap.dedent(source).lstrip("\n")


def parse_tsx(source: str) -> ParsedSource:
    return parse_source(outdent(source), "tsx")


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tsx_parser() -> Parser:
    """Return a tree-sitter parser for TSX."""
    return get_parser("tsx")


@pytest.fixture
def config() -> RewriteConfig:
    """Return the default Remix registry."""
    return RewriteConfig()


@pytest.fixture
def route_file(tmp_path: Path) -> Path:
    """A small legacy route module on disk."""
    path = tmp_path / "app" / "routes" / "_index.tsx"
    path.parent.mkdir(parents=True)
    path.write_text(
        outdent(
            """
            import { useLoaderData } from "@remix-run/react";

            export function loader() {
              return { message: "hi" };
            }

            export default function Index() {
              const data = useLoaderData<typeof loader>();
              return <h1>{data.message}</h1>;
            }
            """
        ),
        encoding="utf-8",
    )
    return path
