"""Unit tests for language detection and normalization."""

from pathlib import Path

import pytest

from route_codemod.core.languages import (
    allows_type_annotations,
    detect_language_from_path,
    normalize_language,
    resolve_language,
)


def test_detects_language_from_extension() -> None:
    cases = {
        "route.tsx": "tsx",
        "route.ts": "typescript",
        "route.mts": "typescript",
        "route.jsx": "javascript",
        "route.js": "javascript",
        "route.mjs": "javascript",
        "ROUTE.TSX": "tsx",
    }
    for filename, expected in cases.items():
        assert detect_language_from_path(Path(filename)) == expected


def test_rejects_unsupported_extension() -> None:
    with pytest.raises(ValueError, match="Unsupported file extension"):
        detect_language_from_path(Path("styles.css"))


def test_normalizes_language_aliases() -> None:
    cases = {
        "TS": "typescript",
        "js": "javascript",
        "JSX": "javascript",
        "tsx": "tsx",
    }
    for alias, expected in cases.items():
        assert normalize_language(alias) == expected


def test_rejects_unknown_language() -> None:
    with pytest.raises(ValueError, match="Unsupported language"):
        normalize_language("python")


def test_resolve_language_prefers_explicit_language() -> None:
    assert resolve_language("ts", Path("route.jsx")) == "typescript"
    assert resolve_language(None, Path("route.jsx")) == "javascript"


def test_resolve_language_requires_input() -> None:
    with pytest.raises(ValueError, match="Language must be provided"):
        resolve_language(None, None)


def test_type_annotations_follow_grammar() -> None:
    assert allows_type_annotations("tsx")
    assert allows_type_annotations("typescript")
    assert not allows_type_annotations("javascript")
