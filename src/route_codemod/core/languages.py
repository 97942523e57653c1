from pathlib import Path

_LANGUAGE_ALIASES = {
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "tsx": "tsx",
}

# tree-sitter-javascript parses JSX as well, so .jsx files share its grammar.
_EXTENSION_LANGUAGE_MAP = {
    ".cjs": "javascript",
    ".cts": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".mts": "typescript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

_TYPED_GRAMMARS = frozenset({"typescript", "tsx"})


def normalize_language(language: str) -> str:
    """Map a grammar name or alias (``ts``, ``jsx``) to a tree-sitter grammar."""
    grammar = _LANGUAGE_ALIASES.get(language.strip().lower())
    if grammar is None:
        choices = ", ".join(sorted(_LANGUAGE_ALIASES))
        raise ValueError(f"Unsupported language '{language}'. Route modules use one of: {choices}")
    return grammar


def detect_language_from_path(file_path: Path) -> str:
    try:
        return _EXTENSION_LANGUAGE_MAP[file_path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported file extension: {file_path.suffix or file_path.name}") from None


def resolve_language(language: str | None, file_path: Path | None) -> str:
    """An explicit language wins over the file extension."""
    if language:
        return normalize_language(language)
    if file_path is None:
        raise ValueError("Language must be provided when no file path is available.")
    return detect_language_from_path(file_path)


def allows_type_annotations(language: str) -> bool:
    return normalize_language(language) in _TYPED_GRAMMARS
