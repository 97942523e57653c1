from collections.abc import Iterable

from route_codemod.core.config import RewriteConfig
from route_codemod.models import PropertyEntry, StaticValue

INDENT = "  "


def order_entries(entries: Iterable[PropertyEntry]) -> list[PropertyEntry]:
    """Source order first, then position-less entries alphabetically."""
    entries = list(entries)
    positioned = [e for e in entries if e.source_position is not None]
    floating = [e for e in entries if e.source_position is None]
    positioned.sort(key=lambda e: e.source_position.start)  # type: ignore[union-attr]
    floating.sort(key=lambda e: e.key)
    return positioned + floating


def render_entry(entry: PropertyEntry, source: bytes) -> str:
    if isinstance(entry, StaticValue):
        return f"{entry.key}: {entry.value_text}"
    if entry.body_text is None:
        if entry.source_position is None:
            raise ValueError(f"Method '{entry.key}' has neither a body nor a source position")
        original = source[entry.source_position.start : entry.source_position.end].decode("utf-8")
        return f"{entry.key}: {original}"
    prefix = "async " if entry.is_async else ""
    return f"{prefix}{entry.key}({entry.args_text or ''}) {entry.body_text}"


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line.strip() else line for line in text.split("\n"))


def build_module_object(entries: Iterable[PropertyEntry], source: bytes, config: RewriteConfig) -> str | None:
    """Render ``export default <builder>({ ... });`` or ``None`` without entries."""
    ordered = order_entries(entries)
    if not ordered:
        return None
    body = ",\n".join(_indent(render_entry(entry, source)) for entry in ordered)
    return f"export default {config.builder_name}({{\n{body}\n}});"

