"""Rewrite a legacy route module into a single ``defineRoute({...})`` export.

The rewrite runs in two passes over immutable text:

1. hook bindings (``useLoaderData`` and friends) are lifted out of the
   default-exported component and parameter type annotations are stripped;
2. the cleaned-up text is parsed again, recognized exports are turned into
   properties, deleted, and the consolidated export is appended.
"""

import logging

from route_codemod.core.ast import parse_source
from route_codemod.core.builder import build_module_object
from route_codemod.core.config import RewriteConfig
from route_codemod.core.exports import classify_exports, is_already_migrated
from route_codemod.core.fixer import apply_edits
from route_codemod.core.hooks import extract_hook_bindings
from route_codemod.models import Diagnostic, Edit, RejectReason, Rejected, Rewritten, RewriteResult, Span, Unchanged

logger = logging.getLogger(__name__)


def _syntax_error(diagnostics: list[Diagnostic], what: str) -> Rejected:
    return Rejected(
        reason=RejectReason.SYNTAX_ERROR,
        message=f"{what} has {len(diagnostics)} syntax error(s)",
        diagnostics=diagnostics,
    )


def _already_migrated(config: RewriteConfig) -> Rejected:
    return Rejected(
        reason=RejectReason.ALREADY_MIGRATED,
        message=f"Default export already calls {config.builder_name}()",
    )


def _append_statement(text: str, statement: str) -> Edit:
    """Replace trailing whitespace with a blank line and the new statement."""
    source = text.encode("utf-8")
    content_end = len(source.rstrip())
    separator = "\n\n" if content_end else ""
    return Edit(span=Span(start=content_end, end=len(source)), replacement=f"{separator}{statement}\n")


def rewrite_source(text: str, language: str, config: RewriteConfig | None = None) -> RewriteResult:
    config = config or RewriteConfig()
    if not text.strip():
        return Unchanged(text=text)

    parsed = parse_source(text, language)
    if parsed.has_errors:
        return _syntax_error(parsed.diagnostics, "Source")
    if is_already_migrated(parsed, config):
        return _already_migrated(config)

    scan = extract_hook_bindings(parsed, config)
    first_pass = apply_edits(text, scan.edits)

    reparsed = parse_source(first_pass.text, language)
    if reparsed.has_errors:
        return _syntax_error(reparsed.diagnostics, "Intermediate rewrite")
    if is_already_migrated(reparsed, config):
        return _already_migrated(config)

    classification = classify_exports(reparsed, scan.bindings, config)
    statement = build_module_object(classification.entries, reparsed.source, config)
    if statement is None:
        logger.debug("No route exports found")
        return Unchanged(text=text)

    second_pass = apply_edits(first_pass.text, classification.edits)
    final = apply_edits(second_pass.text, [_append_statement(second_pass.text, statement)])

    logger.debug(
        "Folded %d export(s) into %s(), lifted %d hook binding(s)",
        len(classification.entries),
        config.builder_name,
        len(scan.bindings),
    )
    return Rewritten(text=final.text, dropped_edits=[*first_pass.skipped, *second_pass.skipped, *final.skipped])
