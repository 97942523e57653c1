"""First pass: lift data-hook calls out of the view component.

``const data = useLoaderData<typeof loader>();`` inside the default export
becomes a ``HookBinding`` and the declaration is scheduled for deletion; the
binding resurfaces later as a parameter of the ``Component`` method.
"""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from route_codemod.core.ast import (
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    VARIABLE_DECLARATION_TYPES,
    ImportBindings,
    ParsedSource,
    collect_import_bindings,
    declarators,
    export_target,
    find_default_export,
    named_children_of_type,
    named_export_name,
    resolve_callee_name,
    top_level_exports,
)
from route_codemod.core.config import HookRule, RewriteConfig
from route_codemod.core.languages import allows_type_annotations
from route_codemod.models import Edit, HookBinding

logger = logging.getLogger(__name__)

_DESTRUCTURING_PATTERNS = ("object_pattern", "array_pattern")
_PARAMETER_TYPES = ("required_parameter", "optional_parameter")
_COMPONENT_TYPES = ("function_declaration", "function_expression", "function", "arrow_function")


@dataclass(frozen=True)
class HookScan:
    bindings: tuple[HookBinding, ...]
    edits: tuple[Edit, ...]


def view_function_body(parsed: ParsedSource) -> Node | None:
    """Statement block of the default-exported component, if it has one."""
    export = find_default_export(parsed)
    if export is None:
        return None
    target = export_target(export)
    if target is None:
        return None
    if target.type not in _COMPONENT_TYPES:
        return None
    body = target.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        return None
    return body


def match_hook_declaration(
    declaration: Node,
    parsed: ParsedSource,
    imports: ImportBindings,
    config: RewriteConfig,
) -> tuple[HookRule, str] | None:
    """Return the hook rule and bound pattern text for ``const x = useHook()``."""
    found = declarators(declaration)
    if len(found) != 1:
        return None
    name = found[0].child_by_field_name("name")
    value = found[0].child_by_field_name("value")
    if name is None or value is None or value.type != "call_expression":
        return None
    if name.type != "identifier":
        if not (config.bind_destructured_patterns and name.type in _DESTRUCTURING_PATTERNS):
            return None
    callee = resolve_callee_name(value, parsed, imports)
    if callee is None or callee not in config.hooks:
        return None
    return config.hooks[callee], parsed.text(name)


def _param_type_annotations(function: Node) -> list[Node]:
    params = function.child_by_field_name("parameters")
    if params is None:
        return []
    annotations = []
    for param in named_children_of_type(params, *_PARAMETER_TYPES):
        annotation = param.child_by_field_name("type")
        if annotation is not None:
            annotations.append(annotation)
    return annotations


def strip_param_types(parsed: ParsedSource, config: RewriteConfig) -> list[Edit]:
    """Delete parameter type annotations of exports that become methods."""
    edits: list[Edit] = []
    for export in top_level_exports(parsed):
        name = named_export_name(export, parsed)
        if name is None or not config.strips_param_types(name):
            continue
        declaration = export.child_by_field_name("declaration")
        if declaration is None:
            continue
        functions: list[Node] = []
        if declaration.type in FUNCTION_DECLARATION_TYPES:
            functions.append(declaration)
        elif declaration.type in VARIABLE_DECLARATION_TYPES and len(declarators(declaration)) == 1:
            value = declarators(declaration)[0].child_by_field_name("value")
            if value is not None and value.type in (*FUNCTION_EXPRESSION_TYPES, "arrow_function"):
                functions.append(value)
        for function in functions:
            for annotation in _param_type_annotations(function):
                edits.append(Edit.delete(annotation.start_byte, annotation.end_byte))
    return edits


def extract_hook_bindings(parsed: ParsedSource, config: RewriteConfig) -> HookScan:
    bindings: list[HookBinding] = []
    edits: list[Edit] = []

    body = view_function_body(parsed)
    if body is not None:
        imports = collect_import_bindings(parsed)
        seen_roles = set()
        for statement in named_children_of_type(body, *VARIABLE_DECLARATION_TYPES):
            matched = match_hook_declaration(statement, parsed, imports, config)
            if matched is None:
                continue
            rule, bound_text = matched
            if rule.role in seen_roles:
                logger.warning(
                    "Keeping duplicate %s binding '%s' at line %d",
                    rule.canonical_name,
                    bound_text,
                    statement.start_point[0] + 1,
                )
                continue
            seen_roles.add(rule.role)
            bindings.append(
                HookBinding(role=rule.role, canonical_name=rule.canonical_name, bound_pattern_text=bound_text)
            )
            edits.append(Edit.delete(statement.start_byte, statement.end_byte, trim_leading_whitespace=True))
            logger.debug("Lifted %s binding '%s'", rule.canonical_name, bound_text)

    if allows_type_annotations(parsed.language):
        edits.extend(strip_param_types(parsed, config))
    return HookScan(bindings=tuple(bindings), edits=tuple(edits))
