"""Second pass: turn route-module exports into route object properties."""

import logging
from dataclasses import dataclass
from functools import singledispatch

from tree_sitter import Node

from route_codemod.core.ast import (
    VARIABLE_DECLARATION_TYPES,
    ParsedSource,
    declarators,
    export_target,
    find_default_export,
    has_keyword,
    is_default_export,
    named_children_of_type,
    named_export_name,
)
from route_codemod.core.config import RewriteConfig
from route_codemod.models import Edit, HookBinding, MethodEntry, PropertyEntry, Span, StaticValue

logger = logging.getLogger(__name__)

_FUNCTION_TYPES = ("function_declaration", "function_expression", "function")
_GENERATOR_TYPES = ("generator_function_declaration", "generator_function")


@dataclass(frozen=True)
class FunctionShape:
    """Function declaration or function expression with a block body."""

    node: Node


@dataclass(frozen=True)
class GeneratorShape:
    node: Node


@dataclass(frozen=True)
class ArrowBlockShape:
    node: Node


@dataclass(frozen=True)
class ArrowExpressionShape:
    node: Node


@dataclass(frozen=True)
class OtherShape:
    node: Node


ExportShape = FunctionShape | GeneratorShape | ArrowBlockShape | ArrowExpressionShape | OtherShape


@dataclass(frozen=True)
class Classification:
    entries: tuple[PropertyEntry, ...]
    edits: tuple[Edit, ...]


def _shape_of_value(value: Node) -> ExportShape:
    if value.type in _FUNCTION_TYPES:
        return FunctionShape(value)
    if value.type in _GENERATOR_TYPES:
        return GeneratorShape(value)
    if value.type == "arrow_function":
        body = value.child_by_field_name("body")
        if body is not None and body.type == "statement_block":
            return ArrowBlockShape(value)
        return ArrowExpressionShape(value)
    return OtherShape(value)


def detect_shape(export: Node) -> ExportShape | None:
    """Classify what an export carries; ``None`` means the shape is left alone."""
    target = export_target(export)
    if target is None:
        return None
    if is_default_export(export):
        return _shape_of_value(target)
    if target.type in _FUNCTION_TYPES or target.type in _GENERATOR_TYPES:
        return _shape_of_value(target)
    if target.type in VARIABLE_DECLARATION_TYPES:
        found = declarators(target)
        if len(found) != 1:
            return None
        name = found[0].child_by_field_name("name")
        value = found[0].child_by_field_name("value")
        if name is None or name.type != "identifier" or value is None:
            return None
        return _shape_of_value(value)
    return None


def _args_text(function: Node, parsed: ParsedSource) -> str:
    params = function.child_by_field_name("parameters")
    if params is not None:
        # strip the surrounding parentheses
        return parsed.slice(params.start_byte + 1, params.end_byte - 1)
    param = function.child_by_field_name("parameter")
    if param is not None:
        return parsed.text(param)
    return ""


def _span(node: Node) -> Span:
    return Span(start=node.start_byte, end=node.end_byte)


def _method(function: Node, key: str, parsed: ParsedSource) -> MethodEntry:
    body = function.child_by_field_name("body")
    return MethodEntry(
        key=key,
        source_position=_span(function),
        args_text=_args_text(function, parsed),
        body_text=parsed.text(body) if body is not None else None,
        is_async=has_keyword(function, "async"),
    )


@singledispatch
def extract_entry(shape: ExportShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    raise TypeError(f"Unsupported export shape: {type(shape).__name__}")


@extract_entry.register
def _(shape: FunctionShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    return _method(shape.node, key, parsed)


@extract_entry.register
def _(shape: ArrowBlockShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    return _method(shape.node, key, parsed)


@extract_entry.register
def _(shape: GeneratorShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    # `*key() {}` has no async/plain spelling, keep the original function text
    return MethodEntry(key=key, source_position=_span(shape.node), is_async=has_keyword(shape.node, "async"))


@extract_entry.register
def _(shape: ArrowExpressionShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    # shorthand methods cannot express an implicit return
    return StaticValue(key=key, value_text=parsed.text(shape.node))


@extract_entry.register
def _(shape: OtherShape, key: str, parsed: ParsedSource) -> PropertyEntry:
    return StaticValue(key=key, value_text=parsed.text(shape.node))


def is_already_migrated(parsed: ParsedSource, config: RewriteConfig) -> bool:
    """True when the default export already is ``<builder>(...)``."""
    export = find_default_export(parsed)
    if export is None:
        return False
    value = export.child_by_field_name("value")
    if value is None or value.type != "call_expression":
        return False
    callee = value.child_by_field_name("function")
    return callee is not None and callee.type == "identifier" and parsed.text(callee) == config.builder_name


def component_params(bindings: tuple[HookBinding, ...] | list[HookBinding]) -> str:
    fields = []
    for binding in bindings:
        if binding.bound_pattern_text == binding.canonical_name:
            fields.append(binding.canonical_name)
        else:
            fields.append(f"{binding.canonical_name}: {binding.bound_pattern_text}")
    if not fields:
        return ""
    return "{ " + ", ".join(fields) + " }"


def _flag_assignment(statement: Node, parsed: ParsedSource) -> tuple[str, str, Node] | None:
    """Split ``owner.flag = value;`` into its parts."""
    assignment = next(iter(named_children_of_type(statement, "assignment_expression")), None)
    if assignment is None:
        return None
    left = assignment.child_by_field_name("left")
    right = assignment.child_by_field_name("right")
    if left is None or right is None or left.type != "member_expression":
        return None
    obj = left.child_by_field_name("object")
    prop = left.child_by_field_name("property")
    if obj is None or prop is None or obj.type != "identifier":
        return None
    return parsed.text(obj), parsed.text(prop), right


def _classify_export(
    export: Node,
    parsed: ParsedSource,
    bindings: tuple[HookBinding, ...] | list[HookBinding],
    config: RewriteConfig,
) -> PropertyEntry | None:
    is_default = is_default_export(export)
    name = None if is_default else named_export_name(export, parsed)
    if is_default:
        key = config.default_export_key
    elif name is not None and config.is_recognized(name):
        key = config.key_for(name)
    else:
        return None

    shape = detect_shape(export)
    if shape is None:
        logger.debug("Leaving export at line %d untouched", export.start_point[0] + 1)
        return None

    entry = extract_entry(shape, key, parsed)
    if is_default and isinstance(entry, MethodEntry) and entry.body_text is not None:
        entry = entry.model_copy(update={"args_text": component_params(bindings)})
    logger.debug("Classified %s as %s", key, type(shape).__name__)
    return entry


def classify_exports(
    parsed: ParsedSource,
    bindings: tuple[HookBinding, ...] | list[HookBinding],
    config: RewriteConfig,
) -> Classification:
    """Collect route entries in one pass over the top-level statements.

    ``owner.flag = value`` only counts right after the export of ``owner``,
    comments and other flags of the same owner in between allowed.
    """
    entries: list[PropertyEntry] = []
    edits: list[Edit] = []
    # name of the classified export the current statement directly follows
    owner_in_scope: str | None = None

    for statement in parsed.root.named_children:
        if statement.type == "comment":
            continue

        if statement.type == "export_statement":
            entry = _classify_export(statement, parsed, bindings, config)
            owner_in_scope = None
            if entry is not None:
                entries.append(entry)
                edits.append(Edit.delete(statement.start_byte, statement.end_byte, trim_leading_whitespace=True))
                owner_in_scope = named_export_name(statement, parsed)
            continue

        parts = _flag_assignment(statement, parsed) if statement.type == "expression_statement" else None
        flag_key = None
        if parts is not None and parts[0] == owner_in_scope:
            flag_key = config.flag_key(parts[0], parts[1])
        if parts is None or flag_key is None:
            owner_in_scope = None
            continue

        entries.append(StaticValue(key=flag_key, value_text=parsed.text(parts[2]), source_position=_span(statement)))
        edits.append(Edit.delete(statement.start_byte, statement.end_byte, trim_leading_whitespace=True))

    return Classification(entries=tuple(entries), edits=tuple(edits))
