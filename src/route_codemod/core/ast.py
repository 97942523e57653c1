from dataclasses import dataclass, field
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from route_codemod.core.languages import normalize_language
from route_codemod.models import Diagnostic, Position

FUNCTION_DECLARATION_TYPES = ("function_declaration", "generator_function_declaration")
FUNCTION_EXPRESSION_TYPES = ("function_expression", "function", "generator_function")
VARIABLE_DECLARATION_TYPES = ("lexical_declaration", "variable_declaration")


@dataclass(frozen=True)
class ImportBindings:
    """Local names introduced by import statements."""

    aliases: dict[str, str] = field(default_factory=dict)
    namespaces: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ParsedSource:
    source: bytes
    tree: Tree
    language: str
    diagnostics: list[Diagnostic]

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    def slice(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")

    def text(self, node: Node) -> str:
        return self.slice(node.start_byte, node.end_byte)


def parse_source(text: str, language: str) -> ParsedSource:
    resolved = normalize_language(language)
    source_bytes = text.encode("utf-8")
    parser = get_parser(cast(SupportedLanguage, resolved))
    tree = parser.parse(source_bytes)
    return ParsedSource(
        source=source_bytes,
        tree=tree,
        language=resolved,
        diagnostics=collect_syntax_errors(tree.root_node),
    )


def _position(point: tuple[int, int]) -> Position:
    return Position(row=point[0], column=point[1])


def collect_syntax_errors(root: Node) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            diagnostics.append(
                Diagnostic(
                    message=f"Missing '{node.type}'",
                    start=_position(node.start_point),
                    end=_position(node.end_point),
                )
            )
        elif node.is_error:
            diagnostics.append(
                Diagnostic(
                    message="Unexpected syntax",
                    start=_position(node.start_point),
                    end=_position(node.end_point),
                )
            )
        if node.has_error:
            stack.extend(reversed(node.children))
    diagnostics.sort(key=lambda d: (d.start.row, d.start.column))
    return diagnostics


def has_keyword(node: Node, keyword: str) -> bool:
    return any(not child.is_named and child.type == keyword for child in node.children)


def named_children_of_type(node: Node, *types: str) -> list[Node]:
    return [child for child in node.named_children if child.type in types]


def collect_import_bindings(parsed: ParsedSource) -> ImportBindings:
    aliases: dict[str, str] = {}
    namespaces: set[str] = set()
    for statement in named_children_of_type(parsed.root, "import_statement"):
        for clause in named_children_of_type(statement, "import_clause"):
            for part in clause.named_children:
                if part.type == "named_imports":
                    for specifier in named_children_of_type(part, "import_specifier"):
                        name = specifier.child_by_field_name("name")
                        alias = specifier.child_by_field_name("alias")
                        if name is None:
                            continue
                        local = alias if alias is not None else name
                        aliases[parsed.text(local)] = parsed.text(name)
                elif part.type == "namespace_import":
                    for ident in named_children_of_type(part, "identifier"):
                        namespaces.add(parsed.text(ident))
    return ImportBindings(aliases=aliases, namespaces=frozenset(namespaces))


def resolve_callee_name(call: Node, parsed: ParsedSource, imports: ImportBindings) -> str | None:
    """Name a call's target resolves to: ``useData()`` with ``useLoaderData as useData`` gives ``useLoaderData``."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        name = parsed.text(callee)
        return imports.aliases.get(name, name)
    if callee.type == "member_expression":
        obj = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("property")
        if obj is not None and prop is not None and obj.type == "identifier":
            if parsed.text(obj) in imports.namespaces:
                return parsed.text(prop)
    return None


def top_level_exports(parsed: ParsedSource) -> list[Node]:
    return named_children_of_type(parsed.root, "export_statement")


def is_default_export(export: Node) -> bool:
    return has_keyword(export, "default")


def find_default_export(parsed: ParsedSource) -> Node | None:
    for export in top_level_exports(parsed):
        if is_default_export(export):
            return export
    return None


def export_target(export: Node) -> Node | None:
    """The declaration or value an ``export`` statement carries."""
    target = export.child_by_field_name("declaration")
    if target is None:
        target = export.child_by_field_name("value")
    return target


def declarators(declaration: Node) -> list[Node]:
    return named_children_of_type(declaration, "variable_declarator")


def named_export_name(export: Node, parsed: ParsedSource) -> str | None:
    if is_default_export(export):
        return None
    declaration = export.child_by_field_name("declaration")
    if declaration is None:
        return None
    if declaration.type in FUNCTION_DECLARATION_TYPES:
        name = declaration.child_by_field_name("name")
        return parsed.text(name) if name is not None else None
    if declaration.type in VARIABLE_DECLARATION_TYPES:
        for declarator in declarators(declaration):
            name = declarator.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                return parsed.text(name)
    return None
