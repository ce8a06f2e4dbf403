"""Tree-sitter parsing and lowering for JS/TS component files.

The parser picks a grammar from the file suffix, parses the source and walks
the resulting tree exactly once, lowering the node kinds the compound
analysis consumes into the typed variants of :mod:`.syntax`. Every other
node kind is ignored.
"""

import logging
import time
from pathlib import Path

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from ..errors import UnsupportedFileError
from .names import is_component_name
from .syntax import (
    BlockBody,
    Declaration,
    DefaultExportDeclaration,
    DefaultExportIdentifier,
    ExportList,
    ExportNode,
    ExportSpecifier,
    FunctionBody,
    FunctionDeclaration,
    FunctionExpression,
    ImportBinding,
    Markup,
    MarkupElement,
    MarkupFragment,
    MarkupTag,
    ModuleSyntax,
    NamedExportDeclaration,
    ObjectLiteral,
    Span,
    VariableDeclarator,
)

logger = logging.getLogger(__name__)

FUNCTION_DECLARATION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration"}
)
# "function" is the pre-0.21 name of "function_expression"
FUNCTION_EXPRESSION_TYPES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
VARIABLE_STATEMENT_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
MARKUP_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
MEMBER_TAG_TYPES = frozenset({"member_expression", "nested_identifier"})


class ComponentParser:
    """Parse JS/TS/JSX/TSX sources into :class:`ModuleSyntax`.

    One instance can be shared across threads: a fresh tree-sitter
    ``Parser`` is created per parse while the grammars are loaded once.
    """

    SUPPORTED_EXTENSIONS: dict[str, str] = {
        ".js": "javascript",
        ".jsx": "javascript",
        ".mjs": "javascript",
        ".cjs": "javascript",
        ".ts": "typescript",
        ".tsx": "tsx",
    }

    def __init__(self) -> None:
        self._languages: dict[str, Language] = {
            "javascript": Language(tsjs.language()),
            "typescript": Language(tsts.language_typescript()),
            "tsx": Language(tsts.language_tsx()),
        }

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the file."""
        return file_path.suffix.lower() in self.SUPPORTED_EXTENSIONS

    def get_supported_extensions(self) -> list[str]:
        """Return list of supported file extensions."""
        return list(self.SUPPORTED_EXTENSIONS)

    def language_for(self, file_path: Path) -> str:
        """Return the grammar name used for ``file_path``."""
        suffix = file_path.suffix.lower()
        language = self.SUPPORTED_EXTENSIONS.get(suffix)
        if language is None:
            raise UnsupportedFileError(str(file_path), suffix)
        return language

    def parse_tree(self, content: str, language: str) -> Tree:
        """Parse content into a tree-sitter tree with the named grammar."""
        parser = Parser(self._languages[language])
        return parser.parse(content.encode("utf-8"))

    def parse(
        self, content: str, file_path: Path, language: str | None = None
    ) -> ModuleSyntax:
        """Parse ``content`` and lower it into a :class:`ModuleSyntax`.

        Args:
            content: Source text.
            file_path: Path the source belongs to (drives grammar choice and
                the Block name inference).
            language: Grammar override ("javascript", "typescript", "tsx").

        Returns:
            The lowered module.
        """
        start = time.time()
        language = language or self.language_for(file_path)
        source = content.encode("utf-8")
        tree = self.parse_tree(content, language)

        module = _Lowering(source, file_path, language).lower(tree.root_node)

        if module.has_errors:
            logger.debug(
                f"{file_path}: {len(module.errors)} syntax error(s), "
                f"first at line {module.errors[0].start_line}"
            )
        logger.debug(
            f"Parsed {file_path} in {(time.time() - start) * 1000:.1f}ms",
            extra={"file_path": str(file_path)},
        )
        return module

    def parse_file(self, file_path: Path) -> ModuleSyntax:
        """Read and parse a file from disk."""
        with open(file_path, encoding="utf-8") as f:
            content = f.read()
        return self.parse(content, file_path)


def _first_named_child(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _unwrap(node: Node) -> Node:
    """Strip parentheses around an expression."""
    while node.type == "parenthesized_expression":
        inner = _first_named_child(node)
        if inner is None:
            break
        node = inner
    return node


class _Lowering:
    """Single-use walker turning one tree into a :class:`ModuleSyntax`."""

    def __init__(self, source: bytes, file_path: Path, language: str):
        self.source = source
        self.module = ModuleSyntax(path=file_path, language=language)
        # Declarations are lowered once even when reached through an export
        self._declarations: dict[int, Declaration | None] = {}

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def _column(self, point: tuple[int, int], byte: int) -> int:
        # tree-sitter columns count bytes
        return len(self.source[byte - point[1] : byte].decode("utf-8"))

    def span(self, node: Node) -> Span:
        return Span(
            start_line=node.start_point[0] + 1,
            start_column=self._column(node.start_point, node.start_byte),
            end_line=node.end_point[0] + 1,
            end_column=self._column(node.end_point, node.end_byte),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    def lower(self, root: Node) -> ModuleSyntax:
        stack = [root]
        while stack:
            node = stack.pop()
            self._visit(node)
            stack.extend(reversed(node.children))
        return self.module

    def _visit(self, node: Node) -> None:
        node_type = node.type

        if node_type == "ERROR" or node.is_missing:
            self.module.errors.append(self.span(node))
        elif node_type == "import_statement":
            self.module.imports.extend(self._lower_imports(node))
        elif node_type == "export_statement":
            export = self._lower_export(node)
            if export is not None:
                self.module.exports.append(export)
        elif node_type in FUNCTION_DECLARATION_TYPES:
            declaration = self._function_declaration(node)
            if declaration is not None:
                self.module.declarations.append(declaration)
        elif node_type == "variable_declarator":
            declaration = self._variable_declarator(node)
            if declaration is not None:
                self.module.declarations.append(declaration)
        elif node_type in ("jsx_opening_element", "jsx_self_closing_element"):
            name_node = node.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                self.module.markup_tags.append(
                    MarkupTag(name=self.text(name_node), span=self.span(name_node))
                )

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _function_declaration(self, node: Node) -> FunctionDeclaration | None:
        if node.id in self._declarations:
            return self._declarations[node.id]  # type: ignore[return-value]

        result = None
        name_node = node.child_by_field_name("name")
        if name_node is not None and name_node.type == "identifier":
            result = FunctionDeclaration(
                name=self.text(name_node),
                name_span=self.span(name_node),
                body=self._function_body(node.child_by_field_name("body")),
                span=self.span(node),
            )
        self._declarations[node.id] = result
        return result

    def _variable_declarator(self, node: Node) -> VariableDeclarator | None:
        if node.id in self._declarations:
            return self._declarations[node.id]  # type: ignore[return-value]

        result = None
        name_node = node.child_by_field_name("name")
        if name_node is not None and name_node.type == "identifier":
            init: FunctionExpression | ObjectLiteral | None = None
            value = node.child_by_field_name("value")
            if value is not None:
                value = _unwrap(value)
                if value.type in FUNCTION_EXPRESSION_TYPES:
                    init = FunctionExpression(
                        body=self._function_body(value.child_by_field_name("body"))
                    )
                elif value.type == "object":
                    init = ObjectLiteral(keys=self._object_keys(value))
            result = VariableDeclarator(
                name=self.text(name_node),
                name_span=self.span(name_node),
                init=init,
                span=self.span(node),
            )
        self._declarations[node.id] = result
        return result

    def _declaration_statement(self, node: Node) -> list[Declaration]:
        if node.type in FUNCTION_DECLARATION_TYPES:
            declaration = self._function_declaration(node)
            return [declaration] if declaration else []
        if node.type in VARIABLE_STATEMENT_TYPES:
            declarations: list[Declaration] = []
            for child in node.named_children:
                if child.type != "variable_declarator":
                    continue
                declarator = self._variable_declarator(child)
                if declarator is not None:
                    declarations.append(declarator)
            return declarations
        return []

    def _object_keys(self, node: Node) -> tuple[str, ...]:
        keys = []
        for child in node.named_children:
            if child.type == "shorthand_property_identifier":
                keys.append(self.text(child))
            elif child.type == "pair":
                key = child.child_by_field_name("key")
                if key is None:
                    continue
                if key.type == "property_identifier":
                    keys.append(self.text(key))
                elif key.type == "string":
                    keys.append(self.text(key)[1:-1])
        return tuple(keys)

    # ------------------------------------------------------------------
    # Function bodies and markup
    # ------------------------------------------------------------------

    def _function_body(self, body: Node | None) -> FunctionBody:
        if body is None:
            return None
        body = _unwrap(body)
        if body.type == "statement_block":
            returns: list[Markup | None] = []
            for statement in body.named_children:
                if statement.type != "return_statement":
                    continue
                argument = _first_named_child(statement)
                returns.append(self._markup(argument) if argument else None)
            return BlockBody(returns=tuple(returns))
        return self._markup(body)

    def _markup(self, node: Node) -> Markup | None:
        """Lower a markup expression bottom-up with an explicit stack."""
        root = _unwrap(node)
        if root.type not in MARKUP_TYPES:
            return None

        lowered: dict[int, Markup | None] = {}
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            current, expanded = stack.pop()
            if expanded or current.type == "jsx_self_closing_element":
                lowered[current.id] = self._markup_node(current, lowered)
                continue
            stack.append((current, True))
            for child in reversed(current.named_children):
                if child.type in MARKUP_TYPES:
                    stack.append((child, False))
        return lowered[root.id]

    def _markup_node(
        self, node: Node, lowered: dict[int, Markup | None]
    ) -> Markup | None:
        """Lower one markup node whose markup children are already lowered."""
        if node.type == "jsx_self_closing_element":
            tag, component = self._tag_name(node.child_by_field_name("name"))
            return MarkupElement(
                tag=tag,
                component_name=component,
                self_closing=True,
                children=(),
                span=self.span(node),
            )

        children = tuple(
            lowered[child.id]
            for child in node.named_children
            if child.type in MARKUP_TYPES and lowered[child.id] is not None
        )

        opening = node.child_by_field_name("open_tag")
        if opening is None:
            opening = next(
                (c for c in node.children if c.type == "jsx_opening_element"), None
            )
        name_node = opening.child_by_field_name("name") if opening else None

        if node.type == "jsx_fragment" or name_node is None:
            return MarkupFragment(children=children, span=self.span(node))

        tag, component = self._tag_name(name_node)
        return MarkupElement(
            tag=tag,
            component_name=component,
            self_closing=False,
            children=children,
            span=self.span(node),
        )

    def _tag_name(self, name_node: Node | None) -> tuple[str, str | None]:
        if name_node is None:
            return "", None

        tag = self.text(name_node)
        if name_node.type == "identifier":
            return tag, tag if is_component_name(tag) else None

        if name_node.type in MEMBER_TAG_TYPES:
            obj = name_node.child_by_field_name("object")
            if obj is None and name_node.named_children:
                obj = name_node.named_children[0]
            if obj is not None and obj.type == "identifier":
                obj_name = self.text(obj)
                return tag, obj_name if is_component_name(obj_name) else None

        return tag, None

    # ------------------------------------------------------------------
    # Imports and exports
    # ------------------------------------------------------------------

    def _string_value(self, node: Node | None) -> str | None:
        if node is None:
            return None
        return self.text(node).strip("'\"`")

    def _lower_imports(self, node: Node) -> list[ImportBinding]:
        source = self._string_value(node.child_by_field_name("source")) or ""
        clause = next((c for c in node.children if c.type == "import_clause"), None)
        if clause is None:
            return []

        bindings = []
        for child in clause.named_children:
            if child.type == "identifier":
                bindings.append(
                    ImportBinding(
                        local=self.text(child),
                        imported="default",
                        source=source,
                        span=self.span(child),
                    )
                )
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    local_node = alias_node or name_node
                    if local_node.type != "identifier":
                        continue
                    bindings.append(
                        ImportBinding(
                            local=self.text(local_node),
                            imported=self.text(name_node),
                            source=source,
                            span=self.span(spec),
                        )
                    )
        return bindings

    def _lower_export(self, node: Node) -> ExportNode | None:
        span = self.span(node)
        is_default = any(child.type == "default" for child in node.children)

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            if is_default:
                if declaration.type not in FUNCTION_DECLARATION_TYPES:
                    return None
                function = self._function_declaration(declaration)
                if function is None:
                    return None
                return DefaultExportDeclaration(declaration=function, span=span)
            declarations = self._declaration_statement(declaration)
            if not declarations:
                return None
            return NamedExportDeclaration(declarations=tuple(declarations), span=span)

        if is_default:
            value = node.child_by_field_name("value")
            if value is None:
                return None
            value = _unwrap(value)
            if value.type != "identifier":
                return None
            return DefaultExportIdentifier(name=self.text(value), span=self.span(value))

        clause = next((c for c in node.children if c.type == "export_clause"), None)
        if clause is None:
            return None

        specifiers = []
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            exported_node = spec.child_by_field_name("alias") or name_node
            if exported_node.type not in ("identifier", "default"):
                continue
            specifiers.append(
                ExportSpecifier(
                    local=self.text(name_node),
                    exported=self.text(exported_node),
                    span=self.span(exported_node),
                )
            )

        return ExportList(
            specifiers=tuple(specifiers),
            source=self._string_value(node.child_by_field_name("source")),
            span=span,
        )
