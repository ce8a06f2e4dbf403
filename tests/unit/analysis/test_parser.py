"""Unit tests for compound_lint.analysis.parser module."""

from pathlib import Path

import pytest

from compound_lint.analysis.parser import ComponentParser
from compound_lint.analysis.syntax import (
    BlockBody,
    DefaultExportDeclaration,
    DefaultExportIdentifier,
    ExportList,
    FunctionDeclaration,
    FunctionExpression,
    MarkupElement,
    MarkupFragment,
    NamedExportDeclaration,
    ObjectLiteral,
    VariableDeclarator,
)
from compound_lint.errors import UnsupportedFileError


class TestLanguageSelection:
    """Tests for grammar selection by suffix."""

    @pytest.mark.parametrize(
        "filename,language",
        [
            ("a.js", "javascript"),
            ("a.jsx", "javascript"),
            ("a.mjs", "javascript"),
            ("a.cjs", "javascript"),
            ("a.ts", "typescript"),
            ("a.tsx", "tsx"),
            ("A.TSX", "tsx"),
        ],
    )
    def test_language_for(self, parser, filename, language):
        """Test suffix to grammar mapping."""
        assert parser.language_for(Path(filename)) == language
        assert parser.can_parse(Path(filename))

    def test_unsupported_suffix_raises(self, parser):
        """Test that unknown suffixes raise UnsupportedFileError."""
        with pytest.raises(UnsupportedFileError) as exc_info:
            parser.language_for(Path("styles.css"))
        assert exc_info.value.exit_code == 2
        assert not parser.can_parse(Path("styles.css"))

    def test_supported_extensions(self):
        """Test the advertised extensions."""
        assert set(ComponentParser().get_supported_extensions()) == {
            ".js",
            ".jsx",
            ".mjs",
            ".cjs",
            ".ts",
            ".tsx",
        }


class TestDeclarations:
    """Tests for lowering of function and variable declarations."""

    def test_function_declaration(self, parse):
        """Test a function declaration with a block body."""
        module = parse(
            """
            function Header() {
              return <div>Header</div>;
            }
            """
        )
        assert len(module.declarations) == 1
        declaration = module.declarations[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert declaration.name == "Header"
        assert declaration.name_span.start_line == 2
        assert isinstance(declaration.body, BlockBody)
        assert len(declaration.body.returns) == 1
        assert isinstance(declaration.body.returns[0], MarkupElement)
        assert declaration.body.returns[0].tag == "div"

    def test_arrow_function_expression_body(self, parse):
        """Test an arrow function whose body is markup."""
        module = parse("const Root = () => <Page />;\n")
        declaration = module.declarations[0]
        assert isinstance(declaration, VariableDeclarator)
        assert declaration.is_function_like
        assert isinstance(declaration.init, FunctionExpression)
        body = declaration.init.body
        assert isinstance(body, MarkupElement)
        assert body.self_closing
        assert body.component_name == "Page"

    def test_function_expression_initializer(self, parse):
        """Test `const X = function () {}` counts as function-like."""
        module = parse("const Dialog = function () { return null; };\n")
        declaration = module.declarations[0]
        assert declaration.is_function_like
        assert isinstance(declaration.init.body, BlockBody)
        assert declaration.init.body.returns == (None,)

    def test_non_function_initializer(self, parse):
        """Test that other initializers are neither functions nor objects."""
        module = parse("const Size = 3;\nconst label = 'x';\n")
        names = [d.name for d in module.declarations]
        assert names == ["Size", "label"]
        assert all(d.init is None for d in module.declarations)

    def test_object_literal_keys(self, parse):
        """Test that object literal keys are collected."""
        module = parse(
            """
            const DialogTrigger = () => null;
            const Dialog = { Trigger: DialogTrigger, 'Content': null, DialogTrigger };
            """
        )
        dialog = module.declarations[-1]
        assert dialog.is_object_literal
        assert isinstance(dialog.init, ObjectLiteral)
        assert dialog.init.keys == ("Trigger", "Content", "DialogTrigger")

    def test_parenthesized_initializer_is_unwrapped(self, parse):
        """Test that parentheses around initializers are transparent."""
        module = parse("const Root = (() => (<Page />));\n")
        assert module.declarations[0].is_function_like
        assert module.declarations[0].init.body.component_name == "Page"

    def test_nested_declarations_in_document_order(self, parse):
        """Test that nested declarations are kept, in document order."""
        module = parse(
            """
            function Outer() {
              const Inner = () => null;
              return <Inner />;
            }
            const After = () => null;
            """
        )
        assert [d.name for d in module.declarations] == ["Outer", "Inner", "After"]


class TestMarkup:
    """Tests for markup lowering."""

    def test_returned_markup_children(self, parse):
        """Test nested elements and parenthesized returns."""
        module = parse(
            """
            function Page() {
              return (
                <div>
                  <Header />
                  <section>
                    <Summary />
                  </section>
                  {items.map((item) => <Item key={item} />)}
                </div>
              );
            }
            """
        )
        markup = module.declarations[0].body.returns[0]
        assert isinstance(markup, MarkupElement)
        assert markup.tag == "div"
        assert not markup.self_closing
        assert [c.tag for c in markup.children] == ["Header", "section"]
        assert markup.children[1].children[0].component_name == "Summary"

    def test_fragment(self, parse):
        """Test that fragments lower to MarkupFragment."""
        module = parse(
            """
            const Page = () => (
              <>
                <Header />
              </>
            );
            """
        )
        body = module.declarations[0].init.body
        assert isinstance(body, MarkupFragment)
        assert body.children[0].component_name == "Header"

    def test_member_tag_component_name(self, parse):
        """Test member-access tags resolve to their capitalized object."""
        module = parse(
            """
            const A = () => <Dialog.Trigger />;
            const B = () => <motion.div />;
            """
        )
        first, second = (d.init.body for d in module.declarations)
        assert first.tag == "Dialog.Trigger"
        assert first.component_name == "Dialog"
        assert second.component_name is None

    def test_lowercase_tags_are_not_components(self, parse):
        """Test that intrinsic elements carry no component name."""
        module = parse("const A = () => <img />;\n")
        assert module.declarations[0].init.body.component_name is None

    def test_markup_tags_collected(self, parse):
        """Test that plain identifier tags are recorded anywhere in the file."""
        module = parse(
            """
            const Group = () => null;
            <Item />;
            <GroupItemIcon>text</GroupItemIcon>;
            <Dialog.Trigger />;
            """
        )
        assert [tag.name for tag in module.markup_tags] == ["Item", "GroupItemIcon"]

    def test_deeply_nested_markup(self, parse):
        """Test that nesting depth is not bound by the recursion limit."""
        depth = 3000
        source = (
            "const Page = () => "
            + "<div>" * depth
            + "<Leaf />"
            + "</div>" * depth
            + ";\n"
        )
        markup = parse(source).declarations[0].init.body
        for _ in range(depth):
            assert markup.tag == "div"
            (markup,) = markup.children
        assert markup.component_name == "Leaf"

    def test_javascript_grammar_parses_jsx(self, parse):
        """Test that .jsx files are parsed with markup support."""
        module = parse("export const Root = () => <Page />;\n", filename="layout.jsx")
        assert module.language == "javascript"
        assert not module.has_errors
        assert module.declarations[0].init.body.component_name == "Page"


class TestSpans:
    """Tests for source positions."""

    def test_columns_count_characters(self, parse):
        """Test that non-ASCII text before a name doesn't shift its column."""
        module = parse("const label = 'éé'; export const Dialog = () => null;\n")
        dialog = next(d for d in module.declarations if d.name == "Dialog")
        assert dialog.name_span.start_line == 1
        assert dialog.name_span.start_column == 33
        assert dialog.name_span.end_column == 39
        assert dialog.name_span.end_byte - dialog.name_span.start_byte == 6

    def test_ascii_columns(self, parse):
        module = parse("export const Dialog = () => null;\n")
        assert module.declarations[0].name_span.start_column == 13


class TestImportsAndExports:
    """Tests for import and export lowering."""

    def test_imports(self, parse):
        """Test default, named and aliased imports."""
        module = parse(
            """
            import React from 'react';
            import { ButtonGroup, Icon as GroupIcon } from './button-group';
            import * as Everything from './all';
            """
        )
        bindings = [(b.local, b.imported, b.source) for b in module.imports]
        assert bindings == [
            ("React", "default", "react"),
            ("ButtonGroup", "ButtonGroup", "./button-group"),
            ("GroupIcon", "Icon", "./button-group"),
        ]

    def test_export_list(self, parse):
        """Test `export { a, b as c }`."""
        module = parse(
            """
            const Dialog = () => null;
            const DialogTrigger = () => null;
            export { Dialog as Root, DialogTrigger };
            """
        )
        export = module.exports[0]
        assert isinstance(export, ExportList)
        assert export.source is None
        assert [(s.local, s.exported) for s in export.specifiers] == [
            ("Dialog", "Root"),
            ("DialogTrigger", "DialogTrigger"),
        ]

    def test_reexport_keeps_source(self, parse):
        """Test that `export { X } from '...'` records its source."""
        module = parse("export { Dialog as Root } from './dialog';\n")
        assert module.exports[0].source == "./dialog"

    def test_named_export_declarations(self, parse):
        """Test exported function and variable declarations."""
        module = parse(
            """
            export function DialogTrigger() { return null; }
            export const DialogContent = () => null, DialogTitle = () => null;
            """
        )
        first, second = module.exports
        assert isinstance(first, NamedExportDeclaration)
        assert [d.name for d in first.declarations] == ["DialogTrigger"]
        assert [d.name for d in second.declarations] == ["DialogContent", "DialogTitle"]
        # Exported declarations are also regular declarations, once each
        assert [d.name for d in module.declarations] == [
            "DialogTrigger",
            "DialogContent",
            "DialogTitle",
        ]

    def test_default_exports(self, parse):
        """Test default export of a function and of an identifier."""
        module = parse(
            """
            export default function Dialog() { return null; }
            """
        )
        assert isinstance(module.exports[0], DefaultExportDeclaration)
        assert module.exports[0].declaration.name == "Dialog"

        module = parse(
            """
            const Dialog = () => null;
            export default Dialog;
            """
        )
        assert isinstance(module.exports[0], DefaultExportIdentifier)
        assert module.exports[0].name == "Dialog"

    def test_default_export_of_expression_is_ignored(self, parse):
        """Test that anonymous default exports are skipped."""
        module = parse("export default () => null;\n")
        assert module.exports == []


class TestErrors:
    """Tests for syntax error handling."""

    def test_syntax_errors_are_recorded(self, parse):
        """Test that broken source still lowers and records errors."""
        module = parse(
            """
            const Dialog = () => null;
            export { Dialog as Root
            function (
            """
        )
        assert module.has_errors
        assert module.errors[0].start_line >= 1
        assert module.declarations[0].name == "Dialog"

    def test_clean_source_has_no_errors(self, parse):
        """Test that valid source records no errors."""
        assert not parse("const Dialog = () => null;\n").has_errors

    def test_parse_file(self, parser, tmp_path):
        """Test parsing a file from disk."""
        path = tmp_path / "date-picker.ts"
        path.write_text("export const DatePicker = () => null;\n")
        module = parser.parse_file(path)
        assert module.language == "typescript"
        assert module.stem == "date-picker"
        assert module.path == path
