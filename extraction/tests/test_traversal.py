"""
Unit tests for traversal.py

Tests building the declaration tree from tree-sitter syntax trees: scopes,
records, method qualifiers, return types and parameters.
"""

import unittest
from pathlib import Path
from extraction.models import (
    DeclKind,
    FunctionDecl,
    LinkageSpecDecl,
    MethodDecl,
    NamespaceDecl,
    RecordDecl,
)
from extraction.parser import parse_bytes, parse_file
from extraction.traversal import build_declaration_tree, normalize_cpp_text


def _build(source: bytes, file_path: str = "/src/include/demo.h"):
    return build_declaration_tree(parse_bytes(source), source, file_path)


def _only_record(unit) -> RecordDecl:
    records = [decl for decl in unit.children if isinstance(decl, RecordDecl)]
    assert len(records) == 1, records
    return records[0]


def _method(record: RecordDecl, name: str) -> MethodDecl:
    for method in record.methods:
        if method.name == name:
            return method
    raise AssertionError(f"method {name} not found in {[m.name for m in record.methods]}")


class TestNormalizeCppText(unittest.TestCase):
    """Test whitespace normalization of rendered C++ text."""

    def test_collapses_whitespace(self):
        """Test that runs of whitespace become one space."""
        self.assertEqual(normalize_cpp_text("  const   char  *\n"), "const char *")

    def test_scope_separator_spacing(self):
        """Test that spaces around :: are removed."""
        self.assertEqual(normalize_cpp_text("std :: string"), "std::string")


class TestScopes(unittest.TestCase):
    """Test namespaces, linkage blocks and preprocessor containers."""

    def test_translation_unit_has_file_name(self):
        """Test the translation unit node for a header."""
        unit = _build(b"int f();")
        self.assertEqual(unit.kind, DeclKind.TRANSLATION_UNIT)
        self.assertEqual(unit.name, "demo.h")
        self.assertIsNone(unit.file_name)

    def test_namespace(self):
        """Test a named namespace and its children."""
        unit = _build(b"namespace audio { int volume(); }")

        self.assertEqual(len(unit.children), 1)
        namespace = unit.children[0]
        self.assertIsInstance(namespace, NamespaceDecl)
        self.assertEqual(namespace.name, "audio")
        self.assertEqual(namespace.file_name, "demo.h")
        self.assertEqual([child.name for child in namespace.children], ["volume"])

    def test_nested_namespace_specifier_becomes_nested_namespaces(self):
        """Test that a::b is split into nested namespaces."""
        unit = _build(b"namespace net::http { int get(); }")

        outer = unit.children[0]
        self.assertEqual(outer.name, "net")
        inner = outer.children[0]
        self.assertIsInstance(inner, NamespaceDecl)
        self.assertEqual(inner.name, "http")
        self.assertEqual(inner.children[0].name, "get")

    def test_anonymous_namespace(self):
        """Test that an anonymous namespace has an empty name."""
        unit = _build(b"namespace { int helper(int value); }")

        self.assertEqual(unit.children[0].name, "")
        self.assertEqual(unit.children[0].children[0].name, "helper")

    def test_extern_c_block(self):
        """Test a braced extern "C" block."""
        unit = _build(b'extern "C" { int open_device(const char* name); void close_device(int fd); }')

        linkage = unit.children[0]
        self.assertIsInstance(linkage, LinkageSpecDecl)
        self.assertEqual(linkage.language, "C")
        self.assertEqual([child.name for child in linkage.children], ["open_device", "close_device"])

    def test_single_declaration_linkage(self):
        """Test extern "C" applied to one declaration."""
        unit = _build(b'extern "C" int reset_device(int fd);')

        linkage = unit.children[0]
        self.assertIsInstance(linkage, LinkageSpecDecl)
        self.assertEqual([child.name for child in linkage.children], ["reset_device"])

    def test_include_guard_is_transparent(self):
        """Test that include guards do not hide declarations."""
        source = b"#ifndef DEMO_H\n#define DEMO_H\nint f();\n#endif\n"
        unit = _build(source)

        self.assertEqual([child.name for child in unit.children], ["f"])

    def test_else_branch_is_not_traversed(self):
        """Test that only the primary branch of a conditional is read."""
        source = b"#ifdef USE_A\nint a();\n#else\nint b();\n#endif\n"
        unit = _build(source)

        self.assertEqual([child.name for child in unit.children], ["a"])

    def test_variables_are_ignored(self):
        """Test that variables and function pointers are not functions."""
        unit = _build(b"int counter;\nint (*callback)(int);\n")
        self.assertEqual(unit.children, [])


class TestRecords(unittest.TestCase):
    """Test class/struct extraction."""

    def test_forward_declaration_has_no_definition(self):
        """Test that a forward declaration is marked undefined."""
        record = _only_record(_build(b"class Widget;"))

        self.assertEqual(record.name, "Widget")
        self.assertFalse(record.has_definition)

    def test_struct_tag(self):
        """Test that the struct keyword is kept as the tag."""
        record = _only_record(_build(b"struct Point { virtual int x() const; };"))

        self.assertEqual(record.tag, "struct")
        self.assertTrue(record.has_definition)

    def test_methods_have_owner(self):
        """Test that methods point back to their record."""
        record = _only_record(_build(b"class IShape { public: virtual double area() const = 0; };"))

        method = _method(record, "area")
        self.assertIs(method.owner, record)
        self.assertEqual(method.kind, DeclKind.METHOD)

    def test_nested_record(self):
        """Test that a nested record is a child, not a method source."""
        source = b"""
        class Outer {
        public:
            class Inner {
            public:
                virtual void ping() = 0;
            };
            virtual void pong() = 0;
        };
        """
        outer = _only_record(_build(source))

        nested = [child for child in outer.children if isinstance(child, RecordDecl)]
        self.assertEqual(len(nested), 1)
        self.assertIs(nested[0].parent, outer)
        self.assertEqual(nested[0].qualified_name, "Outer::Inner")
        self.assertEqual([m.name for m in outer.methods], ["pong"])

    def test_friend_declarations_are_skipped(self):
        """Test that friend functions are not methods."""
        source = b"class Registry { friend void dump(const Registry& r); public: virtual int size() const; };"
        record = _only_record(_build(source))

        self.assertEqual([m.name for m in record.methods], ["size"])

    def test_anonymous_struct_is_skipped(self):
        """Test that unnamed records are dropped."""
        unit = _build(b"typedef struct { int x; } Point;")
        self.assertEqual([d for d in unit.children if isinstance(d, RecordDecl)], [])


class TestMethodQualifiers(unittest.TestCase):
    """Test virtual/static/const/destructor detection."""

    def setUp(self):
        source = b"""
        class IDevice {
        public:
            IDevice();
            virtual ~IDevice();
            virtual int read(char* buffer, int size) = 0;
            virtual int status() const;
            int write(const char* data) override;
            static IDevice* open(const char* name);
            void reset();
        };
        """
        self.record = _only_record(_build(source))

    def test_constructor_is_plain(self):
        """Test that a constructor has no return type or qualifiers."""
        ctor = _method(self.record, "IDevice")
        self.assertFalse(ctor.is_virtual)
        self.assertFalse(ctor.is_static)
        self.assertEqual(ctor.return_type, "")

    def test_destructor(self):
        """Test a virtual destructor."""
        dtor = _method(self.record, "~IDevice")
        self.assertTrue(dtor.is_destructor)
        self.assertTrue(dtor.is_virtual)

    def test_pure_virtual(self):
        """Test a pure virtual method."""
        read = _method(self.record, "read")
        self.assertTrue(read.is_virtual)
        self.assertFalse(read.is_const)
        self.assertEqual(read.return_type, "int")

    def test_const_virtual(self):
        """Test a const virtual method."""
        status = _method(self.record, "status")
        self.assertTrue(status.is_virtual)
        self.assertTrue(status.is_const)

    def test_override_implies_virtual(self):
        """Test that override marks a method virtual."""
        self.assertTrue(_method(self.record, "write").is_virtual)

    def test_static(self):
        """Test a static method."""
        open_method = _method(self.record, "open")
        self.assertTrue(open_method.is_static)
        self.assertFalse(open_method.is_virtual)
        self.assertEqual(open_method.return_type, "IDevice *")

    def test_non_virtual(self):
        """Test a plain member function."""
        reset = _method(self.record, "reset")
        self.assertFalse(reset.is_virtual)
        self.assertFalse(reset.is_static)


class TestTypesAndParameters(unittest.TestCase):
    """Test rendered return types and parameter lists."""

    def _function(self, source: bytes) -> FunctionDecl:
        unit = _build(source)
        self.assertEqual(len(unit.children), 1)
        return unit.children[0]

    def test_parameters(self):
        """Test parameter names, types and declarations."""
        function = self._function(b"int file_open(const char* path, int flags);")

        self.assertEqual(function.return_type, "int")
        self.assertEqual([p.name for p in function.params], ["path", "flags"])
        self.assertEqual([p.type_text for p in function.params], ["const char*", "int"])
        self.assertEqual([p.declaration for p in function.params], ["const char* path", "int flags"])

    def test_void_parameter_list_is_empty(self):
        """Test that (void) means no parameters."""
        self.assertEqual(self._function(b"int file_sync(void);").params, [])

    def test_default_argument_is_dropped(self):
        """Test that default values are removed."""
        function = self._function(b"void log_line(const char* text, bool flush = true);")

        flush = function.params[1]
        self.assertEqual(flush.name, "flush")
        self.assertEqual(flush.type_text, "bool")
        self.assertEqual(flush.declaration, "bool flush")

    def test_unnamed_parameter_gets_synthetic_name(self):
        """Test that unnamed parameters are named by position."""
        function = self._function(b"void set_level(int, const char*);")

        self.assertEqual([p.name for p in function.params], ["arg0", "arg1"])
        self.assertEqual(function.params[0].declaration, "int arg0")
        self.assertEqual(function.params[1].type_text, "const char*")

    def test_c_style_variadic_is_flagged(self):
        """Test that a trailing ... sets is_variadic and is not a parameter."""
        function = self._function(b"int log_printf(const char* fmt, ...);")

        self.assertTrue(function.is_variadic)
        self.assertEqual([p.declaration for p in function.params], ["const char* fmt"])

    def test_fixed_parameters_are_not_variadic(self):
        """Test that ordinary functions are not variadic."""
        self.assertFalse(self._function(b"int file_close(int fd);").is_variadic)

    def test_reference_return_type(self):
        """Test a reference return type."""
        function = self._function(b"const std::string& current_name();")
        self.assertEqual(function.return_type, "const std::string &")

    def test_static_free_function_drops_storage_class(self):
        """Test that static and inline are not part of the return type."""
        function = self._function(b"static inline unsigned int checksum(const unsigned char* data);")

        self.assertTrue(function.is_static)
        self.assertEqual(function.return_type, "unsigned int")

    def test_trailing_return_type(self):
        """Test that a trailing return type replaces auto."""
        function = self._function(b"auto make_id() -> long;")
        self.assertEqual(function.return_type, "long")

    def test_inline_definition_is_a_function(self):
        """Test that a function definition is extracted like a declaration."""
        function = self._function(b"inline int twice(int x) { return 2 * x; }")

        self.assertEqual(function.name, "twice")
        self.assertEqual(function.return_type, "int")


class TestFixtures(unittest.TestCase):
    """Test building trees from fixture files."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def _unit(self, *parts: str):
        file_path = self.fixtures_dir.joinpath(*parts)
        tree, source_bytes = parse_file(str(file_path))
        return build_declaration_tree(tree, source_bytes, str(file_path))

    def test_widget_header(self):
        """Test the widget fixture tree."""
        unit = self._unit("include", "widgets", "widget.h")

        namespace = unit.children[0]
        self.assertEqual(namespace.name, "ui")
        records = {child.name: child for child in namespace.children}
        self.assertFalse(records["Canvas"].has_definition)

        widget = records["IWidget"]
        self.assertEqual(
            [m.name for m in widget.methods],
            ["~IWidget", "draw", "resize", "title", "setTitle", "create", "show"],
        )
        self.assertEqual(_method(widget, "title").return_type, "const std::string &")
        self.assertEqual(
            [p.declaration for p in _method(widget, "setTitle").params],
            ["const std::string& title", "bool notify"],
        )
        self.assertTrue(widget.has_static_method)
        self.assertTrue(all(m.file_name == "widget.h" for m in widget.methods))

    def test_file_api_header(self):
        """Test the file API fixture tree."""
        unit = self._unit("file_api.h")

        linkage = unit.children[0]
        self.assertIsInstance(linkage, LinkageSpecDecl)
        names = [child.name for child in linkage.children]
        self.assertEqual(names, ["file_open", "file_read", "file_close", "file_sync"])
        file_read = linkage.children[1]
        self.assertEqual(file_read.return_type, "size_t")
        self.assertEqual([p.type_text for p in file_read.params], ["int", "void*", "size_t"])

    def test_out_of_line_definitions_are_skipped(self):
        """Test that qualified out-of-line definitions are ignored."""
        unit = self._unit("nested_namespaces.h")

        top_level = [child.name for child in unit.children]
        self.assertEqual(top_level, ["net", ""])
        client = unit.children[0].children[0].children[1]
        self.assertEqual(client.name, "Client")
        self.assertEqual([m.name for m in client.methods], ["Client", "~Client", "send", "cancel"])
        cancel = _method(client, "cancel")
        self.assertTrue(cancel.is_virtual)
        self.assertEqual(cancel.params[0].name, "arg0")


if __name__ == "__main__":
    unittest.main()
