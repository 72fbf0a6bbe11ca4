# tests/assetgraph/assets/test_scanner.py
import pytest

from assetgraph.assets.scanner import isPackageSpecifier, scanImports


def test_side_effect_imports_with_both_quote_styles():
    text = "import 'htmx.org';\nimport \"hyperscript.org\";\n"
    assert scanImports(text) == ["htmx.org", "hyperscript.org"]


def test_from_clauses_terminated_by_semicolon_or_newline():
    text = (
        "import { a } from \"./a\";\n"
        "import b from './b'\n"
        "export * from \"~/lib/c\";\n"
        "const x = 1;\n"
    )
    assert scanImports(text) == ["./a", "./b", "~/lib/c"]


def test_crlf_line_endings():
    assert scanImports("import x from './x'\r\nimport './y'\r\n") == ["./x", "./y"]


def test_no_imports():
    assert scanImports("") == []
    assert scanImports("const a = 'import';\nconsole.log(a);\n") == []


def test_unterminated_import_at_end_of_text_is_not_matched():
    assert scanImports("import './z'") == []


def test_dynamic_import_is_not_matched():
    assert scanImports("const m = await import('./lazy');\n") == []


def test_commented_import_is_still_matched():
    # lexical scan: accepted false positive
    assert scanImports("// import './ghost';\n") == ["./ghost"]


@pytest.mark.parametrize(
    ("specifier", "expected"),
    [
        ("htmx.org", True),
        ("lodash", True),
        ("_private", True),
        ("3d-lib", True),
        ("./x", False),
        ("../x", False),
        ("~/x", False),
        ("@scope/pkg", False),
        ("", False),
    ],
)
def test_isPackageSpecifier(specifier, expected):
    assert isPackageSpecifier(specifier) is expected
