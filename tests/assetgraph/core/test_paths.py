# tests/assetgraph/core/test_paths.py
import pytest

from assetgraph.core.paths import (
    hasSuffix,
    joinPaths,
    normalizeRelativePath,
    parentDir,
    stripLeadingSlash,
    toScriptModulePath,
    toSourcePath,
)


def test_normalize_in_out_in():
    assert normalizeRelativePath("src/../src") == "src"


def test_normalize_relative_current():
    assert normalizeRelativePath("./src") == "src"


def test_normalize_in_out_many_times():
    path = "src/../src/../src/../src/../src/../src/./../src/./../src/../src/../src/../src/../src"
    assert normalizeRelativePath(path) == "src"


def test_normalize_starting_with_dotdot_is_kept():
    assert normalizeRelativePath("../src") == "../src"
    assert normalizeRelativePath("../../src/./a") == "../../src/a"


def test_normalize_dotdot_past_first_segment():
    assert normalizeRelativePath("a/../../b") == "../b"


def test_normalize_absolute_path_keeps_root():
    assert normalizeRelativePath("/src/./pages/../x.js") == "/src/x.js"
    assert normalizeRelativePath("/../x.js") == "/x.js"


def test_normalize_collapses_slashes_and_backslashes():
    assert normalizeRelativePath("src//pages\\home/") == "src/pages/home"


def test_normalize_empty():
    assert normalizeRelativePath("") == ""
    assert normalizeRelativePath(".") == ""


def test_joinPaths_does_not_reset_on_leading_slash():
    assert joinPaths("src", "/utils/date") == "src/utils/date"
    assert joinPaths("src/pages/home", "../../lib/./util") == "src/lib/util"
    assert joinPaths("", "./a") == "a"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/a.ts", "src/a.js"),
        ("src/a", "src/a.js"),
        ("src/a.js", "src/a.js"),
        ("./src/../src/a.ts", "src/a.js"),
    ],
)
def test_toScriptModulePath(path, expected):
    assert toScriptModulePath(path) == expected


def test_toSourcePath():
    assert toSourcePath("src/a.js") == "src/a.ts"
    assert toSourcePath("src/a") == "src/a.ts"


def test_small_helpers():
    assert parentDir("src/pages/a.js") == "src/pages"
    assert parentDir("a.js") == ""
    assert stripLeadingSlash("/src/a.js") == "src/a.js"
    assert stripLeadingSlash("src/a.js") == "src/a.js"
    assert hasSuffix("X.CSS", (".css",))
    assert not hasSuffix("x.js", (".css",))
