# tests/assetgraph/core/test_dictpath.py
from __future__ import annotations

import pytest

from assetgraph.core.dictpath import getByPath

# ----------------------------------------
# getByPath
# ----------------------------------------

def test_getByPath_simpleNestedDict() -> None:
    data = {"paths": {"src": "web", "public": "static"}}
    assert getByPath(data, "paths.src") == "web"
    assert getByPath(data, "paths") == {"src": "web", "public": "static"}


def test_getByPath_escapedDot() -> None:
    data = {"assets": {"a.b": {"c": 1}}}
    assert getByPath(data, r"assets.a\.b.c") == 1


def test_getByPath_missingReturnsDefault() -> None:
    data = {"paths": {"src": "web"}}
    assert getByPath(data, "paths.missing") is None
    assert getByPath(data, "paths.src.deeper", "dflt") == "dflt"
    assert getByPath(None, "paths", 3) == 3


def test_getByPath_keepsFalsyValues() -> None:
    data = {"logging": {"devMode": False, "file": None, "workers": 0}}
    assert getByPath(data, "logging.devMode", True) is False
    assert getByPath(data, "logging.workers", 1) == 0
    # a present None is still a value
    assert getByPath(data, "logging.file", "x") is None


@pytest.mark.parametrize("path", ["", ".", "a..b", "a.", "a\\"])
def test_getByPath_invalidPathIsMissing(path: str) -> None:
    assert getByPath({"a": {"b": 1}}, path, "default") == "default"
