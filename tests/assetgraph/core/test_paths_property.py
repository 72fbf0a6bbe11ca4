# tests/assetgraph/core/test_paths_property.py
from __future__ import annotations

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st  # type: ignore[no-redef]

from assetgraph.core.paths import normalizeRelativePath


segment_strat = st.sampled_from(["a", "b", "src", ".", "..", ""])


@given(st.lists(segment_strat, max_size=10), st.booleans())
def test_normalize_is_idempotent(segments: list[str], absolute: bool) -> None:
    path = ("/" if absolute else "") + "/".join(segments)
    once = normalizeRelativePath(path)
    assert normalizeRelativePath(once) == once


@given(st.lists(segment_strat, max_size=10))
def test_normalize_leaves_no_dot_segments_after_real_ones(segments: list[str]) -> None:
    parts = [part for part in normalizeRelativePath("/".join(segments)).split("/") if part]
    assert "." not in parts
    # ".." may only appear as a leading run
    seenReal = False
    for part in parts:
        if part == "..":
            assert not seenReal
        else:
            seenReal = True
