# assetgraph/core/paths.py
from __future__ import annotations

__all__ = [
    "SCRIPT_SUFFIX",
    "SOURCE_SUFFIX",
    "DECLARATION_SUFFIX",
    "normalizeRelativePath",
    "joinPaths",
    "parentDir",
    "stripLeadingSlash",
    "toScriptModulePath",
    "toSourcePath",
    "hasSuffix",
]

SCRIPT_SUFFIX = ".js"
SOURCE_SUFFIX = ".ts"
DECLARATION_SUFFIX = ".d.ts"



def normalizeRelativePath(path: str) -> str:
    """
    Lexically resolves "." and ".." segments of a slash-separated path without
    touching the filesystem.

    A ".." cancels the previous real segment. When there is nothing to cancel
    (start of the path, or only ".." before it) it is kept as-is:
        "src/../src"  -> "src"
        "./src"       -> "src"
        "../src"      -> "../src"
    A leading "/" is preserved, ".." directly under it is dropped.
    """
    text = (path or "").replace("\\", "/")
    absolute = text.startswith("/")
    
    parts: list[str] = []
    for segment in text.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not absolute:
                parts.append(segment)
            continue
        parts.append(segment)
    
    joined = "/".join(parts)
    return "/" + joined if absolute else joined



def joinPaths(*segments: str) -> str:
    """
    Joins path segments with "/" and normalizes the result. Empty segments are
    skipped, and a later segment starting with "/" does NOT reset the path.
    """
    return normalizeRelativePath("/".join(segment for segment in segments if segment))



def parentDir(path: str) -> str:
    """Returns the directory part of `path` ("" for a top-level file)."""
    head, sep, _tail = path.rpartition("/")
    return head if sep else ""



def stripLeadingSlash(path: str) -> str:
    return path[1:] if path.startswith("/") else path



def hasSuffix(path: str, suffixes: tuple[str, ...] | list[str]) -> bool:
    lowered = path.lower()
    return any(lowered.endswith(suffix.lower()) for suffix in suffixes)



def toScriptModulePath(path: str) -> str:
    """
    Normalizes `path` and gives it the served script suffix.

      "src/a.ts" -> "src/a.js"
      "src/a"    -> "src/a.js"
      "src/a.js" -> "src/a.js"
    """
    normalized = normalizeRelativePath(path)
    if normalized.endswith(SCRIPT_SUFFIX):
        return normalized
    if normalized.endswith(SOURCE_SUFFIX) and not normalized.endswith(DECLARATION_SUFFIX):
        return normalized[: -len(SOURCE_SUFFIX)] + SCRIPT_SUFFIX
    return normalized + SCRIPT_SUFFIX



def toSourcePath(modulePath: str) -> str:
    """Returns the TypeScript sibling of a script module path ("a.js" -> "a.ts")."""
    if modulePath.endswith(SCRIPT_SUFFIX):
        return modulePath[: -len(SCRIPT_SUFFIX)] + SOURCE_SUFFIX
    return modulePath + SOURCE_SUFFIX
