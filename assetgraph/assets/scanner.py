# assetgraph/assets/scanner.py
from __future__ import annotations

import re

__all__ = ["IMPORT_RE", "PACKAGE_RE", "scanImports", "isPackageSpecifier"]

# Lexical, not syntactic: `import "x";`, `import a from 'x'\n`, `export * from "x";`.
# Matches inside comments or strings are accepted, as are misses on exotic syntax.
IMPORT_RE = re.compile(r"""(import|from)\s*["']([^'"]+)["'](;|\r?\n)""")

PACKAGE_RE = re.compile(r"^[A-Za-z_0-9]")



def scanImports(sourceText: str) -> list[str]:
    """Returns raw import specifiers in the order they appear in `sourceText`."""
    return [match.group(2) for match in IMPORT_RE.finditer(sourceText or "")]



def isPackageSpecifier(specifier: str) -> bool:
    return PACKAGE_RE.match(specifier) is not None
