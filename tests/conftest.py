import logging
import sys
from collections.abc import Callable
from pathlib import Path

import pytest



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture()
def writeProject(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """
    Writes `{relativePath: text}` under a temporary project root and returns the root.
    Can be called several times; later calls overwrite files.
    """
    def _write(files: dict[str, str]) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path
    return _write



@pytest.fixture()
def restoreRootLogging():
    """configureLogging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)



SAMPLE_PROJECT: dict[str, str] = {
    "tsconfig.json": '{\n  // aliases\n  "compilerOptions": {"paths": {"~/*": ["./src/*"]}},\n}\n',
    "packages-files.json5": '{"htmx.org": "htmx.min.js", foo: ["dist/foo.js", "dist/foo.css"]}\n',
    "src/layout.ts": "import 'htmx.org';\nimport { util } from '~/lib/util';\n",
    "src/lib/util.ts": "import { dom } from './dom';\nexport const util = dom;\n",
    "src/lib/dom.ts": "export const dom = document;\n",
    "src/lib/types.d.ts": "export type X = string;\n",
    "src/pages/home/script.ts": "import 'foo';\nimport { dom } from '../../lib/dom';\nimport './home.css';\n",
    "public/helpers.js": "window.helpers = {};\n",
}



@pytest.fixture()
def sampleProject(writeProject) -> Path:
    """A small site: a layout, a page script, two shared modules and two packages."""
    return writeProject(SAMPLE_PROJECT)
