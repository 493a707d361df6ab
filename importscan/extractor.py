"""Line-oriented extraction of import statements from JS/TS source text."""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Pattern, Tuple, Union

from .errors import NotFoundError, ReadError


logger = logging.getLogger(__name__)


class ImportKind(str, Enum):
    """Syntax family an import statement belongs to."""

    ES6 = "es6"
    COMMONJS = "commonjs"


@dataclass(frozen=True)
class RawImport:
    """An import specifier as written in a source file, before resolution."""

    kind: ImportKind
    specifier: str
    is_dynamic: bool
    line: int


# Quoted module specifier; the capture is the text between the quotes.
_SPEC = r"""["']([^"']*)["']"""

_ES6_PATTERNS = (
    # import x from './file'
    rf"^\s*import\s+[\w$]+\s+from\s+{_SPEC}\s*;?",
    # import { x } from './file'
    rf"^\s*import\s+\{{[^}}]*\}}\s+from\s+{_SPEC}\s*;?",
    # import * as x from './file'
    rf"^\s*import\s+\*\s+as\s+[\w$]+\s+from\s+{_SPEC}\s*;?",
    # import './file'
    rf"^\s*import\s+{_SPEC}\s*;?",
    # import x, { y } from './file'
    rf"^\s*import\s+[\w$]+,\s*\{{[^}}]*\}}\s+from\s+{_SPEC}\s*;?",
    # import type { x } from './file', import type X from './file'
    rf"^\s*import\s+type\s+(?:\{{[^}}]*\}}|\*\s+as\s+[\w$]+|[\w$]+)\s+from\s+{_SPEC}\s*;?",
)

_COMMONJS_PATTERNS = (
    # const x = require('./file')
    rf"(?:const|let|var)\s+[\w$]+\s*=\s*require\(\s*{_SPEC}\s*\)",
    # const { x } = require('./file')
    rf"(?:const|let|var)\s+\{{[^}}]*\}}\s*=\s*require\(\s*{_SPEC}\s*\)",
    # const x = require('./file').something
    rf"(?:const|let|var)\s+[\w$]+\s*=\s*require\(\s*{_SPEC}\s*\)\.[\w$]+",
    # require('./file')
    rf"require\(\s*{_SPEC}\s*\)",
    # import x = require('./file')
    rf"import\s+[\w$]+\s*=\s*require\(\s*{_SPEC}\s*\)",
)

_DYNAMIC_PATTERN = rf"import\(\s*{_SPEC}\s*\)"

# Ordered (kind, is_dynamic, regex) table. Earlier rows win.
PATTERN_TABLE: Tuple[Tuple[ImportKind, bool, Pattern[str]], ...] = tuple(
    [(ImportKind.ES6, False, re.compile(p)) for p in _ES6_PATTERNS]
    + [(ImportKind.COMMONJS, False, re.compile(p)) for p in _COMMONJS_PATTERNS]
    + [(ImportKind.ES6, True, re.compile(_DYNAMIC_PATTERN))]
)

# Opening line of a named import whose brace closes on a later line.
_MULTILINE_START = re.compile(r"^\s*import\s+(?:type\s+)?(?:[\w$]+\s*,\s*)?\{[^}]*$")

# Shapes the joined text of a multi-line import is tried against.
_MULTILINE_PATTERNS = tuple(
    re.compile(p) for p in (_ES6_PATTERNS[1], _ES6_PATTERNS[4], _ES6_PATTERNS[5])
)


def _match_line(line: str) -> Optional[Tuple[ImportKind, bool, str]]:
    """Return (kind, is_dynamic, specifier) for the first table row matching ``line``."""
    for kind, is_dynamic, pattern in PATTERN_TABLE:
        match = pattern.search(line)
        if match:
            return kind, is_dynamic, match.group(1)
    return None


def _match_multiline(text: str) -> Optional[str]:
    for pattern in _MULTILINE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_imports(text: str) -> List[RawImport]:
    """
    Extract import statements from source text.

    Each line is matched against :data:`PATTERN_TABLE` and at most one import
    is recorded per line. Named imports whose braces span several lines are
    joined until the line carrying ``from`` and then matched as a whole; if
    the joined text does not look like a named import it is dropped.

    Blank lines and ``//`` comment lines are skipped. Block comments are not
    recognized, so imports inside ``/* ... */`` are still reported.

    Args:
        text: Full source text of one file.

    Returns:
        RawImport records in line order.
    """
    imports: List[RawImport] = []
    pending: Optional[str] = None
    pending_line = 0

    for line_number, line in enumerate(text.split("\n"), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue

        if _MULTILINE_START.match(line):
            pending = line
            pending_line = line_number
            continue

        if pending is not None:
            pending += " " + stripped
            if "from" not in line:
                continue
            specifier = _match_multiline(pending)
            if specifier is not None:
                imports.append(RawImport(ImportKind.ES6, specifier, False, pending_line))
            pending = None
            continue

        matched = _match_line(line)
        if matched is not None:
            kind, is_dynamic, specifier = matched
            imports.append(RawImport(kind, specifier, is_dynamic, line_number))

    return imports


def parse_imports(file_path: Union[str, Path]) -> List[RawImport]:
    """
    Read a source file and extract its import statements.

    Args:
        file_path: Path to the file to parse.

    Returns:
        RawImport records in line order.

    Raises:
        NotFoundError: If the file does not exist.
        ReadError: If the file exists but cannot be read.
    """
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise NotFoundError(f"File not found: {file_path}") from e
    except OSError as e:
        raise ReadError(f"Error reading {file_path}: {e}") from e

    imports = extract_imports(content)
    logger.debug("%s: %d import(s)", file_path, len(imports))
    return imports
