"""
Base classes and shared utilities for the JDL parsers.

Provides file discovery, safe file reads, JDL comment stripping,
brace-counting block extraction and result formatting.
"""

import logging
import os
import re
from typing import Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


SKIP_DIRS = {
    '__pycache__', '.git', '.venv', 'venv', 'env', 'node_modules',
    '.pytest_cache', '.tox', 'dist', 'build', '.eggs', 'vendor',
    'target', 'out', '.idea', '.vscode', '.dart_tool', 'tmp', 'temp',
}


def find_source_files(project_path: str, extensions: List[str],
                      skip_dirs: Set[str] = None) -> List[str]:
    """List the JDL files of a project, sorted by path.

    Extensions are compared case-insensitively, so 'APP.JDL' is found with
    ['.jdl']. Build output and tool directories (SKIP_DIRS) are not entered.
    The sorted order fixes the order in which files are concatenated.
    """
    skip = skip_dirs or SKIP_DIRS
    suffixes = tuple(ext.lower() for ext in extensions)
    found = []

    for root, dirs, files in os.walk(project_path):
        dirs[:] = [d for d in dirs if d not in skip and not d.startswith('.')]
        found.extend(os.path.join(root, fname) for fname in files
                     if fname.lower().endswith(suffixes))

    return sorted(found)


def read_file_safe(file_path: str, encoding: str = 'utf-8-sig') -> Optional[str]:
    """Return the text of a JDL file, or None when it cannot be read.

    The default codec drops a leading byte order mark. Files that are not
    valid UTF-8 are read again as latin-1.
    """
    for enc in (encoding, 'latin-1'):
        try:
            with open(file_path, 'r', encoding=enc) as f:
                return f.read()
        except UnicodeDecodeError:
            logger.debug("%s is not %s, retrying", file_path, enc)
        except OSError as e:
            logger.warning("Cannot read %s: %s", file_path, e)
            return None
    return None


# ---------------------------------------------------------------------------
# Comment stripping
# ---------------------------------------------------------------------------

_RE_JDL_COMMENTS = re.compile(
    r'/\*.*?\*/'       # block comments
    r'|//[^\n\r]*',    # line comments
    re.DOTALL,
)


def _replace_keeping_newlines(match):
    """Replace match content with spaces, preserving newlines for line numbers."""
    return re.sub(r'[^\n]', ' ', match.group(0))


def strip_comments(content: str) -> str:
    """Strip JDL block and line comments.

    Preserves line count and character positions by replacing stripped
    text with spaces, so positions found in the stripped text still map
    onto the raw text.
    """
    if not content:
        return ''
    return _RE_JDL_COMMENTS.sub(_replace_keeping_newlines, content)


# ---------------------------------------------------------------------------
# Brace-counting utility for block body extraction
# ---------------------------------------------------------------------------

def extract_block_body(content: str, start_pos: int) -> Tuple[str, int, int]:
    """Return the body of the enum, entity or relationship block at start_pos.

    The first '{' at or after start_pos opens the block. Nested braces,
    such as the {n,m} quantifiers of a pattern() validator, are counted
    so the block ends at its own closing '}'. Stray '}' before the block
    opens are ignored.

    Returns:
        (body, body_start, body_end), positions being absolute offsets in
        content. ('', -1, -1) when there is no block or it is never closed.
    """
    depth = 0
    body_start = -1

    for pos in range(start_pos, len(content)):
        ch = content[pos]
        if ch == '{':
            if depth == 0:
                body_start = pos + 1
            depth += 1
        elif ch == '}' and depth:
            depth -= 1
            if not depth:
                return content[body_start:pos], body_start, pos
    return '', -1, -1


def line_number_at(content: str, pos: int) -> int:
    """Return the 1-based line number for a character position in content."""
    return content[:pos].count('\n') + 1


# ---------------------------------------------------------------------------
# Base parser class
# ---------------------------------------------------------------------------

class BaseSchemaParser:
    """Base class for schema parsers producing the entity/enum graph."""

    FILE_EXTENSIONS: List[str] = []

    def __init__(self):
        self.warnings: List[str] = []

    def parse_text(self, text: str) -> Dict:
        """Parse schema text and return a standardized result dict.

        Subclasses must override this method.
        """
        raise NotImplementedError

    def parse(self, project_path: str, extensions: List[str] = None) -> Dict:
        """Parse every matching file under project_path as one schema.

        Files are concatenated in path order so relationships may refer
        to entities declared in another file.
        """
        chunks = []
        for file_path in self.find_files(project_path, extensions):
            content = read_file_safe(file_path)
            if content is None:
                continue
            chunks.append(content)
        logger.info("Parsing %d schema file(s) from %s", len(chunks), project_path)
        return self.parse_text('\n'.join(chunks))

    def find_files(self, project_path: str, extensions: List[str] = None) -> List[str]:
        """Find source files matching extensions."""
        return find_source_files(project_path, extensions or self.FILE_EXTENSIONS)

    def warn(self, message: str, *args) -> None:
        """Log a warning and keep it for the result's 'warnings' list."""
        text = message % args if args else message
        logger.warning(text)
        self.warnings.append(text)

    def make_schema_result(self, entities: Dict[str, List[Dict]],
                           enums: Dict[str, List[str]]) -> Dict:
        """Build a standardized schema result dict."""
        return {
            'entities': entities,
            'enums': enums,
            'warnings': list(self.warnings),
        }
