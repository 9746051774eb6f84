"""
Inclusion Resolution - Inline \\insert'ed .rly files in memory.

Builds the flattened source buffer the chunker works on. Every line keeps
its origin (file, line number) so parse errors can point back into the
included file.

Known limitation: with the default unbounded depth, a file that includes
itself (directly or through a chain) is not detected and recursion only
stops when the interpreter's recursion limit is hit. Set
``max_include_depth`` to turn deep nesting into an InclusionError.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rly.errors import InclusionError, SourceLocation
from rly.reader.patterns import BLANKED_LINE_PATTERN, INCLUDE_PATTERN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceLine:
    """One line of the flattened source buffer."""
    text: str  # without the trailing newline
    path: Optional[Path]
    lineno: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.path, self.lineno)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


def read_source(path: Path, included_from: Optional[SourceLocation] = None) -> str:
    """Read a markup file, mapping a missing file to InclusionError."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InclusionError("Markup file not found", path, included_from) from e


def split_source(text: str, path: Optional[Path] = None) -> List[SourceLine]:
    """Split raw text into SourceLine records (no inclusion, no blanking)."""
    return [
        SourceLine(line, path, lineno)
        for lineno, line in enumerate(text.splitlines(), start=1)
    ]


def blank_directive(line: SourceLine) -> SourceLine:
    """Comment and terminator lines (%, \\comment, \\end) become empty."""
    if BLANKED_LINE_PATTERN.match(line.text):
        return SourceLine("", line.path, line.lineno)
    return line


def resolve_includes(
    path: Path,
    max_depth: Optional[int] = None,
    _depth: int = 0,
    _included_from: Optional[SourceLocation] = None,
) -> List[SourceLine]:
    """
    Return the lines of ``path`` with every \\insert <file>.rly replaced by
    that file's (recursively resolved) lines.

    Comment and terminator lines (%, \\comment, \\end) become empty lines
    instead of being removed, so blank-line chunking still works across
    the substitution boundary. Included files are located relative to the
    including file.

    Args:
        path: Markup file to read
        max_depth: Maximum nesting depth (None = unbounded)

    Returns:
        Flattened list of SourceLine records

    Raises:
        InclusionError: If an included file is missing or max_depth is exceeded
    """
    path = Path(path)
    if max_depth is not None and _depth > max_depth:
        raise InclusionError(
            f"Inclusion nested deeper than {max_depth} levels",
            path,
            _included_from,
        )

    text = read_source(path, _included_from)
    lines: List[SourceLine] = []

    for line in split_source(text, path):
        match = INCLUDE_PATTERN.match(line.text)
        if match:
            child = path.parent / match.group(1)
            logger.debug(f"Including {child} from {line.location} (depth {_depth + 1})")
            # Included content never merges with neighbouring chunks
            lines.append(SourceLine("", path, line.lineno))
            lines.extend(resolve_includes(child, max_depth, _depth + 1, line.location))
            lines.append(SourceLine("", path, line.lineno))
        else:
            lines.append(blank_directive(line))

    return lines


def chunk_lines(lines: List[SourceLine]) -> List[List[SourceLine]]:
    """
    Group lines into chunks: maximal runs of non-blank lines.

    A line holding only whitespace counts as blank.
    """
    chunks: List[List[SourceLine]] = []
    current: List[SourceLine] = []

    for line in lines:
        if line.is_blank:
            if current:
                chunks.append(current)
                current = []
        else:
            current.append(line)
    if current:
        chunks.append(current)

    return chunks


def chunk_text(chunk: List[SourceLine]) -> str:
    """Join a chunk's lines back into text (trailing newline kept)."""
    return "\n".join(line.text for line in chunk) + "\n"
