"""
Document Assembler - Turns a markup file into a Document.

Flow:
    .rly file → resolve_includes → chunk_lines → classify → DocumentAssembler → Document

Responsibilities:
- Merge header chunks into the single document Header
- Open a Section for every Heading
- Append every other block to the open Section
- Reject body blocks that appear before the first heading
- Rebase figure paths from included files onto the top-level directory
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config.settings import Settings, settings as default_settings
from rly.document_model import Block, Document, Header, HeaderUpdate, Heading, Insert, Section
from rly.errors import InclusionError, SourceLocation, StructuralError
from rly.reader.classifier import classify
from rly.reader.inclusion import (
    SourceLine,
    blank_directive,
    chunk_lines,
    chunk_text,
    resolve_includes,
    split_source,
)
from rly.reader.patterns import INCLUDE_PATTERN

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """
    Builds a Document from flattened source lines.

    Usage:
        assembler = DocumentAssembler()
        doc = assembler.build(resolve_includes(Path("report.rly")))
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._reset()

    def _reset(self) -> None:
        self._header_fields: Dict[str, Any] = {}
        self._seen_header = False
        self._sections: List[Section] = []
        self._open_heading: Optional[Heading] = None
        self._open_blocks: List[Block] = []

    def build(self, lines: List[SourceLine], source_path: Optional[Path] = None) -> Document:
        """
        Classify every chunk of ``lines`` and route it into a new Document.

        Raises:
            ParseError: If a chunk cannot be classified
            StructuralError: If a body block precedes the first heading
        """
        self._reset()

        chunks = chunk_lines(lines)
        self.logger.debug(f"Assembling {len(chunks)} chunks")

        for chunk in chunks:
            location = chunk[0].location
            result = classify(chunk_text(chunk), location)

            if result is None:
                continue
            if isinstance(result, HeaderUpdate):
                self._seen_header = True
                self._header_fields.update(result.fields())
            elif isinstance(result, Heading):
                self._close_section()
                self._open_heading = result
            else:
                if self._open_heading is None:
                    raise StructuralError(
                        f"{type(result).__name__} block appears before any heading",
                        location,
                    )
                if isinstance(result, Insert):
                    result = _rebase_insert(result, location, source_path)
                self._open_blocks.append(result)

        self._close_section()

        header = Header(**self._header_fields) if self._seen_header else None
        document = Document(
            header=header,
            sections=tuple(self._sections),
            source_path=Path(source_path) if source_path else None,
        )
        self.logger.info(f"Assembled {document!r}")
        return document

    def _close_section(self) -> None:
        if self._open_heading is not None:
            self._sections.append(Section(self._open_heading, tuple(self._open_blocks)))
        self._open_heading = None
        self._open_blocks = []


def _rebase_insert(insert: Insert, location: SourceLocation, source_path: Optional[Path]) -> Insert:
    """
    Make a figure from an included file relative to the top-level file.

    Figures, like inclusions, are written relative to the file that names
    them; renderers resolve every figure against the top-level directory.
    """
    if source_path is None or location.path is None:
        return insert
    offset = Path(os.path.relpath(location.path.parent, Path(source_path).parent))
    if offset == Path("."):
        return insert
    return replace(
        insert,
        file=(offset / insert.file).as_posix(),
        path=(offset / insert.path).as_posix(),
    )


# ============================================================================
# Convenience Functions
# ============================================================================

def assemble(source_path: Union[str, Path], settings: Optional[Settings] = None) -> Document:
    """
    Read a markup file (with its inclusions) and assemble the Document.

    Args:
        source_path: Top-level .rly file
        settings: Settings to use (defaults to the global settings)

    Returns:
        The assembled Document

    Raises:
        InclusionError: If an included file is missing
        ParseError: If a chunk or header line cannot be parsed
        StructuralError: If a body block precedes the first heading
    """
    settings = settings or default_settings
    source_path = Path(source_path)
    lines = resolve_includes(source_path, max_depth=settings.max_include_depth)
    return DocumentAssembler().build(lines, source_path)


def assemble_text(text: str, source_path: Optional[Union[str, Path]] = None) -> Document:
    """
    Assemble markup held in memory.

    Raises:
        InclusionError: If the text includes another .rly file; use assemble()
            on a file for that
    """
    path = Path(source_path) if source_path else None
    lines = [blank_directive(line) for line in split_source(text, path)]
    for line in lines:
        match = INCLUDE_PATTERN.match(line.text)
        if match:
            raise InclusionError(
                "File inclusion needs a source file on disk",
                Path(match.group(1)),
                line.location,
            )
    return DocumentAssembler().build(lines, path)
