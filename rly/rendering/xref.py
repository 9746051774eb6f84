"""
Cross-Reference Index

Built by a second, read-only traversal of the Document after a renderer's
primary emission. Maps every cross-reference label (heading refs, table
refs, figure labels) to its number and display text so that reference
tags emitted during the primary pass can be resolved.

Numbering:
- Sections: hierarchical per heading level (1, 1.1, 1.2, 2 ...)
- Figures: every Insert, in document order
- Tables: every Table and Table2 (Tabular grids are not numbered)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from rly.document_model import Document, Heading, Insert, Table

logger = logging.getLogger(__name__)

UNRESOLVED_REFERENCE = "??"

# Reference tags are parked in the primary output as \x00<tag>:<label>\x00
REFERENCE_PLACEHOLDER_PATTERN = re.compile(r'\x00([PftsS]):([^\x00]*)\x00')


def reference_placeholder(tag: str, label: str) -> str:
    return f"\x00{tag}:{label}\x00"


@dataclass(frozen=True)
class XrefEntry:
    """One labelled target."""
    kind: str  # "Section", "Figure" or "Table"
    number: str
    title: str = ""

    @property
    def display(self) -> str:
        return f"{self.kind} {self.number}"


@dataclass
class XrefIndex:
    """Label → entry lookup plus the per-kind numbering."""
    entries: Dict[str, XrefEntry] = field(default_factory=dict)
    section_count: int = 0
    figure_count: int = 0
    table_count: int = 0

    def add(self, label: Optional[str], entry: XrefEntry) -> None:
        if not label:
            return
        if label in self.entries:
            logger.warning(f"Duplicate cross-reference label {label!r}, keeping the first")
            return
        self.entries[label] = entry

    def lookup(self, label: str) -> Optional[XrefEntry]:
        return self.entries.get(label)

    def display_text(self, tag: str, label: str) -> str:
        """
        Text shown for a reference tag.

        S shows the section title; every other tag shows "<Kind> <number>".
        Unknown labels show "??".
        """
        entry = self.lookup(label)
        if entry is None:
            logger.warning(f"Unresolved cross reference {tag}{{{label}}}")
            return UNRESOLVED_REFERENCE
        if tag == 'S' and entry.title:
            return entry.title
        return entry.display

    def __len__(self) -> int:
        return len(self.entries)


def build_xref_index(document: Document) -> XrefIndex:
    """Traverse the document once (read-only) and number every target."""
    index = XrefIndex()
    counters: List[int] = []

    for block in document.iter_blocks():
        if isinstance(block, Heading):
            depth = block.level
            counters = (counters + [0] * depth)[:depth]
            counters[-1] += 1
            index.section_count += 1
            number = ".".join(str(n) for n in counters)
            index.add(block.ref, XrefEntry("Section", number, block.title))
        elif isinstance(block, Insert):
            index.figure_count += 1
            index.add(block.label, XrefEntry("Figure", str(index.figure_count), block.caption or ""))
        elif isinstance(block, Table):
            # Table2 is a Table subclass
            index.table_count += 1
            index.add(block.ref, XrefEntry("Table", str(index.table_count), block.caption))

    logger.debug(
        f"Cross-reference index: {len(index)} labels, "
        f"{index.figure_count} figures, {index.table_count} tables"
    )
    return index


def resolve_references(
    text: str,
    index: XrefIndex,
    render: Callable[[str, str, str], str],
) -> str:
    """
    Replace reference placeholders in text.

    Args:
        text: Primary-pass output containing placeholders
        index: Cross-reference index of the document
        render: Called with (tag, label, display_text), returns the markup
    """
    def _replace(match):
        tag, label = match.groups()
        return render(tag, label, index.display_text(tag, label))

    return REFERENCE_PLACEHOLDER_PATTERN.sub(_replace, text)
