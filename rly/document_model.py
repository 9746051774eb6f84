"""
Document Model for RLY Markup

The typed block tree produced by the reader and consumed, read-only, by
every renderer.

Architecture:
    .rly source (+ inclusions)
         ↓
    Reader (inclusion → chunks → classifier → assembler)
         ↓
    Document (this layer)
         ↓
    Renderers (TeX, HTML, DOCX...)

All classes are frozen: blocks and the header are built exactly once during
assembly and never mutated afterward.
"""

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Tuple


# ============================================================================
# Enums for Block Types
# ============================================================================

class BlockType(Enum):
    """Role tag shared by all block variants."""
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    VERBATIM = "verbatim"
    RAW_EMBED = "raw_embed"  # Target-specific content passed through untouched

    # Lists
    ENUMERATION = "enumeration"
    BULLET = "bullet"

    # Row-based blocks
    TABLE = "table"
    TABULAR = "tabular"
    TABLE2 = "table2"

    # Figures
    INSERT = "insert"


Row = Tuple[str, ...]
"""One table row: stripped cell texts"""


def pad_rows(rows) -> Tuple[Row, ...]:
    """
    Right-pad every row with empty cells to the width of the first row.

    Callers reject rows wider than the first one before padding.
    """
    rows = [tuple(r) for r in rows]
    if not rows:
        return ()
    ncols = len(rows[0])
    return tuple(r + ("",) * (ncols - len(r)) for r in rows)


# ============================================================================
# Header
# ============================================================================

@dataclass(frozen=True)
class Header:
    """Document-level metadata from \\title, \\author/\\company and \\date."""
    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    doctype: Optional[str] = None  # word in the trailing [tag] of the title line


@dataclass(frozen=True)
class HeaderUpdate:
    """Header fields contributed by one header chunk (None = not given)."""
    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    doctype: Optional[str] = None
    raw_text: str = field(default="", repr=False, compare=False)

    def fields(self) -> dict:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("author", self.author),
                ("date", self.date),
                ("doctype", self.doctype),
            )
            if value is not None
        }


# ============================================================================
# Block Classes
# ============================================================================

@dataclass(frozen=True)
class Block:
    """Base class for all block-level nodes."""
    role: ClassVar[BlockType]
    # kw_only so subclasses can add required positional fields
    raw_text: str = field(default="", kw_only=True, repr=False, compare=False)


@dataclass(frozen=True)
class Paragraph(Block):
    """Paragraph of text (newlines already collapsed)."""
    role: ClassVar[BlockType] = BlockType.PARAGRAPH
    text: str


@dataclass(frozen=True)
class Heading(Block):
    """Section heading; level 1 is the top."""
    role: ClassVar[BlockType] = BlockType.HEADING
    level: int
    title: str
    ref: Optional[str] = None  # Cross-reference label from [ref]


@dataclass(frozen=True)
class Verbatim(Block):
    """Literal text block; level is the first line's leading whitespace count."""
    role: ClassVar[BlockType] = BlockType.VERBATIM
    text: str
    level: int = 0


@dataclass(frozen=True)
class RawEmbed(Block):
    """Content emitted untouched by the renderer whose format matches target."""
    role: ClassVar[BlockType] = BlockType.RAW_EMBED
    target: str
    text: str


@dataclass(frozen=True)
class Enumeration(Block):
    """Ordered list."""
    role: ClassVar[BlockType] = BlockType.ENUMERATION
    entries: Tuple[str, ...]


@dataclass(frozen=True)
class Bullet(Enumeration):
    """Unordered list."""
    role: ClassVar[BlockType] = BlockType.BULLET


@dataclass(frozen=True)
class Table(Block):
    """Captioned table; the first row is the header row."""
    role: ClassVar[BlockType] = BlockType.TABLE
    caption: str
    format: str  # column-format spec, e.g. |l|c|
    rows: Tuple[Row, ...]
    ref: Optional[str] = None
    option: Optional[str] = None  # trailing [option] token

    @property
    def ncols(self) -> int:
        return len(self.rows[0]) if self.rows else 0


@dataclass(frozen=True)
class Table2(Table):
    """Alternate table syntax (':' cells, format token first)."""
    role: ClassVar[BlockType] = BlockType.TABLE2


@dataclass(frozen=True)
class Tabular(Block):
    """Borderless grid without caption or label."""
    role: ClassVar[BlockType] = BlockType.TABULAR
    rows: Tuple[Row, ...]

    @property
    def ncols(self) -> int:
        return len(self.rows[0]) if self.rows else 0


@dataclass(frozen=True)
class Insert(Block):
    """Embedded figure converted from a vector-graphics (.fig) source."""
    role: ClassVar[BlockType] = BlockType.INSERT
    file: str
    path: str  # file without the .fig suffix; assets are path + ".eps"/".png"
    caption: Optional[str] = None
    ref: Optional[str] = None
    option: Optional[str] = None

    @property
    def label(self) -> str:
        """Cross-reference label: the explicit ref, else CamelCase file stem."""
        if self.ref:
            return self.ref
        stem = Path(self.path).name
        return "".join(part.capitalize() for part in stem.split("_"))

    def asset(self, kind: str) -> str:
        """Relative asset path for a conversion kind ("eps", "png")."""
        return f"{self.path}.{kind}"


# ============================================================================
# Document-level Classes
# ============================================================================

@dataclass(frozen=True)
class Section:
    """One heading plus the blocks that follow it up to the next heading."""
    heading: Heading
    blocks: Tuple[Block, ...] = ()


@dataclass(frozen=True)
class Document:
    """
    Top-level document.

    Structure:
        header: Document metadata (None when no header lines appeared)
        sections: Ordered sections
        source_path: Markup file the document was assembled from

    Usage:
        doc = assemble("report.rly")
        tex = TexRenderer().render(doc)
    """
    header: Optional[Header]
    sections: Tuple[Section, ...] = ()
    source_path: Optional[Path] = None

    @property
    def base_dir(self) -> Path:
        """Directory relative figure paths are resolved against."""
        return self.source_path.parent if self.source_path else Path(".")

    def iter_blocks(self) -> Iterator[Block]:
        """Yield every block, headings included, in document order."""
        for section in self.sections:
            yield section.heading
            yield from section.blocks

    def get_headings(self) -> Tuple[Heading, ...]:
        return tuple(s.heading for s in self.sections)

    def get_inserts(self) -> Tuple[Insert, ...]:
        return tuple(b for b in self.iter_blocks() if isinstance(b, Insert))

    def get_statistics(self) -> dict:
        """
        Get statistics about blocks in the document.

        Returns:
            Dict with counts of each block type
        """
        stats = {block_type.value: 0 for block_type in BlockType}
        for block in self.iter_blocks():
            stats[block.role.value] += 1
        return stats

    def __len__(self) -> int:
        """Number of blocks in document (headings included)."""
        return sum(1 + len(s.blocks) for s in self.sections)

    def __repr__(self) -> str:
        title = self.header.title if self.header else None
        return (f"Document(title={title!r}, "
                f"sections={len(self.sections)}, "
                f"blocks={len(self)})")
