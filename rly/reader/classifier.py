"""
Block Classifier - Decide which block a chunk of markup represents.

Classification is by the shape of the chunk's first line, tested against
CLASSIFICATION_RULES top to bottom. The order is load-bearing: the first
matching rule wins, so e.g. a chunk starting with " 1. " is Verbatim (the
list rules require the marker at column 0 and are checked first).

    1.  \\comment, \\end            → discarded (None)
    2.  \\title ... \\date           → HeaderUpdate
    3.  \\insert                     → Insert
    3a. \\raw <target>               → RawEmbed
    4.  \\h<level>                   → Heading
    5.  "<int>. "                   → Enumeration
    6.  "* "                        → Bullet
    7.  \\table                      → Table
    8.  \\tabular                    → Tabular
    9.  |c... / |p...               → Table2
    10. leading whitespace          → Verbatim
    11. word, \\word or $            → Paragraph
    12. anything else               → ParseError
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Sequence, Tuple, Union

from rly.document_model import (
    Block,
    Bullet,
    Enumeration,
    HeaderUpdate,
    Heading,
    Insert,
    Paragraph,
    RawEmbed,
    Row,
    Table,
    Table2,
    Tabular,
    Verbatim,
    pad_rows,
)
from rly.errors import ParseError, SourceLocation
from rly.reader import patterns as p

logger = logging.getLogger(__name__)

Classified = Optional[Union[Block, HeaderUpdate]]
Builder = Callable[[str, Optional[SourceLocation]], Classified]


@dataclass(frozen=True)
class ClassificationRule:
    """A predicate (first-line pattern) paired with a block constructor."""
    name: str
    pattern: Pattern
    build: Builder

    def matches(self, chunk: str) -> bool:
        return bool(self.pattern.match(chunk))


# ============================================================================
# Constructors
# ============================================================================

def _discard(chunk: str, location: Optional[SourceLocation]) -> None:
    return None


def _build_header(chunk: str, location: Optional[SourceLocation]) -> HeaderUpdate:
    """Every line must be a header directive; \\company aliases \\author."""
    values = {}
    for line in chunk.splitlines():
        match = p.HEADER_LINE_PATTERN.match(line)
        if not match:
            raise ParseError("Cannot parse header line", line, location)
        directive, value = match.groups()
        if directive == "title":
            doctype = p.DOCTYPE_PATTERN.search(value)
            if doctype:
                values["doctype"] = doctype.group(1)
                value = value[:doctype.start()].strip()
            values["title"] = value
        elif directive in ("author", "company"):
            values["author"] = value
        else:
            values["date"] = value
    return HeaderUpdate(raw_text=chunk, **values)


def _build_insert(chunk: str, location: Optional[SourceLocation]) -> Insert:
    """\\insert <file> ["caption"] [ref] [[option]]"""
    tokens = chunk.split()[1:]
    if not tokens:
        raise ParseError("Insert directive without a file", chunk, location)
    file = tokens.pop(0)
    option = tokens.pop() if tokens and tokens[-1].startswith("[") else None
    ref = tokens.pop() if tokens and p.LABEL_TOKEN_PATTERN.match(tokens[-1]) else None
    caption = _unquote(" ".join(tokens)) or None
    path = file[:-len(".fig")] if file.endswith(".fig") else file
    return Insert(
        file=file,
        path=path,
        caption=caption,
        ref=ref,
        option=option,
        raw_text=chunk,
    )


def _build_raw(chunk: str, location: Optional[SourceLocation]) -> RawEmbed:
    first, _, body = chunk.partition("\n")
    match = p.RAW_LINE_PATTERN.match(first)
    if not match:
        raise ParseError("Raw directive needs a target format", chunk, location)
    return RawEmbed(target=match.group(1), text=body, raw_text=chunk)


def _build_heading(chunk: str, location: Optional[SourceLocation]) -> Heading:
    first, _, rest = chunk.partition("\n")
    match = p.HEADING_LINE_PATTERN.match(first)
    if not match:
        raise ParseError("Cannot parse heading", chunk, location)
    level = int(match.group(1))
    if level < 1:
        raise ParseError("Heading level must be 1 or more", chunk, location)
    title = match.group(2)
    ref = None
    ref_match = p.HEADING_REF_PATTERN.search(title)
    if ref_match:
        ref = ref_match.group(1)
        title = p.HEADING_REF_PATTERN.sub("", title, count=1)
    if rest.strip():
        logger.warning(f"Ignoring text after heading line at {location}: {rest.strip()[:60]}")
    return Heading(level=level, title=title.strip(), ref=ref, raw_text=chunk)


def _split_entries(chunk: str, marker: Pattern) -> Tuple[str, ...]:
    """Split on the list marker, drop the preamble, collapse whitespace."""
    parts = marker.split(chunk)[1:]
    return tuple(p.WHITESPACE_RUN.sub(" ", part).strip() for part in parts)


def _build_enumeration(chunk: str, location: Optional[SourceLocation]) -> Enumeration:
    return Enumeration(entries=_split_entries(chunk, p.ENUMERATION_SPLIT), raw_text=chunk)


def _build_bullet(chunk: str, location: Optional[SourceLocation]) -> Bullet:
    return Bullet(entries=_split_entries(chunk, p.BULLET_SPLIT), raw_text=chunk)


def _split_rows(
    lines: Sequence[str],
    delimiter: str,
    chunk: str,
    location: Optional[SourceLocation],
) -> Tuple[Row, ...]:
    """Split data lines into cells and pad them to the first row's width."""
    rows: List[Row] = [
        tuple(cell.strip() for cell in line.split(delimiter))
        for line in lines
        if line.strip()
    ]
    if not rows:
        raise ParseError("Table has no rows", chunk, location)
    ncols = len(rows[0])
    for row in rows[1:]:
        if len(row) > ncols:
            raise ParseError(
                f"Table row has {len(row)} cells but the first row has {ncols}",
                chunk,
                location,
            )
    return pad_rows(rows)


def _build_table(chunk: str, location: Optional[SourceLocation]) -> Table:
    """\\table <caption> [<ref>] <format> [<[option]>], then &-rows."""
    first, *lines = chunk.splitlines()
    tokens = first.split()[1:]
    option = tokens.pop() if tokens and p.OPTION_TOKEN_PATTERN.match(tokens[-1]) else None
    if not tokens:
        raise ParseError("Table directive without a column format", chunk, location)
    fmt = tokens.pop()
    ref = None
    if len(tokens) > 1 and not tokens[-1].endswith('"'):
        ref = tokens.pop()
    return Table(
        caption=_unquote(" ".join(tokens)),
        format=fmt,
        ref=ref,
        option=option,
        rows=_split_rows(lines, p.TABLE_CELL_DELIMITER, chunk, location),
        raw_text=chunk,
    )


def _build_tabular(chunk: str, location: Optional[SourceLocation]) -> Tabular:
    _, *lines = chunk.splitlines()
    return Tabular(
        rows=_split_rows(lines, p.TABLE_CELL_DELIMITER, chunk, location),
        raw_text=chunk,
    )


def _build_table2(chunk: str, location: Optional[SourceLocation]) -> Table2:
    """<format> "<caption>" [<ref>], then :-rows."""
    first, *lines = chunk.splitlines()
    tokens = first.split()
    fmt = tokens.pop(0)
    ref = None
    if tokens and not tokens[-1].endswith('"'):
        ref = tokens.pop()
    return Table2(
        caption=" ".join(tokens).replace('"', ""),
        format=fmt,
        ref=ref,
        option=None,
        rows=_split_rows(lines, p.TABLE2_CELL_DELIMITER, chunk, location),
        raw_text=chunk,
    )


def _build_verbatim(chunk: str, location: Optional[SourceLocation]) -> Verbatim:
    indent = p.VERBATIM_PATTERN.match(chunk)
    return Verbatim(text=chunk, level=len(indent.group(0)) if indent else 0, raw_text=chunk)


def _build_paragraph(chunk: str, location: Optional[SourceLocation]) -> Paragraph:
    return Paragraph(text=chunk.replace("\n", " ").strip(), raw_text=chunk)


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


# ============================================================================
# Dispatch Table
# ============================================================================

CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("directive", p.DISCARD_PATTERN, _discard),
    ClassificationRule("header", p.HEADER_PATTERN, _build_header),
    ClassificationRule("insert", p.INSERT_PATTERN, _build_insert),
    ClassificationRule("raw", p.RAW_PATTERN, _build_raw),
    ClassificationRule("heading", p.HEADING_PATTERN, _build_heading),
    ClassificationRule("enumeration", p.ENUMERATION_PATTERN, _build_enumeration),
    ClassificationRule("bullet", p.BULLET_PATTERN, _build_bullet),
    ClassificationRule("table", p.TABLE_PATTERN, _build_table),
    ClassificationRule("tabular", p.TABULAR_PATTERN, _build_tabular),
    ClassificationRule("table2", p.TABLE2_PATTERN, _build_table2),
    ClassificationRule("verbatim", p.VERBATIM_PATTERN, _build_verbatim),
    ClassificationRule("paragraph", p.PARAGRAPH_PATTERN, _build_paragraph),
)


def match_rule(chunk: str) -> Optional[ClassificationRule]:
    """Return the first rule whose pattern matches the chunk, if any."""
    for rule in CLASSIFICATION_RULES:
        if rule.matches(chunk):
            return rule
    return None


def classify(chunk: str, location: Optional[SourceLocation] = None) -> Classified:
    """
    Classify one chunk of markup.

    Args:
        chunk: Non-empty run of non-blank source lines
        location: Where the chunk starts (for error messages)

    Returns:
        A Block, a HeaderUpdate, or None for discarded directives

    Raises:
        ParseError: If no rule matches or the matching constructor rejects
            the chunk
    """
    rule = match_rule(chunk)
    if rule is None:
        raise ParseError("Cannot classify chunk", chunk, location)
    logger.debug(f"Chunk at {location} classified as {rule.name}")
    return rule.build(chunk, location)
