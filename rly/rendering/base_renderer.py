#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base Renderer Interface

Defines the protocol every output format implements. A renderer walks the
Document in order, one ``render_*`` method per block variant, then builds
the cross-reference index in a second read-only traversal and hands both
to ``finalize``.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from config.settings import Settings, settings as default_settings
from rly.document_model import (
    Block,
    BlockType,
    Bullet,
    Document,
    Enumeration,
    Header,
    Heading,
    Insert,
    Paragraph,
    RawEmbed,
    Table,
    Table2,
    Tabular,
    Verbatim,
)
from rly.figures import FigureResolver
from rly.rendering.xref import XrefIndex, build_xref_index

logger = logging.getLogger(__name__)


class BaseRenderer(ABC):
    """
    Abstract base class for document renderers.

    All renderers must implement:
    - one render_* method per block variant
    - finalize(): assemble the fragments into the artifact

    Usage:
        tex = TexRenderer().render(document)
    """

    #: Format tokens handled by this renderer
    formats: tuple = ()
    #: Figure asset kind embedded by this renderer (None = no conversion)
    figure_kind: Optional[str] = None

    def __init__(
        self,
        settings: Optional[Settings] = None,
        figure_resolver: Optional[FigureResolver] = None,
    ):
        """
        Initialize renderer.

        Args:
            settings: Settings to use (defaults to the global settings)
            figure_resolver: Shared resolver (one is created if omitted)
        """
        self.settings = settings or default_settings
        self.figures = figure_resolver or FigureResolver(self.settings)
        self.document: Optional[Document] = None
        self._figure_count = 0
        self._table_count = 0

        self._dispatch: Dict[BlockType, Callable[[Any], Any]] = {
            BlockType.PARAGRAPH: self.render_paragraph,
            BlockType.HEADING: self.render_heading,
            BlockType.VERBATIM: self.render_verbatim,
            BlockType.RAW_EMBED: self.render_raw,
            BlockType.ENUMERATION: self.render_enumeration,
            BlockType.BULLET: self.render_bullet,
            BlockType.TABLE: self.render_table,
            BlockType.TABULAR: self.render_tabular,
            BlockType.TABLE2: self.render_table2,
            BlockType.INSERT: self.render_insert,
        }
        missing = set(BlockType) - set(self._dispatch)
        if missing:
            raise TypeError(f"{type(self).__name__} has no renderer for {sorted(m.value for m in missing)}")

    @classmethod
    def supports_format(cls, format_name: str) -> bool:
        """Check if renderer supports given format"""
        return format_name in cls.formats

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def render(self, document: Document) -> Any:
        """
        Render a whole document.

        Primary emission is strictly in document order; the cross-reference
        index is built afterwards and never interleaved with emission.
        """
        self.document = document
        self._figure_count = 0
        self._table_count = 0

        if self.figure_kind and self.settings.figure_workers > 1:
            inserts = document.get_inserts()
            self.figures.prefetch(
                [self.figure_source(ins) for ins in inserts],
                self.figure_kind,
                self.settings.figure_workers,
            )

        fragments: List[Any] = [self.render_header(document.header)]
        for block in document.iter_blocks():
            fragments.append(self.render_block(block))

        index = build_xref_index(document)
        logger.debug(f"{type(self).__name__}: {len(fragments)} fragments")
        return self.finalize(document, fragments, index)

    def render_block(self, block: Block) -> Any:
        return self._dispatch[block.role](block)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def figure_source(self, insert: Insert) -> Path:
        """Figure source path, relative to the document's directory."""
        base = self.document.base_dir if self.document else Path(".")
        return base / insert.file

    def resolve_figure(self, insert: Insert, kind: Optional[str] = None) -> Path:
        return self.figures.resolve(self.figure_source(insert), kind or self.figure_kind)

    def next_figure_number(self) -> int:
        self._figure_count += 1
        return self._figure_count

    def next_table_number(self) -> int:
        self._table_count += 1
        return self._table_count

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    @abstractmethod
    def render_header(self, header: Optional[Header]) -> Any:
        """Document preamble; header is None when no header lines appeared"""
        pass

    @abstractmethod
    def render_heading(self, heading: Heading) -> Any:
        pass

    @abstractmethod
    def render_paragraph(self, paragraph: Paragraph) -> Any:
        pass

    @abstractmethod
    def render_verbatim(self, verbatim: Verbatim) -> Any:
        pass

    @abstractmethod
    def render_raw(self, raw: RawEmbed) -> Any:
        """Pass the content through when its target is this format"""
        pass

    @abstractmethod
    def render_enumeration(self, enumeration: Enumeration) -> Any:
        pass

    @abstractmethod
    def render_bullet(self, bullet: Bullet) -> Any:
        pass

    @abstractmethod
    def render_table(self, table: Table) -> Any:
        pass

    @abstractmethod
    def render_tabular(self, tabular: Tabular) -> Any:
        pass

    @abstractmethod
    def render_table2(self, table: Table2) -> Any:
        pass

    @abstractmethod
    def render_insert(self, insert: Insert) -> Any:
        pass

    @abstractmethod
    def finalize(self, document: Document, fragments: List[Any], index: XrefIndex) -> Any:
        """Assemble fragments into the final artifact"""
        pass
