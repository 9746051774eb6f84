"""
Rendering Module

Renderers for each output format plus the shared inline expander and
cross-reference index.
"""

from .base_renderer import BaseRenderer
from .docx_adapter import DocxAdapter, render_docx
from .docx_renderer import DocxRenderer
from .html_renderer import HtmlRenderer
from .inline import expand, scan
from .pdf_builder import build_pdf
from .tex_renderer import TexRenderer
from .xref import XrefIndex, build_xref_index

__all__ = [
    'BaseRenderer',
    'DocxAdapter',
    'DocxRenderer',
    'HtmlRenderer',
    'TexRenderer',
    'XrefIndex',
    'build_pdf',
    'build_xref_index',
    'expand',
    'render_docx',
    'scan',
]
