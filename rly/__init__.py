"""
RLY - Lightweight markup converter

Reads .rly markup (with recursive file inclusion) into a typed document
model and renders it as LaTeX, PDF, HTML or Word.

Usage:
    from rly import convert
    convert("report.rly", "htm")
"""

from .converter import FORMATS, convert, output_path_for
from .document_model import Document
from .errors import (
    ExternalToolError,
    InclusionError,
    ParseError,
    RlyError,
    StructuralError,
    UnsupportedFormatError,
)
from .reader import assemble

__version__ = "1.0.0"

__all__ = [
    'FORMATS',
    'Document',
    'ExternalToolError',
    'InclusionError',
    'ParseError',
    'RlyError',
    'StructuralError',
    'UnsupportedFormatError',
    'assemble',
    'convert',
    'output_path_for',
]
