"""
Reader - Markup source to Document

Resolves inclusions, splits the source into chunks, classifies each chunk
and assembles the block tree.
"""

from .assembler import DocumentAssembler, assemble, assemble_text
from .classifier import CLASSIFICATION_RULES, classify
from .inclusion import resolve_includes

__all__ = [
    'DocumentAssembler',
    'assemble',
    'assemble_text',
    'CLASSIFICATION_RULES',
    'classify',
    'resolve_includes',
]
