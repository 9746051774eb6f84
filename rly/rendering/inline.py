"""
Inline Markup Expander

Scans text for single-letter inline tags (b{bold}, f{fig_ref}, v{code} ...)
and renders them in a target format. The scanner is shared; each target
only contributes a mapping table plus its escaping rules.

Pipeline (pure text -> text):
    text → scan() → [InlineSpan ...] → escape literal text and ordinary
    span contents → apply the target's template per span → joined text

Verbatim (v) and math (m) spans, and the labels of reference tags, never
go through the escaping pass.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from rly.rendering.xref import reference_placeholder

logger = logging.getLogger(__name__)


# Tag letter, then {content}; the first } closes the span (no nesting).
# The letter must not continue a word or a TeX command.
INLINE_TAG_PATTERN = re.compile(r'(?<![\w\\])([PftsSeibucFvm])\{([^}]*)\}')

REFERENCE_TAGS = frozenset("PftsS")
LITERAL_TAGS = frozenset("vm")


@dataclass(frozen=True)
class InlineSpan:
    """A run of literal text (tag None) or one tagged span."""
    tag: Optional[str]
    text: str

    @property
    def is_reference(self) -> bool:
        return self.tag in REFERENCE_TAGS

    @property
    def is_literal(self) -> bool:
        return self.tag in LITERAL_TAGS


def scan(text: str) -> List[InlineSpan]:
    """Split text into literal runs and tagged spans, in order."""
    spans: List[InlineSpan] = []
    pos = 0
    for match in INLINE_TAG_PATTERN.finditer(text):
        if match.start() > pos:
            spans.append(InlineSpan(None, text[pos:match.start()]))
        spans.append(InlineSpan(match.group(1), match.group(2)))
        pos = match.end()
    if pos < len(text):
        spans.append(InlineSpan(None, text[pos:]))
    return spans


# ============================================================================
# Typeset (TeX)
# ============================================================================

TEX_ESCAPES = (
    ('#', r'\#'),
    ('%', r'\%'),
    ('_', r'\_'),
    ('~', r'\~{}'),
)

TEX_TEMPLATES = {
    'P': 'page~\\pageref{%s}',
    'f': 'Figure~\\ref{%s}',
    't': 'Table~\\ref{%s}',
    's': 'Section~\\ref{%s}',
    'S': '\\nameref{%s}',
    'e': '\\emph{%s}',
    'i': '\\textit{%s}',
    'b': '\\textbf{%s}',
    'u': '\\underline{%s}',
    'c': '\\texttt{%s}',
    'F': '\\footnote{%s}',
    'm': '$%s$',
}

# Candidate \verb delimiters, first one absent from the content wins
TEX_VERB_DELIMITERS = "+|!@=;:/"


def tex_escape(text: str) -> str:
    """Escape TeX-reserved characters in ordinary text."""
    for char, replacement in TEX_ESCAPES:
        text = text.replace(char, replacement)
    return text


def tex_verb(text: str) -> str:
    """Render a verbatim span as \\verb with a non-clashing delimiter."""
    for delimiter in TEX_VERB_DELIMITERS:
        if delimiter not in text:
            return f"\\verb{delimiter}{text}{delimiter}"
    logger.debug(f"No free \\verb delimiter for {text!r}, using \\texttt")
    return "\\texttt{%s}" % tex_escape(text)


# ============================================================================
# Hypertext (HTML)
# ============================================================================

HTML_TEMPLATES = {
    'e': '<em>%s</em>',
    'i': '<i>%s</i>',
    'b': '<b>%s</b>',
    'u': '<u>%s</u>',
    'c': '<code>%s</code>',
    'F': '<small class="footnote">%s</small>',
    'v': '<code>%s</code>',
    'm': '<span class="math">%s</span>',
}


def html_escape(text: str) -> str:
    return html.escape(text, quote=False)


# ============================================================================
# Dialects
# ============================================================================

@dataclass(frozen=True)
class InlineDialect:
    """
    Target-specific knowledge for inline expansion.

    templates: tag -> %-template applied to the (escaped) span content
    escape: escaping pass for literal text and ordinary span contents
    literal: encoding for verbatim/math contents (never the escaping pass)
    reference: renders a reference tag given (tag, label)
    special: tag -> renderer overriding the template for that tag
    """
    name: str
    templates: Dict[str, str]
    escape: Callable[[str], str]
    literal: Callable[[str], str]
    reference: Callable[[str, str], str]
    special: Dict[str, Callable[[str], str]] = field(default_factory=dict)

    def render_span(self, span: InlineSpan) -> str:
        if span.tag is None:
            return self.escape(span.text)
        if span.is_reference:
            return self.reference(span.tag, span.text)
        if span.tag in self.special:
            return self.special[span.tag](span.text)
        content = self.literal(span.text) if span.is_literal else self.escape(span.text)
        return self.templates[span.tag] % content


TEX_DIALECT = InlineDialect(
    name="tex",
    templates=TEX_TEMPLATES,
    escape=tex_escape,
    literal=lambda text: text,
    reference=lambda tag, label: TEX_TEMPLATES[tag] % label,
    special={'v': tex_verb},
)

HTML_DIALECT = InlineDialect(
    name="htm",
    templates=HTML_TEMPLATES,
    escape=html_escape,
    # Entity encoding only, to keep the page well-formed
    literal=html_escape,
    # Resolved against the cross-reference index after the primary pass
    reference=reference_placeholder,
)

DIALECTS = {
    "tex": TEX_DIALECT,
    "pdf": TEX_DIALECT,
    "htm": HTML_DIALECT,
}


def get_dialect(target: str) -> InlineDialect:
    try:
        return DIALECTS[target]
    except KeyError:
        raise ValueError(f"No inline dialect for target: {target}") from None


def expand(text: str, target: str) -> str:
    """
    Expand inline tags and escape reserved characters for a target.

    Args:
        text: Paragraph, list entry or table cell text
        target: "tex" (or "pdf") or "htm"

    Returns:
        Target-format text. Plain text without tags or reserved characters
        is returned unchanged.
    """
    dialect = get_dialect(target)
    return "".join(dialect.render_span(span) for span in scan(text))
