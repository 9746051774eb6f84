#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RLY Markup Patterns - Regex patterns for directives, lists and tables.

Supports:
- Comment / terminator directives (\\comment, \\end, % lines)
- Header directives (\\title, \\author, \\company, \\date)
- Headings (\\h1, \\h2, ...), inserts, raw embeds
- Numbered (1. ) and bullet (* ) lists
- \\table, \\tabular and |c|... (Table2) tables
"""

import re


# =============================================================================
# LINE-LEVEL PATTERNS (applied during inclusion resolution)
# =============================================================================

# Lines blanked before chunking so chunk boundaries survive the substitution
BLANKED_LINE_PATTERN = re.compile(r'^(?:%|\\comment\b|\\end\b)')

# \insert chapter.rly  -> replaced by the file's content
INCLUDE_PATTERN = re.compile(r'^\\insert\s+(\S+\.rly)\s*$')


# =============================================================================
# CHUNK CLASSIFICATION PATTERNS (tested against the chunk's first line)
# =============================================================================

DISCARD_PATTERN = re.compile(r'^\\(?:comment|end)\b')
HEADER_PATTERN = re.compile(r'^\\(?:title|author|company|date)\b')
INSERT_PATTERN = re.compile(r'^\\insert\b')
RAW_PATTERN = re.compile(r'^\\raw\b')
HEADING_PATTERN = re.compile(r'^\\h\d+')
ENUMERATION_PATTERN = re.compile(r'^\d+\. ')
BULLET_PATTERN = re.compile(r'^\* ')
TABLE_PATTERN = re.compile(r'^\\table\b')
TABULAR_PATTERN = re.compile(r'^\\tabular\b')
TABLE2_PATTERN = re.compile(r'^\|[cp]')
VERBATIM_PATTERN = re.compile(r'^\s+')
PARAGRAPH_PATTERN = re.compile(r'^(?:\\?\w|\$)')


# =============================================================================
# BLOCK PARSING PATTERNS
# =============================================================================

# One header line: (1) directive, (2) value
HEADER_LINE_PATTERN = re.compile(r'^\\(title|author|company|date)\s+(.*\S)\s*$')

# Trailing [doctype] on the title line
DOCTYPE_PATTERN = re.compile(r'\s*\[(\w+)\]\s*$')

# Heading line: (1) level, (2) title text
HEADING_LINE_PATTERN = re.compile(r'^\\h(\d+)\s+(.*\S)\s*$')

# Optional [ref] inside a heading title
HEADING_REF_PATTERN = re.compile(r'\s+\[(\w+)\]')

# \raw <target>
RAW_LINE_PATTERN = re.compile(r'^\\raw\s+(\w+)\s*$')

# List markers at line start (multiline split)
ENUMERATION_SPLIT = re.compile(r'^\d+\. ', re.MULTILINE)
BULLET_SPLIT = re.compile(r'^\* ', re.MULTILINE)

# Runs of whitespace collapsed inside list entries
WHITESPACE_RUN = re.compile(r'\s+')

# Cell delimiters
TABLE_CELL_DELIMITER = '&'
TABLE2_CELL_DELIMITER = ':'

# Option token like [H] or [c]
OPTION_TOKEN_PATTERN = re.compile(r'^\[.*\]$')

# Bare label token
LABEL_TOKEN_PATTERN = re.compile(r'^\w+$')
