"""
Centralized constants for the RLY converter.
All fixed tables and magic numbers live here.
"""

# ===========================================
# OUTPUT FORMATS
# ===========================================
FORMAT_EXTENSIONS = {
    'tex': '.tex',
    'pdf': '.pdf',
    'htm': '.htm',
    'doc': '.docx',       # python-docx writes OOXML
}
SOURCE_EXTENSION = '.rly'

# ===========================================
# FIGURES
# ===========================================
FIGURE_SOURCE_SUFFIX = '.fig'
FIGURE_KINDS = ('eps', 'png')
FULL_WIDTH_THRESHOLD = 500            # bounding box width, in points
BOUNDING_BOX_SCAN_LINES = 20          # header lines searched for %%BoundingBox

# ===========================================
# TYPESETTING
# ===========================================
WRAP_WIDTH = 72                       # fixed-width .tex source lines
TEX_DOCUMENT_CLASS = 'article'
TEX_CLASS_OPTIONS = '12pt,letterpaper'
TEX_KNOWN_CLASSES = ('article', 'report', 'book', 'letter')
TEX_PACKAGES = ('graphicx', 'longtable', 'float', 'nameref')
TEX_GEOMETRY = 'margin=0.5in,bottom=1in'
TEX_INTERMEDIATE_SUFFIXES = ('.aux', '.dvi', '.log', '.out', '.toc')

# ===========================================
# HYPERTEXT
# ===========================================
HTML_CSS = """
body { font-family: Georgia, "Times New Roman", serif; line-height: 1.5; margin: 0; }
#container { max-width: 48em; margin: 0 auto; padding: 1em 2em; }
#header { text-align: center; margin-bottom: 2em; }
#header .author, #header .date { color: #555; }
h1, h2, h3, h4, h5, h6 { margin: 1.2em 0 0.5em; }
p { text-align: justify; margin: 0.5em 0; }
pre, code { font-family: "Courier New", monospace; font-size: 0.9em; }
pre { background-color: #f5f5f5; padding: 0.5em; }
table { border-collapse: collapse; margin: 1em auto; }
table.table th, table.table td { border: 1px solid #999; padding: 0.2em 0.6em; }
table.tabular td { padding: 0.1em 0.8em 0.1em 0; }
caption, figcaption { font-style: italic; margin: 0.4em 0; }
thead { display: table-header-group; }
figure { text-align: center; margin: 1em 0; }
small.footnote { color: #555; }
#footer { border-top: 1px solid #ccc; margin-top: 2em; color: #777; font-size: 0.9em; }
"""

# ===========================================
# WORD PROCESSOR
# ===========================================
DOCX_BODY_FONT = 'Times New Roman'
DOCX_CODE_FONT = 'Courier New'
DOCX_CODE_SIZE_PT = 8.0
DOCX_MATH_FONT = 'Cambria Math'
DOCX_FOOTNOTE_SIZE_PT = 8.0
DOCX_MAX_HEADING_LEVEL = 9
DOCX_TABLE_STYLE = 'Table Grid'
DOCX_HYPERLINK_COLOR = '0563C1'

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
