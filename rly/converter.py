"""
Converter - One-call .rly → output format conversion.

Formats:
    tex  → report.tex   (LaTeX source)
    pdf  → report.pdf   (LaTeX source compiled with latex + dvipdf)
    htm  → report.htm   (standalone HTML page)
    doc  → report.docx  (Word document via python-docx)

Output lands next to the source file. Every failure is fatal: errors are
logged and re-raised, and no partial output is left behind for the
format being written.
"""

from pathlib import Path
from typing import Dict, Optional, Type, Union

from config.constants import FORMAT_EXTENSIONS, SOURCE_EXTENSION
from config.logging_config import get_logger
from config.settings import Settings, settings as default_settings
from rly.errors import RlyError, UnsupportedFormatError
from rly.figures import FigureResolver
from rly.reader import assemble
from rly.rendering.base_renderer import BaseRenderer
from rly.rendering.docx_adapter import render_docx
from rly.rendering.docx_renderer import DocxRenderer
from rly.rendering.html_renderer import HtmlRenderer
from rly.rendering.pdf_builder import build_pdf
from rly.rendering.tex_renderer import TexRenderer

logger = get_logger(__name__)

FORMATS = tuple(FORMAT_EXTENSIONS)

RENDERER_CLASSES = (TexRenderer, HtmlRenderer, DocxRenderer)

# Format token -> renderer class, from each renderer's declared formats
RENDERERS: Dict[str, Type[BaseRenderer]] = {
    fmt: cls
    for fmt in FORMATS
    for cls in RENDERER_CLASSES
    if cls.supports_format(fmt)
}


def output_path_for(source_path: Union[str, Path], fmt: str) -> Path:
    """report.rly → report.<ext> for the format."""
    if fmt not in FORMAT_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Format '{fmt}' not supported (choose from {', '.join(FORMATS)})"
        )
    source_path = Path(source_path)
    if source_path.suffix == SOURCE_EXTENSION:
        return source_path.with_suffix(FORMAT_EXTENSIONS[fmt])
    return source_path.with_name(source_path.name + FORMAT_EXTENSIONS[fmt])


def _write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def convert(
    source_path: Union[str, Path],
    fmt: str,
    settings: Optional[Settings] = None,
    figure_resolver: Optional[FigureResolver] = None,
) -> Path:
    """
    Convert a markup file to one output format.

    Args:
        source_path: Top-level .rly file
        fmt: "tex", "pdf", "htm" or "doc"
        settings: Settings to use (defaults to the global settings)
        figure_resolver: Resolver shared across conversions (optional)

    Returns:
        Path of the written output file

    Raises:
        UnsupportedFormatError: Unknown format token
        RlyError: Any parse, inclusion, structural or external tool failure
    """
    settings = settings or default_settings
    source_path = Path(source_path)
    output_path = output_path_for(source_path, fmt)

    logger.info(f"Converting {source_path.name} → {fmt}")
    try:
        document = assemble(source_path, settings)
        renderer = RENDERERS[fmt](settings, figure_resolver)
        artifact = renderer.render(document)

        if fmt == "doc":
            render_docx(artifact, output_path)
        elif fmt == "pdf":
            tex_path = _write_text(output_path.with_suffix(FORMAT_EXTENSIONS["tex"]), artifact)
            build_pdf(tex_path, settings)
        else:
            _write_text(output_path, artifact)
    except RlyError as e:
        logger.error(f"Conversion of {source_path.name} to {fmt} failed: {e}")
        raise

    logger.info(f"✅ Written: {output_path}")
    return output_path
