#!/usr/bin/env python3
"""
PDF Builder - Compiles generated LaTeX into PDF.

Pipeline:
    report.tex → latex (twice, for cross references) → report.dvi → dvipdf → report.pdf

Requirements:
- latex and dvipdf (TeX Live / Ghostscript): apt-get install texlive-latex-extra ghostscript
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Union

from config.constants import TEX_INTERMEDIATE_SUFFIXES
from config.logging_config import get_logger
from config.settings import Settings, settings as default_settings
from rly.errors import ExternalToolError

logger = get_logger(__name__)

LATEX_PASSES = 2


def run_tool(cmd: List[str], cwd: Path, timeout: Optional[int] = None) -> subprocess.CompletedProcess:
    """
    Run an external tool and check its exit status.

    Raises:
        ExternalToolError: Tool not found, timed out, or exited non-zero
    """
    tool = cmd[0]
    logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        logger.error(f"{tool} not found")
        raise ExternalToolError(tool, None, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(tool, None, f"timed out after {e.timeout}s") from e

    if result.returncode != 0:
        # latex reports errors on stdout
        detail = result.stderr or result.stdout
        logger.error(f"{tool} failed (exit {result.returncode})")
        raise ExternalToolError(tool, result.returncode, detail[-500:])
    return result


def build_pdf(tex_path: Union[str, Path], settings: Optional[Settings] = None) -> Path:
    """
    Compile a .tex file to .pdf next to it.

    Args:
        tex_path: Generated LaTeX source
        settings: Settings to use (defaults to the global settings)

    Returns:
        Path to the PDF

    Raises:
        ExternalToolError: If latex or dvipdf fails or no PDF is written
    """
    settings = settings or default_settings
    tex_path = Path(tex_path)
    workdir = tex_path.parent
    stem = tex_path.stem
    pdf_path = tex_path.with_suffix(".pdf")

    logger.info(f"Building PDF: {tex_path.name}")
    for _ in range(LATEX_PASSES):
        run_tool(
            [settings.latex_path, "-interaction=nonstopmode", tex_path.name],
            workdir,
            settings.tool_timeout,
        )
    run_tool([settings.dvipdf_path, f"{stem}.dvi", pdf_path.name], workdir, settings.tool_timeout)

    if not pdf_path.exists():
        raise ExternalToolError(settings.dvipdf_path, 0, f"no output written to {pdf_path}")

    if not settings.keep_intermediate:
        remove_intermediates(tex_path)

    logger.info(f"PDF written: {pdf_path}")
    return pdf_path


def remove_intermediates(tex_path: Path) -> None:
    """Delete the .tex source and LaTeX's auxiliary files."""
    for suffix in (".tex",) + TEX_INTERMEDIATE_SUFFIXES:
        path = tex_path.with_suffix(suffix)
        if path.exists():
            path.unlink()
            logger.debug(f"Removed {path.name}")
