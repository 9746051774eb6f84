#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    WRAP_WIDTH,
    FULL_WIDTH_THRESHOLD,
    TEX_DOCUMENT_CLASS,
    TEX_CLASS_OPTIONS,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Converter settings (environment variables use the RLY_ prefix)"""

    model_config = SettingsConfigDict(
        env_prefix="RLY_",
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields from .env that aren't defined in model
    )

    # ========== External Tools ==========
    fig2dev_path: str = "fig2dev"
    latex_path: str = "latex"
    dvipdf_path: str = "dvipdf"
    tool_timeout: Optional[int] = None  # seconds; None waits for the tool to exit

    # ========== Reader ==========
    max_include_depth: Optional[int] = None  # None = unbounded (no cycle detection)

    # ========== Figures ==========
    full_width_threshold: int = FULL_WIDTH_THRESHOLD
    figure_workers: int = 1  # >1 converts figures in a thread pool before rendering

    # ========== Typeset Output ==========
    wrap_width: int = WRAP_WIDTH
    tex_document_class: str = TEX_DOCUMENT_CLASS
    tex_class_options: str = TEX_CLASS_OPTIONS
    keep_intermediate: bool = False  # keep .tex/.aux/.dvi/.log after a pdf build

    # ========== Hypertext Output ==========
    html_footer: str = ""


# Global settings instance
settings = Settings()
