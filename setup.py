#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RLY Converter - Setup Configuration
Runtime dependencies come from requirements.txt; test tooling is the "dev" extra.
"""

from setuptools import setup, find_packages
from pathlib import Path

HERE = Path(__file__).parent


def read_requirements(name: str = "requirements.txt"):
    """Non-comment, non-empty lines of a requirements file."""
    path = HERE / name
    if not path.exists():
        return []
    return [
        line.strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


setup(
    name="rly-converter",
    version="1.0.0",
    description="Converter for the RLY lightweight markup language (LaTeX, PDF, HTML, Word)",
    author="RLY Team",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=read_requirements(),
    extras_require={
        "dev": ["pytest>=7.4.0", "pytest-cov>=4.1.0"],
    },
    classifiers=[
        "Topic :: Text Processing :: Markup",
        "Programming Language :: Python :: 3 :: Only",
    ],
    keywords="markup latex html docx converter",
)
