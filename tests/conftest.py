"""
Pytest configuration and shared fixtures for RLY converter tests.
"""
import sys
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Callable, Generator

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import Settings


# ============================================================================
# Fixtures: Configuration & Settings
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        fig2dev_path="fig2dev",
        latex_path="latex",
        dvipdf_path="dvipdf",
        figure_workers=1,
        max_include_depth=None,
        keep_intermediate=False,
        html_footer="",
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def write_rly(temp_dir: Path) -> Callable[..., Path]:
    """Write a markup file into temp_dir and return its path."""
    def _write(name: str, text: str) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


# ============================================================================
# Fixtures: Sample Documents
# ============================================================================

SAMPLE_RLY = """\\title Quarterly Report [article]
\\author Jane Doe
\\date 2024-01-15

\\h1 Introduction [intro]

This report covers b{results} for the quarter; see t{tab_sales}
and f{DataFlow}.

\\h2 Sales

\\table "Regional sales" tab_sales |l|r|
Region & Total
North & 100
South & 80

* first point
* second point

\\insert data_flow.fig "Data flow"
"""


@pytest.fixture
def sample_rly() -> str:
    return SAMPLE_RLY


@pytest.fixture
def fake_fig2dev():
    """
    Side effect for subprocess.run that behaves like fig2dev: writes the
    requested output file (a small EPS with a bounding box, or a 1x1 PNG).
    """
    import base64

    png = base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )

    def _run(cmd, **kwargs):
        from subprocess import CompletedProcess
        kind, dst = cmd[2], Path(cmd[4])
        if kind == "png":
            dst.write_bytes(png)
        else:
            dst.write_text("%!PS-Adobe-3.0 EPSF-3.0\n%%BoundingBox: 0 0 612 300\n")
        return CompletedProcess(cmd, 0, stdout="", stderr="")

    return _run
