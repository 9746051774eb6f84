#!/usr/bin/env python3
"""
Figure Resolver - Converts .fig vector drawings with fig2dev.

Conversion is cache-by-existence: an asset is only produced when the target
file does not exist yet (no content hashing). The existence check and the
conversion for one asset path run under that path's lock, so concurrent
prefetching never converts the same asset twice.

Requirements:
- fig2dev (transfig): apt-get install fig2dev
"""

import re
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from config.constants import BOUNDING_BOX_SCAN_LINES, FIGURE_KINDS, FIGURE_SOURCE_SUFFIX
from config.logging_config import get_logger
from config.settings import Settings, settings as default_settings
from rly.errors import ExternalToolError

logger = get_logger(__name__)

# %%BoundingBox: llx lly urx ury
BOUNDING_BOX_PATTERN = re.compile(
    r'^%%BoundingBox:\s*(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?)'
)


def asset_path_for(source_file: Union[str, Path], target_kind: str) -> Path:
    """diagram.fig → diagram.<kind>, next to the source."""
    source_file = Path(source_file)
    if source_file.suffix == FIGURE_SOURCE_SUFFIX:
        return source_file.with_suffix(f".{target_kind}")
    return source_file.with_name(f"{source_file.name}.{target_kind}")


def read_bounding_box(eps_path: Union[str, Path]) -> Optional[tuple]:
    """
    Read the %%BoundingBox comment from an EPS header.

    Returns:
        (llx, lly, urx, ury) as floats, or None if not found
    """
    with open(eps_path, "r", encoding="latin-1") as f:
        for lineno, line in enumerate(f):
            if lineno >= BOUNDING_BOX_SCAN_LINES:
                break
            match = BOUNDING_BOX_PATTERN.match(line)
            if match:
                return tuple(float(v) for v in match.groups())
    return None


class FigureResolver:
    """
    Converts figure sources into the asset kinds renderers embed.

    Usage:
        resolver = FigureResolver()
        eps = resolver.resolve("figs/diagram.fig", "eps")
        full_width = resolver.needs_full_width(eps)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._locks: Dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.conversions = 0

    def _lock_for(self, asset: Path) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(asset.resolve(), threading.Lock())

    def resolve(self, source_file: Union[str, Path], target_kind: str) -> Path:
        """
        Return the asset path for ``source_file`` in ``target_kind``,
        converting only if the asset does not exist yet.

        Raises:
            ValueError: Unknown target kind
            ExternalToolError: fig2dev missing, failed, or produced no output
        """
        if target_kind not in FIGURE_KINDS:
            raise ValueError(f"Unsupported figure kind: {target_kind}")

        source_file = Path(source_file)
        asset = asset_path_for(source_file, target_kind)

        with self._lock_for(asset):
            if asset.exists():
                logger.debug(f"Figure asset up to date: {asset}")
                return asset
            self._convert(source_file, asset, target_kind)

        return asset

    def _convert(self, source_file: Path, asset: Path, target_kind: str) -> None:
        tool = self.settings.fig2dev_path
        cmd = [tool, "-L", target_kind, str(source_file), str(asset)]
        logger.info(f"Converting figure: {source_file.name} → {asset.name}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.settings.tool_timeout,
            )
        except FileNotFoundError as e:
            logger.error(f"{tool} not found - cannot convert figures")
            raise ExternalToolError(tool, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(tool, None, f"timed out after {e.timeout}s") from e

        with self._locks_guard:
            self.conversions += 1

        if result.returncode != 0:
            logger.error(f"{tool} failed (exit {result.returncode}): {result.stderr[:200]}")
            raise ExternalToolError(tool, result.returncode, result.stderr)

        if not asset.exists():
            raise ExternalToolError(tool, result.returncode, f"no output written to {asset}")

    def needs_full_width(self, eps_path: Union[str, Path]) -> bool:
        """True when the EPS bounding box is wider than the threshold."""
        box = read_bounding_box(eps_path)
        if box is None:
            logger.warning(f"No %%BoundingBox in {eps_path}, using native size")
            return False
        llx, _, urx, _ = box
        return (urx - llx) > self.settings.full_width_threshold

    def prefetch(
        self,
        sources: Iterable[Union[str, Path]],
        target_kind: str,
        max_workers: Optional[int] = None,
    ) -> List[Path]:
        """
        Resolve several figures ahead of rendering.

        Runs in a thread pool when more than one worker is allowed;
        distinct assets convert in parallel, duplicates wait on the lock.
        """
        sources = list(sources)
        max_workers = max_workers or self.settings.figure_workers
        if max_workers <= 1 or len(sources) <= 1:
            return [self.resolve(src, target_kind) for src in sources]

        logger.info(f"Prefetching {len(sources)} figures with {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda src: self.resolve(src, target_kind), sources))
