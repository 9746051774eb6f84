"""
Exception hierarchy for the RLY converter.

Every error here is fatal to a conversion run: nothing is retried and no
partial output is written.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """File and 1-based line number of a piece of markup."""
    path: Optional[Path]
    line: int

    def __str__(self) -> str:
        name = self.path.name if self.path else "<string>"
        return f"{name}:{self.line}"


class RlyError(Exception):
    """Base exception for conversion errors"""
    pass


class ParseError(RlyError):
    """Unrecognized chunk shape, malformed header line or malformed heading"""

    def __init__(self, message: str, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"{message}{where}:\n{text.rstrip()}")


class InclusionError(RlyError):
    """Referenced inclusion file is missing (or nested too deeply)"""

    def __init__(self, message: str, path: Path, included_from: Optional[SourceLocation] = None):
        self.path = path
        self.included_from = included_from
        where = f" (included from {included_from})" if included_from else ""
        super().__init__(f"{message}: {path}{where}")


class StructuralError(RlyError):
    """A body block appears before any heading has opened a section"""

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"{message}{where}")


class ExternalToolError(RlyError):
    """Graphics or typesetting tool failed or produced no output"""

    def __init__(self, tool: str, returncode: Optional[int], detail: str = ""):
        self.tool = tool
        self.returncode = returncode
        self.detail = detail
        status = "not found" if returncode is None else f"exit status {returncode}"
        message = f"{tool} failed ({status})"
        if detail:
            message += f": {detail.strip()[:500]}"
        super().__init__(message)


class UnsupportedFormatError(RlyError):
    """Output format token not known to the converter"""
    pass
