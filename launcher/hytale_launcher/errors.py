from __future__ import annotations
from pathlib import Path
from typing import List, Optional


class LauncherError(Exception):
    """Base exception for hytale_launcher."""


class ConfigurationError(LauncherError):
    """Raised for unknown placement buckets or a missing build artifact."""


class NetworkError(LauncherError):
    """Raised when the downloader archive cannot be fetched."""


class ProcessError(LauncherError):
    """Raised when a subprocess exits non-zero or cannot be started."""

    def __init__(self, cmd: List[str], returncode: int, output: Optional[str] = None):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output
        msg = f"Command failed (rc={returncode}): {' '.join(self.cmd)}"
        if output:
            msg += f"\n{output}"
        super().__init__(msg)


class ExtractionError(LauncherError):
    """Raised when an archive cannot be opened or written out."""


class NotFoundError(ExtractionError):
    """Raised when a named entry is not present in an archive."""


class VersionParseError(LauncherError):
    def __init__(self, output: str):
        self.output = output
        super().__init__(f"Could not parse server version from hytale-downloader output:\n{output}")


class DownloadIntegrityError(LauncherError):
    """Raised when the server bundle is missing or empty after download."""


class MissingArtifactError(LauncherError):
    def __init__(self, what: str, path: Path):
        self.path = Path(path)
        super().__init__(f"Expected {what} not found: {self.path}")
