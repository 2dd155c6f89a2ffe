from __future__ import annotations
from pathlib import Path
from typing import Optional, TextIO
from .errors import VersionParseError
from .models import VERSION_RE
from .process_runner import run_tee
from .logging_setup import get_logger

log = get_logger("hytale.launcher.version")


def parse_version(output: str) -> Optional[str]:
    """
    First non-blank line if it is exactly a version, else the first version
    found anywhere in the output. None when neither matches.
    """
    first = next((ln.strip() for ln in output.splitlines() if ln.strip()), None)
    if first is None:
        return None
    if VERSION_RE.fullmatch(first):
        return first
    m = VERSION_RE.search(output)
    return m.group(0) if m else None


class VersionResolver:
    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.stdout = stdout
        self.stderr = stderr

    def resolve(self, binary: Path, working_dir: Path) -> str:
        cmd = [str(Path(binary).absolute()), "-print-version", "-skip-update-check"]
        text = run_tee(cmd, cwd=working_dir, stdout=self.stdout, stderr=self.stderr).strip()
        version = parse_version(text)
        if not version:
            raise VersionParseError(text)
        log.info("Server version: %s", version)
        return version
