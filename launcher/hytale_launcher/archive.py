"""
archive.py — zip helpers for the downloader archive and server bundles
-----------------------------------------------------------------------
extract_all() unpacks a whole bundle, extract_one() pulls a single entry
(the platform downloader binary) out of an archive.
"""

from __future__ import annotations
import shutil
import zipfile
from pathlib import Path
from .errors import ExtractionError, NotFoundError
from .logging_setup import get_logger

log = get_logger("hytale.launcher.archive")

_CHUNK = 1024 * 1024


def _safe_target(dest_dir: Path, entry_name: str) -> Path:
    if entry_name.startswith(("/", "\\")) or (len(entry_name) > 1 and entry_name[1] == ":"):
        raise ExtractionError(f"Refusing absolute zip entry: {entry_name}")
    target = (dest_dir / entry_name).resolve()
    if target != dest_dir and dest_dir not in target.parents:
        raise ExtractionError(f"Zip entry escapes destination: {entry_name}")
    return target


def extract_all(archive_path: Path, dest_dir: Path) -> int:
    """
    Stream every entry of archive_path into dest_dir.
    Directory entries are created, file entries get their parents created.
    Returns the number of files written.
    """
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    root = dest_dir.resolve()
    written = 0
    try:
        with zipfile.ZipFile(archive_path) as zf:
            for info in zf.infolist():
                target = _safe_target(root, info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst, _CHUNK)
                written += 1
    except (OSError, zipfile.BadZipFile) as e:
        raise ExtractionError(f"Failed to extract {archive_path} -> {dest_dir}: {e}") from e
    log.debug("Extracted %d file(s) from %s", written, archive_path)
    return written


def extract_one(archive_path: Path, entry_name: str, dest_path: Path) -> Path:
    """Copy the entry named exactly entry_name to dest_path."""
    dest_path = Path(dest_path)
    try:
        with zipfile.ZipFile(archive_path) as zf:
            for info in zf.infolist():
                if info.filename != entry_name:
                    continue
                dest_path.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(dest_path, "wb") as dst:
                    shutil.copyfileobj(src, dst, _CHUNK)
                return dest_path
    except (OSError, zipfile.BadZipFile) as e:
        raise ExtractionError(f"Failed to read {archive_path}: {e}") from e
    raise NotFoundError(f"Entry '{entry_name}' not found in zip: {archive_path}")
