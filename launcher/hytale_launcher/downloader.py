"""
downloader.py — hytale-downloader archive fetch and CLI wrapper
---------------------------------------------------------------
fetch_archive() pulls hytale-downloader.zip over HTTP(S).
HytaleDownloader drives the extracted binary to download a server bundle.
"""

from __future__ import annotations
import http.client
import shutil
import urllib.error
import urllib.request
from pathlib import Path
from typing import List
from .errors import NetworkError
from .process_runner import run_passthrough
from .logging_setup import get_logger

log = get_logger("hytale.launcher.downloader")

USER_AGENT = "hytale-launcher"


def fetch_archive(url: str, target: Path, *, timeout: int = 60) -> Path:
    """Stream url straight into target. A failed transfer removes the partial file."""
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/zip,*/*"})
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(target, "wb") as out:
            shutil.copyfileobj(resp, out)
            expected = resp.headers.get("Content-Length")
    except (ValueError, http.client.HTTPException, urllib.error.URLError, OSError) as e:
        target.unlink(missing_ok=True)
        raise NetworkError(f"Download of {url} failed: {e}") from e
    size = target.stat().st_size
    if expected is not None and expected.isdigit() and size != int(expected):
        target.unlink(missing_ok=True)
        raise NetworkError(f"Download of {url} was cut short: got {size} of {expected} bytes")
    if size == 0:
        target.unlink(missing_ok=True)
        raise NetworkError(f"Download of {url} returned an empty body")
    log.debug("Fetched %s (%d bytes)", target, size)
    return target


def download_args(dest_zip: Path, patchline: str = "", skip_update_check: bool = True) -> List[str]:
    args = ["-download-path", str(Path(dest_zip).absolute())]
    pl = (patchline or "").strip()
    if pl:
        args += ["-patchline", pl]
    if skip_update_check:
        args.append("-skip-update-check")
    return args


class HytaleDownloader:
    def __init__(self, binary: Path, working_dir: Path):
        self.bin = Path(binary)
        self.working_dir = Path(working_dir)

    def download_server(self, dest_zip: Path, *, patchline: str = "", skip_update_check: bool = True) -> None:
        cmd = [str(self.bin.absolute())] + download_args(dest_zip, patchline, skip_update_check)
        run_passthrough(cmd, cwd=self.working_dir)
