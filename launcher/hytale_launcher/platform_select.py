from __future__ import annotations
import sys
from typing import NamedTuple, Optional


class DownloaderBinary(NamedTuple):
    entry_name: str
    binary_name: str
    needs_chmod: bool


WINDOWS_BINARY = DownloaderBinary("hytale-downloader-windows-amd64.exe", "hytale-downloader.exe", False)
LINUX_BINARY = DownloaderBinary("hytale-downloader-linux-amd64", "hytale-downloader", True)


def select_downloader_binary(os_name: Optional[str] = None) -> DownloaderBinary:
    """Return the zip entry / local filename / chmod flag for the host OS. Anything not Windows gets the linux build."""
    name = (os_name if os_name is not None else sys.platform).lower()
    if name.startswith("win") or "windows" in name:
        return WINDOWS_BINARY
    return LINUX_BINARY
