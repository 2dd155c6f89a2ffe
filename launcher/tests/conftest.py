"""
Shared fixtures: a fake hytale-downloader packed the way the real archive is.
"""

import sys
import zipfile
from pathlib import Path

import pytest

VERSION = "2026.01.13-dcad8778f"

_FAKE_DOWNLOADER = '''
import sys
import zipfile

calls_log = {calls_log!r}
args = sys.argv[1:]
with open(calls_log, "a", encoding="utf-8") as f:
    f.write(" ".join(args) + "\\n")

if "-print-version" in args:
    print("hytale-downloader 1.2.3 (update check skipped)")
    print({version!r})
    sys.stderr.write("done\\n")
    sys.exit(0)

if "-download-path" in args:
    dest = args[args.index("-download-path") + 1]
    with zipfile.ZipFile(dest, "w") as zf:
        zf.writestr("Server/HytaleServer.jar", b"server-jar")
        zf.writestr("Server/mods/", b"")
        zf.writestr("Assets.zip", b"assets")
    sys.exit(0)

sys.exit(2)
'''


@pytest.fixture
def make_jar(tmp_path):
    def _make(rel: str, content: bytes = b"jar") -> Path:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        return p
    return _make


@pytest.fixture
def fake_downloader(tmp_path):
    """
    Writes hytale-downloader.zip with a linux entry that is a /bin/sh wrapper
    around a Python script. Returns (zip_path, calls_log).
    """
    if sys.platform == "win32":
        pytest.skip("fake downloader is a POSIX shell wrapper")

    assets = tmp_path / "fake"
    assets.mkdir()
    calls_log = assets / "calls.log"
    script = assets / "fake_downloader.py"
    script.write_text(_FAKE_DOWNLOADER.format(calls_log=str(calls_log), version=VERSION), encoding="utf-8")
    wrapper = f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n'

    zip_path = assets / "hytale-downloader.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("QUICKSTART.md", "read me")
        zf.writestr("hytale-downloader-windows-amd64.exe", b"MZ")
        zf.writestr("hytale-downloader-linux-amd64", wrapper)
    return zip_path, calls_log
