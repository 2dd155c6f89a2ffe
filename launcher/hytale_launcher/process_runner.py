from __future__ import annotations
import io
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, TextIO
from .errors import ProcessError
from .logging_setup import get_logger
from .tee import TeeWriter

log = get_logger("hytale.launcher.proc")

_READ_SIZE = 8192


@dataclass
class ProcessHandle:
    name: str
    proc: subprocess.Popen


class _TextSink:
    """Adapts a text stream without a .buffer (e.g. StringIO) to byte writes."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, data: bytes) -> int:
        self.stream.write(data.decode("utf-8", errors="replace"))
        return len(data)

    def flush(self) -> None:
        self.stream.flush()


def _binary_sink(stream) -> BinaryIO:
    buf = getattr(stream, "buffer", None)
    return buf if buf is not None else _TextSink(stream)


def _spawn(cmd: List[str], cwd: Optional[Path], **kwargs) -> subprocess.Popen:
    try:
        return subprocess.Popen(cmd, cwd=str(cwd) if cwd else None, **kwargs)
    except OSError as e:
        raise ProcessError(cmd, -1, f"Could not start {cmd[0]}: {e}") from e


def run_passthrough(cmd: List[str], *, cwd: Optional[Path] = None) -> int:
    """Run cmd with inherited stdio. Raises ProcessError on non-zero exit."""
    log.info("Running: %s", " ".join(cmd))
    proc = _spawn(cmd, cwd)
    rc = proc.wait()
    if rc != 0:
        raise ProcessError(cmd, rc)
    return rc


def _pump(src: BinaryIO, tee: TeeWriter) -> None:
    try:
        while True:
            chunk = src.read1(_READ_SIZE) if hasattr(src, "read1") else src.read(_READ_SIZE)
            if not chunk:
                break
            tee.write(chunk)
        tee.flush()
    finally:
        src.close()


def run_tee(cmd: List[str], *, cwd: Optional[Path] = None,
            stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> str:
    """
    Run cmd while forwarding its stdout/stderr live and capturing both into one buffer.

    Each pipe is drained on its own thread so a chatty stream can't stall the
    child while the other one is being read. Both threads share a lock so
    chunks land in the capture buffer whole and in arrival order.

    Returns the captured text. Raises ProcessError (with the capture) on non-zero exit.
    """
    out_sink = _binary_sink(stdout if stdout is not None else sys.stdout)
    err_sink = _binary_sink(stderr if stderr is not None else sys.stderr)
    capture = io.BytesIO()
    lock = threading.Lock()

    log.info("Running: %s", " ".join(cmd))
    proc = _spawn(cmd, cwd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, TeeWriter(out_sink, capture, lock)), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, TeeWriter(err_sink, capture, lock)), daemon=True),
    ]
    for t in readers:
        t.start()
    rc = proc.wait()
    for t in readers:
        t.join()

    text = capture.getvalue().decode("utf-8", errors="replace")
    if rc != 0:
        raise ProcessError(cmd, rc, text.strip() or None)
    return text


class ProcessRunner:
    def __init__(self):
        self.handles: List[ProcessHandle] = []

    def start(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None,
              env: Optional[Dict[str, str]] = None) -> ProcessHandle:
        log.info("Starting %s: %s", name, " ".join(cmd))
        # stdin/stdout/stderr stay inherited: the server console is interactive
        proc = _spawn(cmd, cwd, env=env)
        h = ProcessHandle(name=name, proc=proc)
        self.handles.append(h)
        return h

    def stop_all(self, timeout: float = 10.0) -> None:
        for h in self.handles:
            if h.proc.poll() is None:
                log.info("Stopping %s (pid=%s)", h.name, h.proc.pid)
                h.proc.terminate()
        for h in self.handles:
            if h.proc.poll() is None:
                try:
                    h.proc.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    log.warning("Killing %s (pid=%s)", h.name, h.proc.pid)
                    h.proc.kill()

    def status(self) -> dict:
        return {h.name: {"pid": h.proc.pid, "returncode": h.proc.poll()} for h in self.handles}
