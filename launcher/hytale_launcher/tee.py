from __future__ import annotations
import threading
from typing import BinaryIO, Optional


class TeeWriter:
    """Writes every chunk to both sinks, in call order."""

    def __init__(self, a: BinaryIO, b: BinaryIO, lock: Optional[threading.Lock] = None):
        self.a = a
        self.b = b
        self._lock = lock or threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            self.a.write(data)
            self.b.write(data)
        return len(data)

    def flush(self) -> None:
        with self._lock:
            self.a.flush()
            self.b.flush()
