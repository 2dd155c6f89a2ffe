"""
server.py — Launches the Hytale dedicated server
------------------------------------------------
Runs `java [jvm args] -jar HytaleServer.jar [server args]` in the foreground
with the console wired to our own stdin/stdout/stderr, and returns its exit code.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Dict, List, Optional
from .process_runner import ProcessRunner
from .logging_setup import get_logger

log = get_logger("hytale.launcher.server")


class ServerLauncher:
    def __init__(self, java_binary: str = "java", runner: Optional[ProcessRunner] = None):
        self.java = java_binary
        self.runner = runner or ProcessRunner()

    def build_command(self, server_jar: Path, args: List[str], jvm_args: List[str]) -> List[str]:
        return [self.java, *jvm_args, "-jar", str(Path(server_jar).absolute()), *args]

    def launch(self, server_jar: Path, working_dir: Path, args: List[str], jvm_args: List[str],
               env: Optional[Dict[str, str]] = None) -> int:
        cmd = self.build_command(server_jar, args, jvm_args)
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)

        log.info("Starting server: java -jar %s %s", Path(server_jar).name, " ".join(args))
        h = self.runner.start("server", cmd, cwd=working_dir, env=full_env)
        try:
            rc = h.proc.wait()
        except KeyboardInterrupt:
            log.warning("Interrupted, stopping server: %s", self.runner.status())
            self.runner.stop_all()
            return 130
        log.info("Server exited with rc=%s", rc)
        return int(rc if rc is not None else 0)
