from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

DOWNLOADER_ZIP_NAME = "hytale-downloader.zip"
SERVER_JAR_NAME = "HytaleServer.jar"
ASSETS_ZIP_NAME = "Assets.zip"


@dataclass(frozen=True)
class Layout:
    root: Path
    cache: Path
    bin: Path
    runtime: Path
    logs: Path

    @property
    def downloader_zip(self) -> Path:
        return self.cache / DOWNLOADER_ZIP_NAME

    def game_zip(self, version: str) -> Path:
        return self.cache / f"game-{version}.zip"

    def runtime_dir(self, version: str) -> Path:
        return self.runtime / version

    def server_dir(self, version: str) -> Path:
        return self.runtime_dir(version) / "Server"

    def server_jar(self, version: str) -> Path:
        return self.server_dir(version) / SERVER_JAR_NAME

    def assets_zip(self, version: str) -> Path:
        return self.runtime_dir(version) / ASSETS_ZIP_NAME

    def bucket_dir(self, version: str, bucket: str) -> Path:
        return self.server_dir(version) / bucket


def build_layout(root: Path) -> Layout:
    root = Path(root)
    return Layout(
        root=root,
        cache=root / "cache",
        bin=root / "bin",
        runtime=root / "runtime",
        logs=root / "logs",
    )


def ensure_dirs(layout: Layout) -> None:
    for p in [layout.cache, layout.bin, layout.runtime]:
        p.mkdir(parents=True, exist_ok=True)
