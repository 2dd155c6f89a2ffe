from __future__ import annotations
import re
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError

BUCKETS = ("mods", "earlyplugins", "plugins")

VERSION_RE = re.compile(r"\b\d{4}\.\d{2}\.\d{2}-[0-9a-fA-F]{7,}\b")

DEFAULT_DOWNLOADER_URL = "https://downloader.hytale.com/hytale-downloader.zip"


def normalize_bucket(directory: str) -> str:
    """
    Normalize a destination directory name relative to Server/:
      " /mods/ " -> "mods"
    Only mods, earlyplugins and plugins are accepted.
    """
    d = str(directory).strip().strip("/").strip()
    if not d:
        raise ConfigurationError("directory must not be blank")
    if d.startswith("."):
        raise ConfigurationError("directory must be relative to Server/ (no '.' prefix)")
    if d not in BUCKETS:
        raise ConfigurationError(f"Unsupported directory '{d}'. Supported: {', '.join(BUCKETS)}.")
    return d


class RunConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    server_root: Path
    downloader_zip_url: str = DEFAULT_DOWNLOADER_URL
    patchline: str = ""
    prefer_shadow_jar: bool = True  # informational, the artifact is resolved by the caller
    skip_update_check: bool = True
    server_args: List[str] = Field(default_factory=list)
    jvm_args: List[str] = Field(default_factory=list)
    enable_early_plugin_loading: bool = False
    as_early_plugin: bool = False
    java_binary: str = "java"

    @field_validator("server_root")
    @classmethod
    def _absolute_root(cls, v: Path) -> Path:
        if not v.is_absolute():
            raise ValueError(f"server_root must be absolute, got {v}")
        return v

    @property
    def primary_bucket(self) -> str:
        return "earlyplugins" if self.as_early_plugin else "mods"


class PlacementRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    bucket: str

    @field_validator("bucket", mode="before")
    @classmethod
    def _known_bucket(cls, v: str) -> str:
        try:
            return normalize_bucket(v)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e


def make_request(path, bucket: str) -> PlacementRequest:
    """Build a PlacementRequest, turning validation failures into ConfigurationError."""
    # ConfigurationError instead of a pydantic ValidationError
    b = normalize_bucket(bucket)
    return PlacementRequest(path=Path(path), bucket=b)


class PlacementResult(BaseModel):
    bucket: str
    directory: Path
    files: List[str] = Field(default_factory=list)


class ProvisionResult(BaseModel):
    version: str
    runtime_dir: Path
    server_dir: Path
    server_jar: Path
    assets_zip: Path
    placements: Dict[str, PlacementResult] = Field(default_factory=dict)
    server_args: List[str] = Field(default_factory=list)
    returncode: Optional[int] = None
