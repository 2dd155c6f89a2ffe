"""
config_loader.py — turns env + JSON run file + CLI overrides into a RunConfiguration
-----------------------------------------------------------------------------------
Everything is resolved once, before the pipeline starts. Example run file:

    {
      "serverRootDir": "run",
      "patchline": "pre-release",
      "artifact": "build/libs/my-mod.jar",
      "asEarlyPlugin": false,
      "includes": [
        {"path": "../core/build/libs/core.jar", "directory": "mods"},
        {"path": "../agent/build/libs/agent.jar", "directory": "earlyplugins"}
      ]
    }
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from .errors import ConfigurationError
from .models import PlacementRequest, RunConfiguration, make_request
from .settings import Settings
from .logging_setup import get_logger

log = get_logger("hytale.launcher.config")


class IncludeEntry(BaseModel):
    path: Path
    directory: str = "mods"


class RunFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    serverRootDir: Optional[Path] = None
    downloaderZipUrl: Optional[str] = None
    patchline: Optional[str] = None
    preferShadowJar: Optional[bool] = None
    skipDownloaderUpdateCheck: Optional[bool] = None
    serverArgs: Optional[List[str]] = None
    jvmArgs: Optional[List[str]] = None
    enableEarlyPluginLoading: Optional[bool] = None
    asEarlyPlugin: Optional[bool] = None
    artifact: Optional[Path] = None
    includes: List[IncludeEntry] = Field(default_factory=list)


_FILE_TO_FIELD = {
    "serverRootDir": "server_root",
    "downloaderZipUrl": "downloader_zip_url",
    "patchline": "patchline",
    "preferShadowJar": "prefer_shadow_jar",
    "skipDownloaderUpdateCheck": "skip_update_check",
    "serverArgs": "server_args",
    "jvmArgs": "jvm_args",
    "enableEarlyPluginLoading": "enable_early_plugin_loading",
    "asEarlyPlugin": "as_early_plugin",
}


def load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read run file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Run file root must be an object")
    return data


def load_config(path: Path) -> RunFile:
    log.info("Loading run file: %s", path)
    try:
        return RunFile.model_validate(load_json(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid run file {path}: {e}") from e


def _resolve(p: Path, base: Path) -> Path:
    p = Path(p).expanduser()
    return p if p.is_absolute() else (base / p).absolute()


def build_run_configuration(settings: Settings, run_file: Optional[RunFile] = None, *,
                            base_dir: Optional[Path] = None, **overrides) -> RunConfiguration:
    """
    defaults < environment < run file < overrides (None values are ignored).
    A relative server root is resolved against base_dir (default: cwd).
    """
    base = Path(base_dir) if base_dir else Path.cwd()
    values: Dict[str, Any] = {
        "server_root": settings.server_root,
        "downloader_zip_url": settings.downloader_zip_url,
        "patchline": settings.patchline,
        "prefer_shadow_jar": settings.prefer_shadow_jar,
        "skip_update_check": settings.skip_update_check,
        "enable_early_plugin_loading": settings.enable_early_plugin_loading,
        "as_early_plugin": settings.as_early_plugin,
        "java_binary": settings.java_binary,
    }
    if run_file is not None:
        for key, field in _FILE_TO_FIELD.items():
            v = getattr(run_file, key)
            if v is not None:
                values[field] = v
    values.update({k: v for k, v in overrides.items() if v is not None})
    values["server_root"] = _resolve(values["server_root"], base)
    try:
        return RunConfiguration(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def parse_include(spec: str) -> Tuple[str, str]:
    """'earlyplugins=path/to.jar' -> ('earlyplugins', 'path/to.jar'); a bare path goes to mods."""
    if "=" in spec:
        bucket, _, path = spec.partition("=")
        return bucket, path
    return "mods", spec


def resolve_includes(entries: Iterable[Tuple[str, str]], base_dir: Optional[Path] = None) -> List[PlacementRequest]:
    base = Path(base_dir) if base_dir else Path.cwd()
    return [make_request(_resolve(Path(path), base), bucket) for bucket, path in entries]


def resolve_artifact(path: Optional[Path], base_dir: Optional[Path] = None) -> Path:
    if path is None:
        raise ConfigurationError("No build artifact given (pass ARTIFACT or set 'artifact' in the run file)")
    return _resolve(Path(path), Path(base_dir) if base_dir else Path.cwd())
