from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from .models import DEFAULT_DOWNLOADER_URL

class Settings(BaseSettings):
    server_root: Path = Field(default=Path("run"), alias="HYTALE_SERVER_ROOT")
    downloader_zip_url: str = Field(default=DEFAULT_DOWNLOADER_URL, alias="HYTALE_DOWNLOADER_URL")
    patchline: str = Field(default="", alias="HYTALE_PATCHLINE")
    prefer_shadow_jar: bool = Field(default=True, alias="HYTALE_PREFER_SHADOW_JAR")
    skip_update_check: bool = Field(default=True, alias="HYTALE_SKIP_UPDATE_CHECK")
    enable_early_plugin_loading: bool = Field(default=False, alias="HYTALE_EARLY_PLUGINS")
    as_early_plugin: bool = Field(default=False, alias="HYTALE_AS_EARLY_PLUGIN")
    java_binary: str = Field(default="java", alias="JAVA_BINARY")
    config_file: Optional[Path] = Field(default=None, alias="HYTALE_CONFIG")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)
