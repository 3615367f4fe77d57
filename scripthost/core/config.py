from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from platformdirs import user_config_path
from pydantic_settings import BaseSettings, SettingsConfigDict

from scripthost.core.paths import APP_AUTHOR, APP_NAME, PROFILES_FILENAME

ErrorPolicy = Literal["strict", "legacy"]


class RuntimeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCRIPTHOST_", case_sensitive=False)

    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"
    log_dir: Path | None = None
    error_policy: ErrorPolicy = "strict"
    search_path: str = ""
    profiles_file: Path | None = None

    def search_dirs(self) -> list[str]:
        """Split ``search_path`` on the platform separator, dropping blanks."""
        return [entry for entry in self.search_path.split(os.pathsep) if entry.strip()]

    def resolved_profiles_file(self) -> Path:
        if self.profiles_file is not None:
            return self.profiles_file.expanduser()
        return Path(user_config_path(APP_NAME, APP_AUTHOR)) / PROFILES_FILENAME


@lru_cache
def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig()
