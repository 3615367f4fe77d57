from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scripthost.core.config import ErrorPolicy

DEFAULT_LIBRARIES: tuple[str, ...] = (
    "collections",
    "io",
    "math",
    "os",
    "string",
    "sys",
)


def _check_dotted(value: str, what: str) -> str:
    parts = value.split(".")
    if not value or not all(part.isidentifier() for part in parts):
        raise ValueError(f"{what} must be a dotted Python name, got {value!r}")
    return value


class LaunchProfile(BaseModel):
    """Which module a launcher loads and which entry it calls."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    module: str
    entry: str
    libraries: tuple[str, ...] = DEFAULT_LIBRARIES
    search_path: tuple[str, ...] = ()
    error_policy: ErrorPolicy | None = None

    @field_validator("module")
    @classmethod
    def _module_name(cls, value: str) -> str:
        return _check_dotted(value, "module")

    @field_validator("entry")
    @classmethod
    def _entry_name(cls, value: str) -> str:
        return _check_dotted(value, "entry")

    @field_validator("libraries")
    @classmethod
    def _library_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            _check_dotted(name, "library")
        return value


class ProfileFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    schemaVersion: int = 1
    profiles: dict[str, Any] = Field(default_factory=dict)


BUILTIN_PROFILES: dict[str, LaunchProfile] = {
    "luamake": LaunchProfile(module="luamake", entry="runmain"),
    "luamake_script": LaunchProfile(module="luamake_script", entry="runscript"),
}
