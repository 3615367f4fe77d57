from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScriptHostError(Exception):
    code: str
    message: str
    detail: str | None = None

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class ProfileError(ScriptHostError):
    """Unknown or malformed launch profile."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="profile", message=message, detail=detail)


def format_error(error: BaseException) -> str:
    if isinstance(error, ScriptHostError):
        prefix = f"[{error.code}] " if error.code else ""
        return f"{prefix}{error}"
    return f"{error}"


def describe_error(error: BaseException) -> str:
    if isinstance(error, ScriptHostError):
        return format_error(error)
    return f"{type(error).__name__}: {error}"


def wrap_error(
    error: BaseException,
    *,
    message: str,
    error_type: type[ScriptHostError] | None = None,
    code: str = "internal",
) -> ScriptHostError:
    """Convert ``error`` into ``error_type`` unless it already is one."""
    if isinstance(error, error_type or ScriptHostError):
        return error
    detail = describe_error(error)
    if error_type is not None:
        return error_type(message, detail)  # type: ignore[call-arg]
    return ScriptHostError(code=code, message=message, detail=detail)
