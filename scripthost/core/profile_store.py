from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from scripthost.core.errors import ProfileError
from scripthost.core.logging import get_logger, log_event
from scripthost.core.profiles import BUILTIN_PROFILES, LaunchProfile, ProfileFile

logger = get_logger("scripthost.profiles")


class ProfileStore:
    """Load launch profiles, user entries layered over the built-ins."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, LaunchProfile]:
        profiles = dict(BUILTIN_PROFILES)
        for name, raw in self._read().profiles.items():
            try:
                profiles[name] = LaunchProfile.model_validate(raw)
            except ValidationError as exc:
                log_event(
                    logger,
                    "profile.invalid",
                    level=logging.WARNING,
                    name=name,
                    path=str(self._path),
                    errors=exc.error_count(),
                )
        return profiles

    def get(self, name: str) -> LaunchProfile:
        profiles = self.load()
        try:
            return profiles[name]
        except KeyError:
            known = ", ".join(sorted(profiles))
            raise ProfileError(f"Unknown profile: {name}", detail=f"known: {known}") from None

    def _read(self) -> ProfileFile:
        if not self._path.exists():
            return ProfileFile()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return ProfileFile.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            log_event(
                logger,
                "profile.unreadable",
                level=logging.WARNING,
                path=str(self._path),
                error=str(exc),
            )
            return ProfileFile()
