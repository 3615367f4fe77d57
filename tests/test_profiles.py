from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from scripthost.core.errors import ProfileError
from scripthost.core.profile_store import ProfileStore
from scripthost.core.profiles import BUILTIN_PROFILES, DEFAULT_LIBRARIES, LaunchProfile


def test_builtin_variants():
    assert BUILTIN_PROFILES["luamake"] == LaunchProfile(module="luamake", entry="runmain")
    assert BUILTIN_PROFILES["luamake_script"] == LaunchProfile(
        module="luamake_script", entry="runscript"
    )
    assert BUILTIN_PROFILES["luamake"].libraries == DEFAULT_LIBRARIES


@pytest.mark.parametrize(
    "fields",
    [
        {"module": "", "entry": "runmain"},
        {"module": "lua-make", "entry": "runmain"},
        {"module": "luamake", "entry": "runmain()"},
        {"module": "luamake", "entry": "a..b"},
        {"module": "luamake", "entry": "runmain", "libraries": ["os path"]},
        {"module": "luamake", "entry": "runmain", "error_policy": "lenient"},
        {"module": "luamake", "entry": "runmain", "unexpected": 1},
    ],
)
def test_invalid_profiles_rejected(fields):
    with pytest.raises(ValidationError):
        LaunchProfile.model_validate(fields)


def test_profiles_are_frozen():
    with pytest.raises(ValidationError):
        BUILTIN_PROFILES["luamake"].module = "other"  # type: ignore[misc]


def test_missing_file_yields_builtins(tmp_path):
    store = ProfileStore(tmp_path / "absent.json")

    assert store.load() == BUILTIN_PROFILES


def test_user_profiles_merge_over_builtins(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": {
                    "luamake": {"module": "luamake", "entry": "main", "error_policy": "legacy"},
                    "ninja": {"module": "ninja_gen", "entry": "generate", "search_path": ["rules"]},
                }
            }
        )
    )

    profiles = ProfileStore(path).load()

    assert profiles["luamake"].entry == "main"
    assert profiles["luamake"].error_policy == "legacy"
    assert profiles["luamake_script"] == BUILTIN_PROFILES["luamake_script"]
    assert profiles["ninja"].search_path == ("rules",)


def test_invalid_entry_is_skipped(tmp_path, caplog):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": {
                    "broken": {"module": "x"},
                    "good": {"module": "good", "entry": "run"},
                }
            }
        )
    )
    caplog.set_level(logging.WARNING, logger="scripthost")

    profiles = ProfileStore(path).load()

    assert "broken" not in profiles
    assert profiles["good"].module == "good"
    events = [json.loads(record.getMessage()) for record in caplog.records]
    assert {"event": "profile.invalid", "name": "broken", "path": str(path), "errors": 1} in events


def test_unreadable_file_yields_builtins(tmp_path, caplog):
    path = tmp_path / "profiles.json"
    path.write_text("{not json")
    caplog.set_level(logging.WARNING, logger="scripthost")

    assert ProfileStore(path).load() == BUILTIN_PROFILES
    assert '"event": "profile.unreadable"' in caplog.text


def test_unknown_profile(tmp_path):
    with pytest.raises(ProfileError) as excinfo:
        ProfileStore(tmp_path / "absent.json").get("make")

    assert excinfo.value.code == "profile"
    assert str(excinfo.value) == "Unknown profile: make (known: luamake, luamake_script)"


def test_non_object_entry_does_not_hide_valid_ones(tmp_path, caplog):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": {
                    "broken": "oops",
                    "good": {"module": "good", "entry": "run"},
                }
            }
        )
    )
    caplog.set_level(logging.WARNING, logger="scripthost")

    profiles = ProfileStore(path).load()

    assert profiles["good"] == LaunchProfile(module="good", entry="run")
    assert "broken" not in profiles
    assert '"name": "broken"' in caplog.text
