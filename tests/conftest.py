from __future__ import annotations

import importlib
import json
import logging
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from scripthost.core.config import RuntimeConfig, get_runtime_config
from scripthost.core.profiles import LaunchProfile

WriteModule = Callable[[str, str], Path]

ARGS_ECHO = """
    import json

    def runmain():
        print("ARGS=" + json.dumps([arg[i] for i in range(len(arg))]))
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty cwd with no SCRIPTHOST_* leakage."""
    for name in (
        "SCRIPTHOST_LOG_LEVEL",
        "SCRIPTHOST_LOG_FORMAT",
        "SCRIPTHOST_LOG_DIR",
        "SCRIPTHOST_ERROR_POLICY",
        "SCRIPTHOST_SEARCH_PATH",
        "SCRIPTHOST_PROFILES_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    get_runtime_config.cache_clear()

    package_logger = logging.getLogger("scripthost")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    get_runtime_config.cache_clear()
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)


@pytest.fixture
def modules_dir(tmp_path) -> Path:
    path = tmp_path / "modules"
    path.mkdir()
    return path


@pytest.fixture
def write_module(modules_dir) -> WriteModule:
    def _write(name: str, source: str) -> Path:
        path = modules_dir.joinpath(*name.split(".")).with_suffix(".py")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        importlib.invalidate_caches()
        return path

    return _write


@pytest.fixture
def config(tmp_path) -> RuntimeConfig:
    return RuntimeConfig(profiles_file=tmp_path / "profiles.json")


@pytest.fixture
def profile(modules_dir) -> LaunchProfile:
    return LaunchProfile(
        module="luamake",
        entry="runmain",
        search_path=(str(modules_dir),),
    )


def published_args(stdout: str) -> list[str]:
    for line in stdout.splitlines():
        if line.startswith("ARGS="):
            return json.loads(line[len("ARGS="):])
    raise AssertionError(f"hosted module printed no ARGS line:\n{stdout}")
