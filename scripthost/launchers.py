"""
Console-script entry points.

These launchers do no flag parsing: every token, argv[0] included, is
forwarded to the hosted module through the ``arg`` table.
"""

from __future__ import annotations

import sys
from typing import Sequence

from scripthost.core.config import RuntimeConfig, get_runtime_config
from scripthost.core.errors import ProfileError, format_error
from scripthost.core.logging import configure_logging
from scripthost.core.profile_store import ProfileStore
from scripthost.runtime.shell import HostShell

EXIT_UNKNOWN_PROFILE = 2


def launch(
    profile_name: str,
    argv: Sequence[str] | None = None,
    *,
    config: RuntimeConfig | None = None,
) -> int:
    config = config or get_runtime_config()
    configure_logging(
        level=config.log_level,
        format_name=config.log_format,
        log_dir=config.log_dir,
    )
    arguments = list(sys.argv if argv is None else argv)
    try:
        profile = ProfileStore(config.resolved_profiles_file()).get(profile_name)
    except ProfileError as exc:
        print(f"scripthost: {format_error(exc)}", file=sys.stderr)
        return EXIT_UNKNOWN_PROFILE
    return HostShell(profile, config=config).run(arguments)


def luamake() -> None:
    sys.exit(launch("luamake"))


def luamake_script() -> None:
    sys.exit(launch("luamake_script"))
