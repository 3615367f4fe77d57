from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from scripthost import __version__
from scripthost.core.config import get_runtime_config
from scripthost.core.profile_store import ProfileStore
from scripthost.launchers import launch


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scripthost",
        description="Load a hosted script module and run its entry function.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Run a launch profile, forwarding every remaining token verbatim.",
    )
    run_parser.add_argument(
        "profile",
        help="Profile name (built-in: luamake, luamake_script).",
    )
    run_parser.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        help="Tokens published to the hosted module as arg[1..N].",
    )
    run_parser.set_defaults(handler=handle_run)

    profiles_parser = subparsers.add_parser(
        "profiles",
        help="Print the resolved launch profiles as JSON.",
    )
    profiles_parser.set_defaults(handler=handle_profiles)

    config_parser = subparsers.add_parser(
        "print-config",
        help="Print the resolved runtime config as JSON.",
    )
    config_parser.set_defaults(handler=handle_print_config)

    return parser


def handle_run(args: argparse.Namespace) -> int:
    return launch(args.profile, [sys.argv[0], *args.arguments])


def handle_profiles(_args: argparse.Namespace) -> int:
    store = ProfileStore(get_runtime_config().resolved_profiles_file())
    payload = {
        name: profile.model_dump(mode="json")
        for name, profile in sorted(store.load().items())
    }
    print(json.dumps(payload, indent=2))
    return 0


def handle_print_config(_args: argparse.Namespace) -> int:
    config = get_runtime_config()
    payload = {
        "runtime": config.model_dump(mode="json"),
        "profiles_path": str(config.resolved_profiles_file()),
        "search_path": config.search_dirs(),
    }
    print(json.dumps(payload, indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    tokens = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    if len(tokens) > 2 and tokens[0] == "run" and not tokens[1].startswith("-"):
        # argparse would eat a leading "--"; the tail belongs to the hosted module.
        args = parser.parse_args(tokens[:2])
        args.arguments = tokens[2:]
    else:
        args = parser.parse_args(tokens)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
