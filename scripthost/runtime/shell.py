from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from types import ModuleType
from typing import Callable, TextIO

from scripthost.core.config import RuntimeConfig, get_runtime_config
from scripthost.core.errors import ScriptHostError, format_error
from scripthost.core.logging import get_logger, log_event
from scripthost.core.profiles import LaunchProfile
from scripthost.runtime.arguments import marshal
from scripthost.runtime.context import InterpreterContext, create_context
from scripthost.runtime.errors import (
    EntryInvocationError,
    InitializationError,
    ModuleLoadError,
)
from scripthost.runtime.invoker import ExitSignal, ModuleInvoker
from scripthost.runtime.state import HostState

EXIT_OK = 0
EXIT_INIT_FAILED = 1
EXIT_MODULE_LOAD = 2
EXIT_ENTRY_FAILED = 3

ContextFactory = Callable[..., InterpreterContext]

logger = get_logger("scripthost.shell")


class HostShell:
    """Run one launch profile from context creation to teardown."""

    def __init__(
        self,
        profile: LaunchProfile,
        *,
        config: RuntimeConfig | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        context_factory: ContextFactory = create_context,
    ) -> None:
        self.profile = profile
        self.config = config or get_runtime_config()
        self.policy = profile.error_policy or self.config.error_policy
        self.state = HostState.START
        self._stdout = stdout
        self._stderr = stderr
        self._context_factory = context_factory

    @property
    def search_path(self) -> list[str]:
        return [*self.config.search_dirs(), *self.profile.search_path, "."]

    def run(self, arguments: Sequence[str]) -> int:
        log_event(
            logger,
            "host.start",
            module=self.profile.module,
            entry=self.profile.entry,
            argc=len(arguments),
            policy=self.policy,
        )
        try:
            context = self._context_factory(
                libraries=self.profile.libraries,
                search_path=self.search_path,
            )
        except InitializationError as exc:
            self.state = HostState.FAILED
            self._report(exc)
            log_event(logger, "host.exit", code=EXIT_INIT_FAILED)
            return EXIT_INIT_FAILED

        self.state = HostState.INITIALIZED
        log_event(logger, "context.created", search_path=list(context.search_path))
        try:
            code = self._drive(context, arguments)
        finally:
            context.close()
            self.state = HostState.TERMINATED

        log_event(logger, "host.exit", code=code)
        return code

    def _drive(self, context: InterpreterContext, arguments: Sequence[str]) -> int:
        marshal(context, arguments)
        self.state = HostState.MARSHALLED
        log_event(logger, "arguments.published", argc=len(arguments))

        invoker = ModuleInvoker(context, stderr=self._stderr)
        module_name = self.profile.module

        self._status(f"Loading {module_name}...")
        module: ModuleType | None = None
        try:
            module = invoker.load(module_name)
        except SystemExit as exc:
            self.state = HostState.COMPLETED
            return invoker.exit_code(exc)
        except ModuleLoadError as exc:
            if self.policy == "strict":
                self.state = HostState.COMPLETED
                self._report(exc)
                return EXIT_MODULE_LOAD
            self._ignore(exc)
        else:
            log_event(logger, "module.loaded", module=module_name)
        self.state = HostState.LOADED

        self._status(f"Running {module_name}...")
        signal: ExitSignal = None
        try:
            signal = invoker.call(module, self.profile.entry)
        except EntryInvocationError as exc:
            if self.policy == "strict":
                self.state = HostState.COMPLETED
                self._report(exc)
                return EXIT_ENTRY_FAILED
            self._ignore(exc)
        else:
            log_event(logger, "entry.completed", entry=self.profile.entry, signal=signal)
        self.state = HostState.COMPLETED
        return EXIT_OK if signal is None else signal

    def _status(self, line: str) -> None:
        print(line, file=self._stdout or sys.stdout, flush=True)

    def _report(self, exc: ScriptHostError) -> None:
        log_event(logger, "host.error", level=logging.ERROR, code=exc.code, error=str(exc))
        print(f"scripthost: {format_error(exc)}", file=self._stderr or sys.stderr)

    def _ignore(self, exc: ScriptHostError) -> None:
        log_event(
            logger,
            "host.error_ignored",
            level=logging.WARNING,
            code=exc.code,
            error=str(exc),
        )
