from __future__ import annotations

import sys
from types import ModuleType
from typing import Any, Callable, Optional, TextIO

from scripthost.core.errors import wrap_error
from scripthost.runtime.context import InterpreterContext
from scripthost.runtime.errors import EntryInvocationError

ExitSignal = Optional[int]

_MISSING = object()


class ModuleInvoker:
    """Load a hosted module and call its entry function."""

    def __init__(self, context: InterpreterContext, stderr: TextIO | None = None) -> None:
        self.context = context
        self._stderr = stderr

    def load(self, module_name: str) -> ModuleType:
        return self.context.require(module_name)

    def call(self, module: ModuleType | None, entry: str) -> ExitSignal:
        """
        Resolve ``entry`` on ``module`` (then on the context namespace) and
        call it without arguments.

        Returns the exit code requested through ``SystemExit``, or None when
        the entry returned normally.
        """
        target = self._resolve(module, entry)
        try:
            target()
        except SystemExit as exc:
            return self.exit_code(exc)
        except Exception as exc:
            raise wrap_error(
                exc,
                message=f"Entry {entry} raised",
                error_type=EntryInvocationError,
            ) from exc
        return None

    def _resolve(self, module: ModuleType | None, entry: str) -> Callable[[], Any]:
        head, *rest = entry.split(".")
        value: Any = _MISSING
        if module is not None:
            value = getattr(module, head, _MISSING)
        if value is _MISSING:
            value = self.context.namespace.get(head, _MISSING)
        for attribute in rest:
            if value is _MISSING:
                break
            value = getattr(value, attribute, _MISSING)

        if value is _MISSING:
            raise EntryInvocationError(f"Entry not found: {entry}")
        if not callable(value):
            raise EntryInvocationError(
                f"Entry is not callable: {entry}",
                detail=type(value).__name__,
            )
        return value

    def exit_code(self, exc: SystemExit) -> int:
        """Translate ``SystemExit`` the way the interpreter does at exit."""
        code = exc.code
        if code is None:
            return 0
        if isinstance(code, int):
            return code
        print(code, file=self._stderr or sys.stderr)
        return 1
