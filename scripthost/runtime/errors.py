from __future__ import annotations

from scripthost.core.errors import ScriptHostError


class InitializationError(ScriptHostError):
    """The interpreter context could not be created."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="init_failed", message=message, detail=detail)


class ModuleLoadError(ScriptHostError):
    """A hosted module could not be resolved or its top-level code raised."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="module_load", message=message, detail=detail)


class EntryInvocationError(ScriptHostError):
    """The entry expression could not be resolved, or the call raised."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="entry_failed", message=message, detail=detail)


class ContextError(ScriptHostError):
    """Illegal operation on an interpreter context."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="context", message=message, detail=detail)


class ContextClosed(ContextError):
    """The context was already released."""
