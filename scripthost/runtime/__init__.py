from .errors import (
    ContextClosed,
    ContextError,
    EntryInvocationError,
    InitializationError,
    ModuleLoadError,
)
from .state import HostState
from .context import InterpreterContext, create_context
from .arguments import ArgumentTable, marshal
from .invoker import ExitSignal, ModuleInvoker
from .shell import HostShell

__all__ = [
    "ArgumentTable",
    "ContextClosed",
    "ContextError",
    "EntryInvocationError",
    "ExitSignal",
    "HostShell",
    "HostState",
    "InitializationError",
    "InterpreterContext",
    "ModuleInvoker",
    "ModuleLoadError",
    "create_context",
    "marshal",
]
