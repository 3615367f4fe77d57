from __future__ import annotations

import importlib
import itertools
import os
import sys
from collections.abc import Iterable, Sequence
from importlib.abc import Loader, MetaPathFinder
from importlib.machinery import ModuleSpec, PathFinder
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Any

from scripthost.core.errors import wrap_error
from scripthost.core.profiles import DEFAULT_LIBRARIES
from scripthost.runtime.errors import (
    ContextClosed,
    ContextError,
    InitializationError,
    ModuleLoadError,
)

REQUIRE_NAME = "require"
PREFIX_BASE = "_scripthost_ctx"

_prefixes = itertools.count(1)


class _HostedLoader(Loader):
    """Seed the context namespace into a module, then run the real loader."""

    def __init__(self, context: InterpreterContext, name: str, loader: Loader) -> None:
        self._context = context
        self._name = name
        self._loader = loader

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return self._loader.create_module(spec)

    def exec_module(self, module: ModuleType) -> None:
        self._context._attach(self._name, module)
        try:
            self._loader.exec_module(module)
        except BaseException:
            self._context._detach(self._name)
            raise

    def __getattr__(self, name: str) -> Any:
        # get_source, get_filename and friends for tracebacks and inspect.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._loader, name)


class _ContextFinder(MetaPathFinder):
    """Route ``<prefix>.<name>`` imports to the owning context."""

    def __init__(self) -> None:
        self.contexts: dict[str, InterpreterContext] = {}

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None = None,
        target: ModuleType | None = None,
    ) -> ModuleSpec | None:
        prefix, _, name = fullname.partition(".")
        context = self.contexts.get(prefix)
        if context is None or not name:
            return None
        return context._find_spec(name, path)


_finder = _ContextFinder()


def _install_finder() -> None:
    if _finder not in sys.meta_path:
        sys.meta_path.insert(0, _finder)


class InterpreterContext:
    """
    Isolated environment hosted modules are loaded into.

    Every module loaded through :meth:`require` starts from a copy of the
    context namespace and is cached in the context's own registry. While
    the context is open its modules are importable as ``<prefix>.<name>``
    so relative imports inside hosted packages resolve; bare names never
    reach ``sys.modules``.
    """

    def __init__(self, search_path: Sequence[str]) -> None:
        self.search_path: tuple[str, ...] = tuple(search_path)
        self.prefix = f"{PREFIX_BASE}{next(_prefixes)}"
        self._namespace: dict[str, Any] = {}
        self._modules: dict[str, ModuleType] = {}
        self._closed = False

        root = ModuleType(self.prefix)
        root.__path__ = []
        sys.modules[self.prefix] = root
        _install_finder()
        _finder.contexts[self.prefix] = self

    @property
    def namespace(self) -> MappingProxyType[str, Any]:
        return MappingProxyType(self._namespace)

    @property
    def modules(self) -> MappingProxyType[str, ModuleType]:
        return MappingProxyType(self._modules)

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, name: str, value: Any) -> None:
        """Bind ``name`` in the namespace seen by hosted modules. No rebinding."""
        self._check_open()
        if name in self._namespace:
            raise ContextError(f"Name already published: {name}")
        self._namespace[name] = value

    def qualify(self, name: str) -> str:
        return f"{self.prefix}.{name}"

    def require(self, name: str) -> ModuleType:
        """Load ``name`` from the search path once and return it."""
        self._check_open()
        module = self._modules.get(name)
        if module is not None:
            return module

        parent_name = name.rpartition(".")[0]
        if parent_name:
            parent = self.require(parent_name)
            if getattr(parent, "__path__", None) is None:
                raise ModuleLoadError(
                    f"Module not found: {name}",
                    detail=f"{parent_name} is not a package",
                )

        qualified = self.qualify(name)
        try:
            importlib.import_module(qualified)
        except ModuleNotFoundError as exc:
            if exc.name != qualified:
                raise wrap_error(
                    exc,
                    message=f"Error loading module {name}",
                    error_type=ModuleLoadError,
                ) from exc
            searched = os.pathsep.join(self._search_for(name, None)) or "<empty path>"
            raise ModuleLoadError(
                f"Module not found: {name}",
                detail=f"searched {searched}",
            ) from None
        except Exception as exc:
            raise wrap_error(
                exc,
                message=f"Error loading module {name}",
                error_type=ModuleLoadError,
            ) from exc
        return self._modules[name]

    def close(self) -> None:
        """Drop every loaded module and published name."""
        _finder.contexts.pop(self.prefix, None)
        owned = [
            key
            for key in sys.modules
            if key == self.prefix or key.startswith(f"{self.prefix}.")
        ]
        for key in owned:
            del sys.modules[key]
        self._modules.clear()
        self._namespace.clear()
        self._closed = True

    def __enter__(self) -> InterpreterContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _find_spec(self, name: str, path: Sequence[str] | None) -> ModuleSpec | None:
        spec = PathFinder.find_spec(self.qualify(name), self._search_for(name, path))
        if spec is None or spec.loader is None:
            return None
        spec.loader = _HostedLoader(self, name, spec.loader)
        return spec

    def _search_for(self, name: str, path: Sequence[str] | None) -> list[str]:
        if "." not in name:
            return list(self.search_path)
        if path is None:
            parent = self._modules.get(name.rpartition(".")[0])
            path = getattr(parent, "__path__", None) or []
        return list(path)

    def _attach(self, name: str, module: ModuleType) -> None:
        module.__dict__.update(self._namespace)
        self._modules[name] = module

    def _detach(self, name: str) -> None:
        self._modules.pop(name, None)

    def _check_open(self) -> None:
        if self._closed:
            raise ContextClosed("Interpreter context is closed")


def resolve_search_path(entries: Iterable[str | Path]) -> list[str]:
    resolved: list[str] = []
    for entry in entries:
        path = str(Path(entry).expanduser().resolve())
        if path not in resolved:
            resolved.append(path)
    return resolved


def create_context(
    *,
    libraries: Iterable[str] = DEFAULT_LIBRARIES,
    search_path: Iterable[str | Path] = (".",),
) -> InterpreterContext:
    """Allocate a fresh context and install the standard library surface.

    Any failure here is fatal for the launcher, so every exception raised
    while importing the surface becomes an ``InitializationError``.
    """
    context: InterpreterContext | None = None
    try:
        # Modules may have been written since the last lookup.
        importlib.invalidate_caches()
        context = InterpreterContext(resolve_search_path(search_path))
        for name in libraries:
            importlib.import_module(name)
            top_level = name.partition(".")[0]
            if top_level not in context.namespace:
                context.publish(top_level, importlib.import_module(top_level))
    except Exception as exc:
        if context is not None:
            context.close()
        raise wrap_error(
            exc,
            message="Unable to create interpreter context",
            error_type=InitializationError,
        ) from exc

    context.publish(REQUIRE_NAME, context.require)
    return context
