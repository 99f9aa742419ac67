# taft — template composition for front-matter documents
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Helper registration.

A helper entry is one of:

* a mapping of ``name -> callable``
* a Python file path (``helpers/text.py``) or glob of such files
* a module name (``sitehelpers``, ``mypkg.helpers``), looked up in the
  working directory first, then imported
* a module object or a callable

Modules and callables come in three shapes, told apart by probing:

``register(engine, options)``
    A registrar that calls ``engine.register_helper`` itself.
``helpers()``
    A factory returning a mapping of helpers.
``helpers = {...}``
    A plain mapping.

A module exports its shape through a ``register`` attribute, else a
``helpers`` attribute, else its public functions.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Union

from taft.data.sources import expand_paths, is_glob
from taft.exceptions import HelperRegistrationError
from taft.templates import TemplateEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helper source variants
# ---------------------------------------------------------------------------


@dataclass
class FromMapping:
    """Helpers given directly as ``name -> callable``."""

    helpers: Mapping[str, Any]
    label: str = "<mapping>"


@dataclass
class FromRegistrarFunction:
    """A registrar that already registered *names* on the engine."""

    fn: Callable[..., Any]
    names: list[str] = field(default_factory=list)
    label: str = "<registrar>"


@dataclass
class FromFactoryFunction:
    """A factory whose call produced *helpers*."""

    fn: Callable[..., Any]
    helpers: Mapping[str, Any] = field(default_factory=dict)
    label: str = "<factory>"


HelperSource = Union[FromMapping, FromRegistrarFunction, FromFactoryFunction]


def _accepts_engine(fn: Callable[..., Any], engine: TemplateEngine, options: Mapping[str, Any]) -> bool:
    try:
        inspect.signature(fn).bind(engine, options)
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (some builtins); assume registrar form
        return True
    return True


def probe_helper_source(
    export: Any,
    engine: TemplateEngine,
    options: Mapping[str, Any],
    label: str,
) -> HelperSource:
    """Classify *export* by trying the shapes in order.

    A callable is first invoked as ``export(engine, options)``; if that
    registered new helpers it is a registrar, otherwise its return value
    must be a mapping and it is treated as a factory.

    Raises :class:`HelperRegistrationError` for any other shape.
    """
    if isinstance(export, Mapping):
        return FromMapping(export, label)
    if not callable(export):
        raise HelperRegistrationError(label, f"unsupported helper export {type(export).__name__}")

    before = set(engine.helper_names())
    try:
        if _accepts_engine(export, engine, options):
            result = export(engine, options)
        else:
            result = export()
    except Exception as exc:
        raise HelperRegistrationError(label, str(exc)) from exc

    added = [name for name in engine.helper_names() if name not in before]
    if added:
        return FromRegistrarFunction(export, added, label)
    if isinstance(result, Mapping):
        return FromFactoryFunction(export, result, label)
    raise HelperRegistrationError(label, "callable neither registered helpers nor returned a mapping")


# ---------------------------------------------------------------------------
# Module loading
# ---------------------------------------------------------------------------


def _load_module_from_path(path: Path) -> ModuleType:
    if path.name == "__init__.py":
        name = f"taft_helpers_{path.parent.name}"
        spec = importlib.util.spec_from_file_location(
            name, path, submodule_search_locations=[str(path.parent)]
        )
    else:
        name = f"taft_helpers_{path.stem}"
        spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load helpers from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def _module_export(module: ModuleType) -> Any:
    """Pick the helper export of *module*."""
    for attr in ("register", "helpers"):
        export = getattr(module, attr, None)
        if export is not None:
            return export

    names = getattr(module, "__all__", None)
    if names is None:
        names = [
            name for name, value in vars(module).items()
            if not name.startswith("_")
            and inspect.isfunction(value)
            and value.__module__ == module.__name__
        ]
    return {name: getattr(module, name) for name in names}


def _looks_like_path(ref: str) -> bool:
    return ref.endswith(".py") or "/" in ref or "\\" in ref or is_glob(ref)


def _local_module_path(ref: str) -> Path | None:
    """Find a bare module name as a file or package in the working directory."""
    cwd = Path.cwd()
    for candidate in (cwd / f"{ref}.py", cwd / ref / "__init__.py"):
        if candidate.is_file():
            return candidate
    return None


def _resolve_exports(entry: Any) -> list[tuple[str, Any]]:
    """Expand one helper entry into ``(label, export)`` pairs."""
    if isinstance(entry, Mapping):
        return [("<mapping>", entry)]
    if isinstance(entry, ModuleType):
        return [(entry.__name__, _module_export(entry))]
    if callable(entry):
        return [(getattr(entry, "__name__", repr(entry)), entry)]

    ref = str(entry)
    if isinstance(entry, Path) or _looks_like_path(ref):
        pairs = []
        for path in expand_paths([ref]):
            if path.is_dir():
                continue
            try:
                pairs.append((str(path), _module_export(_load_module_from_path(path))))
            except Exception as exc:
                raise HelperRegistrationError(str(path), str(exc)) from exc
        return pairs

    local = _local_module_path(ref)
    if local is not None:
        try:
            return [(ref, _module_export(_load_module_from_path(local)))]
        except Exception as exc:
            raise HelperRegistrationError(ref, str(exc)) from exc

    try:
        module = importlib.import_module(ref)
    except ImportError as exc:
        raise HelperRegistrationError(ref, str(exc)) from exc
    return [(ref, _module_export(module))]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class HelperRegistry:
    """Registers helpers on a :class:`TemplateEngine` and tracks known names.

    Args:
        engine: Engine that receives the helpers.
        options: Passed to registrar functions as their second argument.
    """

    def __init__(self, engine: TemplateEngine, options: Mapping[str, Any] | None = None) -> None:
        self.engine = engine
        self.options: dict[str, Any] = dict(options or {})
        self._known: list[str] = []

    @property
    def known(self) -> list[str]:
        """Names registered through this registry, in registration order."""
        return list(self._known)

    def register(self, entries: Iterable[Any] | Any) -> list[str]:
        """Register every entry; returns the names newly registered.

        A broken entry is logged and skipped without affecting the rest.
        """
        if entries is None:
            return []
        if isinstance(entries, (Mapping, str, Path, ModuleType)) or callable(entries):
            entries = [entries]

        registered: list[str] = []
        for entry in entries:
            try:
                exports = _resolve_exports(entry)
            except HelperRegistrationError as exc:
                logger.error("%s", exc)
                continue
            for label, export in exports:
                try:
                    source = probe_helper_source(export, self.engine, self.options, label)
                except HelperRegistrationError as exc:
                    logger.error("%s", exc)
                    continue
                registered.extend(self._apply(source))

        for name in registered:
            if name not in self._known:
                self._known.append(name)
        return registered

    def _apply(self, source: HelperSource) -> list[str]:
        if isinstance(source, FromRegistrarFunction):
            logger.debug("Registrar %s added %d helpers", source.label, len(source.names))
            return list(source.names)
        if isinstance(source, FromFactoryFunction):
            return self._register_mapping(source.helpers, source.label)
        if isinstance(source, FromMapping):
            return self._register_mapping(source.helpers, source.label)
        raise TypeError(f"unknown helper source {source!r}")

    def _register_mapping(self, helpers: Mapping[str, Any], label: str) -> list[str]:
        names = []
        for name, fn in helpers.items():
            if not callable(fn):
                logger.error("%s", HelperRegistrationError(name, f"value from {label} is not callable"))
                continue
            self.engine.register_helper(name, fn)
            names.append(name)
        return names
