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

"""Layout registry.

Layouts are registered by path and named after the file's basename
without extension.  They are compiled lazily on first lookup and the
result is cached until the name is registered again.

Default layout rules:

* registering the very first layout makes it the default
* registering further layouts never changes an existing default
* :meth:`LayoutRegistry.set_default` only accepts registered names
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from taft.data.sources import expand_paths
from taft.exceptions import LayoutResolutionError

logger = logging.getLogger(__name__)


@dataclass
class _LayoutEntry:
    path: Path
    compiled: bool = False
    template: Any = None


class LayoutRegistry:
    """Name -> layout template, compiled once on demand.

    Args:
        compile_layout: Turns a layout path into a render template, or
            ``None`` when the layout is unpublished.
    """

    def __init__(self, compile_layout: Callable[[Path], Any]) -> None:
        self._compile_layout = compile_layout
        self._entries: dict[str, _LayoutEntry] = {}
        self._default: str | None = None
        self._lock = threading.RLock()

    # --- Registration -------------------------------------------------------

    def register(self, entries: Iterable[str | Path] | str | Path | None) -> list[str]:
        """Register layout files; returns their names."""
        if entries is None:
            return []
        if isinstance(entries, (str, Path)):
            entries = [entries]

        names: list[str] = []
        with self._lock:
            for path in expand_paths(entries):
                if path.is_dir():
                    continue
                name = path.stem
                previous = self._entries.get(name)
                if previous is not None and previous.compiled:
                    logger.debug("Layout %s re-registered, dropping compiled template", name)
                self._entries[name] = _LayoutEntry(path=path)
                names.append(name)

            if self._default is None and len(self._entries) == 1:
                self._default = next(iter(self._entries))
                logger.debug("Default layout: %s", self._default)
        return names

    def invalidate(self) -> None:
        """Drop every compiled template so layouts pick up new data and helpers."""
        with self._lock:
            for entry in self._entries.values():
                entry.compiled = False
                entry.template = None

    @property
    def default(self) -> str | None:
        return self._default

    def set_default(self, name: str | None) -> bool:
        """Mark *name* as the default layout; ``None`` clears it.

        An unregistered name is ignored with a warning.
        """
        with self._lock:
            if name is None:
                self._default = None
                return True
            key = self._key(name)
            if key is None:
                logger.warning("Cannot set default layout %r: not registered", name)
                return False
            self._default = key
            return True

    # --- Lookup -------------------------------------------------------------

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def path(self, name: str) -> Path | None:
        key = self._key(name)
        return self._entries[key].path if key is not None else None

    def get(self, name: str) -> Any:
        """Return the compiled layout, or ``None`` if unknown or unpublished."""
        key = self._key(name)
        if key is None:
            logger.warning("Layout %r not found", name)
            return None

        with self._lock:
            entry = self._entries[key]
            if not entry.compiled:
                entry.template = self._compile_layout(entry.path)
                entry.compiled = True
                if entry.template is None:
                    logger.info("Layout %s is unpublished, ignoring it", key)
            return entry.template

    def require(self, name: str) -> Any:
        """Like :meth:`get`, but raises :class:`LayoutResolutionError`."""
        if self._key(name) is None:
            raise LayoutResolutionError(name)
        return self.get(name)

    def _key(self, name: str) -> str | None:
        if name in self._entries:
            return name
        stem = Path(str(name)).stem
        return stem if stem in self._entries else None
