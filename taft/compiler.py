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

"""Template compiler: one source file -> reusable render callable.

The data a template renders with is layered, lowest precedence first:

1. global data from the :class:`~taft.data.DataStore`
2. the file's own front matter
3. data passed at call time

Layouts invert the last two (``prefer_global=True``) so that a layout's
own front matter beats whatever it inherits from the page it wraps.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from taft.data.decoders import read_template_file
from taft.data.merge import deep_merge
from taft.data.store import DataStore
from taft.exceptions import DecodeError, TemplateRenderError
from taft.models import Content
from taft.registry.helpers import HelperRegistry
from taft.registry.layouts import LayoutRegistry
from taft.templates import RenderFunction, TemplateEngine

logger = logging.getLogger(__name__)

ApplyLayout = Callable[[Any, Content], Content]


def is_unpublished(data: Mapping[str, Any]) -> bool:
    """True when front matter explicitly sets ``published`` to false or 0."""
    value = data.get("published")
    return value is not None and value in (False, 0)


def suppresses_layout(data: Mapping[str, Any]) -> bool:
    """True when front matter explicitly sets ``layout`` to false or 0."""
    value = data.get("layout")
    return value is not None and value in (False, 0)


class Template:
    """A compiled source file, callable as ``template(data, prefer_global)``.

    The body is compiled against the engine on first render and reused
    afterwards.
    """

    def __init__(
        self,
        path: Path,
        body: str,
        base_data: dict[str, Any],
        *,
        engine: TemplateEngine,
        known_helpers: list[str],
        apply_layout: ApplyLayout | None,
        is_layout: bool = False,
    ) -> None:
        self.path = path
        self.body = body
        self.base_data = base_data
        self.is_layout = is_layout
        self._engine = engine
        self._known_helpers = known_helpers
        self._apply_layout = apply_layout
        self._render: RenderFunction | None = None

    @property
    def name(self) -> str:
        return self.path.stem

    def __call__(self, data: Mapping[str, Any] | None = None, prefer_global: bool = False) -> Content:
        if prefer_global:
            merged = deep_merge(data, self.base_data)
        else:
            merged = deep_merge(self.base_data, data)

        if self._names_self(merged.get("layout")):
            merged["layout"] = None

        try:
            if self._render is None:
                self._render = self._engine.compile(self.body, known_helpers=self._known_helpers)
            body = self._render(merged)
        except Exception as exc:
            raise TemplateRenderError(self.path, str(exc)) from exc

        content = Content(body=body, data=merged)
        if self.is_layout or self._apply_layout is None:
            return content
        return self._apply_layout(merged.get("layout"), content)

    def _names_self(self, layout: Any) -> bool:
        """True when *layout* refers to this file, with or without extension or directory."""
        if not isinstance(layout, (str, Path)) or not str(layout):
            return False
        return Path(str(layout)).stem == self.path.stem

    def __repr__(self) -> str:
        kind = "layout" if self.is_layout else "page"
        return f"<Template {kind} {self.path}>"


class TemplateCompiler:
    """Builds :class:`Template` objects bound to shared engine state."""

    def __init__(
        self,
        engine: TemplateEngine,
        store: DataStore,
        helpers: HelperRegistry,
        layouts: LayoutRegistry,
        apply_layout: ApplyLayout | None = None,
    ) -> None:
        self.engine = engine
        self.store = store
        self.helpers = helpers
        self.layouts = layouts
        self.apply_layout = apply_layout

    def compile(self, path: str | Path, *, is_layout: bool = False) -> Template | None:
        """Compile *path*, or return ``None`` if it is unpublished.

        Raises :class:`TemplateRenderError` if the file cannot be decoded.
        ``IsADirectoryError`` propagates untouched.
        """
        path = Path(path)
        try:
            parsed = read_template_file(path)
        except DecodeError as exc:
            raise TemplateRenderError(path, exc.message) from exc

        front_matter = parsed.data
        if is_unpublished(front_matter):
            logger.info("Skipping unpublished %s", path)
            return None

        if not suppresses_layout(front_matter) and front_matter.get("layout") is None:
            default = self.layouts.default
            if default is not None and not is_layout:
                front_matter["layout"] = default

        return Template(
            path,
            parsed.content.lstrip(),
            deep_merge(self.store.snapshot(), front_matter),
            engine=self.engine,
            known_helpers=self.helpers.known,
            apply_layout=self.apply_layout,
            is_layout=is_layout,
        )
