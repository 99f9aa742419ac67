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

"""Composition engine: render a page and thread it through its layouts.

Building one file walks this chain::

    compile page -> render page -> layout? -> render layout -> layout? -> ...

A layout sees the content it wraps as the ``body`` partial::

    <html><body>{% include "body" %}</body></html>

and the page's own data, before any layout merged into it, under
``page``.  Layouts may name their own layout; a chain that revisits a
layout fails with :class:`~taft.exceptions.LayoutCycleError`.

Every :class:`Taft` instance owns its engine, data and registries, so
independent instances never interfere.  Within one instance the
register/render/unregister sequence around ``body`` is serialised.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from taft.compiler import Template, TemplateCompiler
from taft.data.merge import snapshot
from taft.data.sources import SourceSpec, expand_paths
from taft.data.store import DataStore
from taft.exceptions import LayoutCycleError, LayoutRenderError, TaftError
from taft.models import BuildResult, Content, Failed, Rendered, Skipped
from taft.registry.helpers import HelperRegistry
from taft.registry.layouts import LayoutRegistry
from taft.registry.partials import BODY_PARTIAL, register_partials
from taft.templates import TemplateEngine

logger = logging.getLogger(__name__)


class Taft:
    """Template composition context.

    Args:
        data: Global data sources (mappings, data files, globs).
        helpers: Helper mappings, modules or helper files.
        partials: Partial mappings or partial files.
        layouts: Layout files or globs.
        default_layout: Name of the layout applied to pages without one.
        options: Passed to helper registrar functions.
    """

    def __init__(
        self,
        *,
        data: Iterable[SourceSpec] | SourceSpec | None = None,
        helpers: Iterable[Any] | Any = None,
        partials: Iterable[Any] | Any = None,
        layouts: Iterable[str | Path] | str | Path | None = None,
        default_layout: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self.engine = TemplateEngine()
        self.store = DataStore()
        self.helper_registry = HelperRegistry(self.engine, options)
        self.layout_registry = LayoutRegistry(self._compile_layout)
        self.compiler = TemplateCompiler(
            self.engine,
            self.store,
            self.helper_registry,
            self.layout_registry,
            apply_layout=self._apply_page_layout,
        )
        self._lock = threading.RLock()

        self.set_data(data)
        self.set_helpers(helpers)
        self.set_partials(partials)
        self.set_layouts(layouts)
        if default_layout:
            self.set_default_layout(default_layout)

    @classmethod
    def from_config(cls, config: Any) -> Taft:
        """Build an engine from a :class:`~taft.config.TaftConfig`."""
        return cls(
            data=config.data,
            helpers=config.helpers,
            partials=config.partials,
            layouts=config.layouts,
            default_layout=config.default_layout,
            options=config.options,
        )

    # --- Configuration ------------------------------------------------------

    def set_data(self, sources: Iterable[SourceSpec] | SourceSpec | None) -> list[str]:
        """Merge data sources into the global data.  Later sources win."""
        if sources is None:
            return []
        applied = self.store.add_data(sources)
        if applied:
            self.layout_registry.invalidate()
        return applied

    def set_helpers(self, sources: Iterable[Any] | Any) -> list[str]:
        names = self.helper_registry.register(sources)
        if names:
            logger.info("Registered helpers: %s", ", ".join(names))
            self.layout_registry.invalidate()
        return names

    def set_partials(self, sources: Iterable[Any] | Any) -> list[str]:
        names = register_partials(self.engine, sources)
        if names:
            logger.info("Registered partials: %s", ", ".join(names))
        return names

    def set_layouts(self, sources: Iterable[str | Path] | str | Path | None) -> list[str]:
        names = self.layout_registry.register(sources)
        if names:
            logger.info("Registered layouts: %s", ", ".join(names))
        return names

    def set_default_layout(self, name: str | None) -> bool:
        return self.layout_registry.set_default(name)

    @property
    def default_layout(self) -> str | None:
        return self.layout_registry.default

    @property
    def data(self) -> dict[str, Any]:
        return self.store.snapshot()

    @property
    def helpers(self) -> list[str]:
        return self.helper_registry.known

    @property
    def partials(self) -> list[str]:
        return self.engine.partial_names()

    @property
    def layouts(self) -> list[str]:
        return self.layout_registry.names()

    # --- Building -----------------------------------------------------------

    def template(self, path: str | Path) -> Template | None:
        """Compile a page without rendering it; ``None`` if unpublished."""
        return self.compiler.compile(path)

    def build(self, file: str | Path, data: Mapping[str, Any] | None = None) -> BuildResult:
        """Render *file* through its layouts.

        Returns :class:`Rendered`, :class:`Skipped` for unpublished files
        and directories, or :class:`Failed` carrying the error.
        """
        path = Path(file)
        try:
            template = self.compiler.compile(path)
            if template is None:
                return Skipped(path)
            content = template(data)
        except IsADirectoryError:
            logger.debug("Skipping directory %s", path)
            return Skipped(path)
        except TaftError as exc:
            logger.error("%s", exc)
            return Failed(path, exc)

        content.source = path
        return Rendered(content)

    def build_many(
        self,
        files: Iterable[str | Path],
        data: Mapping[str, Any] | None = None,
    ) -> list[BuildResult]:
        """Build every file; globs are expanded in order."""
        return [self.build(path, data) for path in expand_paths(files)]

    # --- Layout application -------------------------------------------------

    def apply_layout(
        self,
        layout: Any,
        content: Content,
        *,
        is_layout: bool = False,
        chain: list[str] | None = None,
    ) -> Content:
        """Wrap *content* in *layout*, then in that layout's layout, and so on.

        A missing or unpublished layout leaves *content* unchanged.
        """
        if not layout:
            return content

        name = Path(str(layout)).stem
        chain = list(chain or [])
        if name in chain:
            raise LayoutCycleError(chain + [name])

        try:
            template = self.layout_registry.get(str(layout))
        except TaftError as exc:
            raise LayoutRenderError(name, str(exc)) from exc
        if template is None:
            return content

        data = dict(content.data)
        if not is_layout:
            data["page"] = snapshot(content.data)

        with self._lock, self._body_partial(content.body):
            try:
                wrapped = template(data, prefer_global=True)
            except TaftError as exc:
                raise LayoutRenderError(name, str(exc)) from exc

        wrapped.source = content.source
        return self.apply_layout(wrapped.layout, wrapped, is_layout=True, chain=chain + [name])

    def _apply_page_layout(self, layout: Any, content: Content) -> Content:
        return self.apply_layout(layout, content, is_layout=False)

    def _compile_layout(self, path: Path) -> Template | None:
        return self.compiler.compile(path, is_layout=True)

    @contextmanager
    def _body_partial(self, body: str) -> Generator[None, None, None]:
        """Expose *body* as the ``body`` partial for the duration of the block."""
        self.engine.register_partial(BODY_PARTIAL, body)
        try:
            yield
        finally:
            self.engine.unregister_partial(BODY_PARTIAL)


def render(file: str | Path, data: Mapping[str, Any] | None = None, **options: Any) -> str | None:
    """Build *file* with a throwaway :class:`Taft` and return its text.

    Returns ``None`` for unpublished files; raises on failure.
    """
    content = Taft(**options).build(file, data).unwrap()
    return content.body if content is not None else None
