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

"""Jinja2-based expression engine with named helpers and partials.

Helpers are plain callables, usable both as functions and as filters::

    {{ shout(title) }}  or  {{ title | shout }}

Partials are named template strings pulled in with ``{% include %}``::

    {% include "header" %}

Partials are looked up when a template renders, so a partial registered
after a template was compiled is still found.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from jinja2 import BaseLoader, ChainableUndefined, Environment, TemplateNotFound

logger = logging.getLogger(__name__)

RenderFunction = Callable[[Mapping[str, Any]], str]


def _blank_none(value: Any) -> Any:
    """Print ``None`` (YAML ``null``) as nothing, like a missing value."""
    return "" if value is None else value


class _PartialLoader(BaseLoader):
    """Jinja2 loader that serves partials from an in-memory mapping."""

    def __init__(self) -> None:
        self.partials: dict[str, str] = {}

    def get_source(
        self, environment: Environment, template: str,
    ) -> tuple[str, str | None, Callable[[], bool]]:
        source = self.partials.get(template)
        if source is None:
            raise TemplateNotFound(template)
        # Re-registering a name under different content invalidates Jinja's cache
        return source, None, lambda: self.partials.get(template) == source

    def list_templates(self) -> list[str]:
        return sorted(self.partials)


class TemplateEngine:
    """Compile template strings against a private helper/partial registry.

    Each instance owns its own :class:`jinja2.Environment`, so two engines
    never see each other's helpers or partials.
    """

    def __init__(self) -> None:
        self._loader = _PartialLoader()
        self._env = Environment(
            loader=self._loader,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
            autoescape=False,  # Output is whatever text the templates produce
            finalize=_blank_none,
        )
        self._helpers: dict[str, Callable[..., Any]] = {}

    # --- Compilation --------------------------------------------------------

    def compile(self, source: str, known_helpers: Iterable[str] | None = None) -> RenderFunction:
        """Compile *source* and return a function of the render context.

        Helpers named in *known_helpers* are bound into the template's own
        globals at compile time; any other helper is resolved at render time.
        """
        bound = {
            name: self._helpers[name]
            for name in (known_helpers or ())
            if name in self._helpers
        }
        template = self._env.from_string(source, globals=bound)

        def render(context: Mapping[str, Any]) -> str:
            return template.render(dict(context))

        return render

    # --- Helpers ------------------------------------------------------------

    def register_helper(self, name: str, fn: Callable[..., Any]) -> None:
        if not callable(fn):
            raise TypeError(f"Helper {name!r} is not callable")
        self._helpers[name] = fn
        self._env.globals[name] = fn
        self._env.filters[name] = fn
        logger.debug("Registered helper %s", name)

    def unregister_helper(self, name: str) -> None:
        self._helpers.pop(name, None)
        self._env.globals.pop(name, None)
        self._env.filters.pop(name, None)

    def has_helper(self, name: str) -> bool:
        return name in self._helpers

    def helper_names(self) -> list[str]:
        return list(self._helpers)

    # --- Partials -----------------------------------------------------------

    def register_partial(self, name: str, content: str) -> None:
        self._loader.partials[name] = str(content)
        logger.debug("Registered partial %s", name)

    def unregister_partial(self, name: str) -> None:
        self._loader.partials.pop(name, None)

    def has_partial(self, name: str) -> bool:
        return name in self._loader.partials

    def partial_names(self) -> list[str]:
        return self._loader.list_templates()
