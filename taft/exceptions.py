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

"""Exception hierarchy.

Which of these are fatal depends on where they are raised:

* :class:`DecodeError`: skipped with a diagnostic for data sources and
  partials, wrapped into :class:`TemplateRenderError` for template files.
* :class:`HelperRegistrationError`: logged per helper, never fatal.
* :class:`LayoutResolutionError`: only raised by explicit lookups; the
  composition path falls back to "no layout".
* :class:`LayoutRenderError` / :class:`LayoutCycleError`: fatal for the
  file being built.
"""

from __future__ import annotations

from pathlib import Path


class TaftError(Exception):
    """Base class for all taft errors."""


class DecodeError(TaftError):
    """A structured-data source could not be read or parsed."""

    def __init__(self, path: str | Path | None, message: str) -> None:
        self.path = str(path) if path is not None else None
        self.message = message
        where = self.path or "<data>"
        super().__init__(f"Could not decode {where}: {message}")


class HelperRegistrationError(TaftError):
    """A helper source has no usable shape."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        self.message = message
        super().__init__(f"Could not register helper {name!r}: {message}")


class LayoutResolutionError(TaftError):
    """A layout name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown layout {name!r}")


class TemplateRenderError(TaftError):
    """Decoding or rendering a template file failed."""

    def __init__(self, path: str | Path | None, message: str) -> None:
        self.path = str(path) if path is not None else None
        self.message = message
        super().__init__(f"Error rendering {self.path or '<template>'}: {message}")


class LayoutRenderError(TaftError):
    """Applying a layout to rendered content failed."""

    def __init__(self, layout: str, message: str) -> None:
        self.layout = layout
        self.message = message
        super().__init__(f"Error in layout {layout!r}: {message}")


class LayoutCycleError(LayoutRenderError):
    """The same layout was requested twice while building one file."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__(chain[-1], "layout cycle " + " -> ".join(chain))
