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

"""Render results.

A build produces exactly one of three outcomes::

    result = engine.build("page.hbs")
    if isinstance(result, Rendered):
        print(result.content.body)
    elif isinstance(result, Skipped):
        ...  # published: false
    else:
        raise result.error
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union


@dataclass
class Content:
    """Rendered text plus the context it was rendered with."""

    body: str
    data: dict[str, Any] = field(default_factory=dict)
    source: Path | None = None

    @property
    def layout(self) -> Any:
        return self.data.get("layout")

    def __str__(self) -> str:
        return self.body


@dataclass
class Rendered:
    """The file rendered successfully."""

    content: Content

    @property
    def source(self) -> Path | None:
        return self.content.source

    def unwrap(self) -> Content:
        return self.content


@dataclass
class Skipped:
    """The file declared ``published: false`` and produced no output."""

    source: Path | None = None

    def unwrap(self) -> None:
        return None


@dataclass
class Failed:
    """The file could not be rendered."""

    source: Path | None
    error: Exception

    def unwrap(self) -> None:
        raise self.error


BuildResult = Union[Rendered, Skipped, Failed]
