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

"""Partial registration.

Partials come from inline mappings (``{"nav": "<nav>...</nav>"}``) or from
files, in which case the name is the file's basename without extension
and any front matter is dropped from the content.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from taft.data.decoders import read_template_file
from taft.data.sources import expand_paths
from taft.exceptions import DecodeError
from taft.templates import TemplateEngine

logger = logging.getLogger(__name__)

# Name under which a layout receives the content it wraps
BODY_PARTIAL = "body"


def register_partials(engine: TemplateEngine, entries: Iterable[Any] | Any) -> list[str]:
    """Register partials on *engine*; returns the names registered."""
    if entries is None:
        return []
    if isinstance(entries, (Mapping, str, Path)):
        entries = [entries]

    registered: list[str] = []
    for entry in entries:
        if isinstance(entry, Mapping):
            for name, content in entry.items():
                if _register(engine, str(name), str(content)):
                    registered.append(str(name))
            continue

        for path in expand_paths([entry]):
            name = path.stem
            try:
                content = read_template_file(path).content
            except IsADirectoryError:
                continue
            except DecodeError as exc:
                logger.error("Could not register partial %s: %s", name, exc)
                continue
            if _register(engine, name, content):
                registered.append(name)
    return registered


def _register(engine: TemplateEngine, name: str, content: str) -> bool:
    if name == BODY_PARTIAL:
        logger.warning("Partial name %r is reserved for layouts, skipping", name)
        return False
    engine.register_partial(name, content)
    return True
