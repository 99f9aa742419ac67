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

"""Build configuration and logging setup.

A config file is any data file taft can decode::

    # taft.yaml
    data: [site.yaml, "authors=data/authors.json"]
    helpers: [helpers/text.py]
    partials: ["partials/*.hbs"]
    layouts: ["layouts/*.hbs"]
    defaultLayout: base
    destDir: _site
    ext: .html
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from taft.data.decoders import read_data_file

DEFAULT_EXT = ".html"

_ALIASES = {
    "defaultLayout": "default_layout",
    "destDir": "dest_dir",
    "dest": "dest_dir",
    "layout": "layouts",
    "helper": "helpers",
    "partial": "partials",
}


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass
class TaftConfig:
    """Options for one build run."""

    data: list[Any] = field(default_factory=list)
    helpers: list[Any] = field(default_factory=list)
    partials: list[Any] = field(default_factory=list)
    layouts: list[Any] = field(default_factory=list)
    default_layout: str | None = None
    dest_dir: Path | None = None
    ext: str = DEFAULT_EXT
    verbose: bool = False
    silent: bool = False
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaftConfig:
        values = {_ALIASES.get(key, key): value for key, value in raw.items()}
        dest_dir = values.get("dest_dir")
        ext = values.get("ext") or DEFAULT_EXT
        return cls(
            data=_as_list(values.get("data")),
            helpers=_as_list(values.get("helpers")),
            partials=_as_list(values.get("partials")),
            layouts=_as_list(values.get("layouts")),
            default_layout=values.get("default_layout"),
            dest_dir=Path(dest_dir) if dest_dir else None,
            ext=ext if ext.startswith(".") else f".{ext}",
            verbose=bool(values.get("verbose", False)),
            silent=bool(values.get("silent", False)),
            options=dict(values.get("options") or {}),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> TaftConfig:
        """Load a config file.  Raises :class:`~taft.exceptions.DecodeError`."""
        return cls.from_dict(read_data_file(path))

    def merge(self, other: TaftConfig) -> TaftConfig:
        """Return a config with *other*'s list entries appended and its scalars winning."""
        return TaftConfig(
            data=self.data + other.data,
            helpers=self.helpers + other.helpers,
            partials=self.partials + other.partials,
            layouts=self.layouts + other.layouts,
            default_layout=other.default_layout or self.default_layout,
            dest_dir=other.dest_dir or self.dest_dir,
            ext=other.ext if other.ext != DEFAULT_EXT else self.ext,
            verbose=self.verbose or other.verbose,
            silent=self.silent or other.silent,
            options={**self.options, **other.options},
        )


def configure_logging(verbose: bool = False, silent: bool = False) -> logging.Logger:
    """Send taft diagnostics to stderr.

    Warnings and errors are shown by default, ``verbose`` adds info and
    debug messages, ``silent`` suppresses everything.
    """
    logger = logging.getLogger("taft")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if silent:
        logger.setLevel(logging.CRITICAL + 1)
        logger.addHandler(logging.NullHandler())
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("taft: %(levelname)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
