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

"""Expansion of mixed source lists into an ordered sequence.

A source list may contain in-memory mappings, file paths, glob patterns,
``key=path`` namespaced paths and ``-`` for standard input.  Expansion keeps
the caller's order so that later sources win when merged.
"""

from __future__ import annotations

import glob
import logging
import sys
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from taft.data.decoders import decode_data, read_data_file

logger = logging.getLogger(__name__)

STDIN = "-"
_GLOB_CHARS = ("*", "?", "[")

SourceSpec = Union[Mapping[str, Any], str, Path]


@dataclass
class DataSource:
    """One resolved source: either inline data or a path to decode.

    *key* namespaces the decoded mapping under a single top-level key.
    """

    data: Mapping[str, Any] | None = None
    path: Path | None = None
    key: str | None = None

    @property
    def label(self) -> str:
        if self.path is not None:
            return str(self.path)
        return "<stdin>" if self.data is None else "<mapping>"

    def load(self) -> dict[str, Any]:
        """Decode this source.  Raises :class:`~taft.exceptions.DecodeError`."""
        if self.data is not None:
            decoded = dict(self.data)
        elif self.path is None:
            decoded = decode_data(sys.stdin.read(), path="<stdin>")
        else:
            decoded = read_data_file(self.path)
        if self.key:
            return {self.key: decoded}
        return decoded


def is_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in _GLOB_CHARS)


def expand_paths(patterns: Iterable[str | Path]) -> Iterator[Path]:
    """Yield file paths for literal paths and glob patterns, in order.

    A glob that matches nothing is logged and dropped; a literal path is
    yielded even if missing so the caller reports the failure.
    """
    for pattern in patterns:
        pattern = str(pattern)
        if is_glob(pattern):
            matches = sorted(glob.glob(pattern, recursive=True))
            if not matches:
                logger.warning("No files match %s", pattern)
            for match in matches:
                yield Path(match)
        else:
            yield Path(pattern)


def resolve_sources(specs: Iterable[SourceSpec] | SourceSpec | None) -> list[DataSource]:
    """Turn a caller-supplied list of specs into :class:`DataSource` objects."""
    if specs is None:
        return []
    if isinstance(specs, (Mapping, str, Path)):
        specs = [specs]

    sources: list[DataSource] = []
    for spec in specs:
        if isinstance(spec, Mapping):
            sources.append(DataSource(data=spec))
            continue
        key, target = _split_key(str(spec))
        if target == STDIN:
            sources.append(DataSource(key=key))
            continue
        for path in expand_paths([target]):
            sources.append(DataSource(path=path, key=key))
    return sources


def _split_key(spec: str) -> tuple[str | None, str]:
    """Split ``"name=path/to/file"`` into ``("name", "path/to/file")``."""
    key, sep, rest = spec.partition("=")
    if sep and key and rest and "/" not in key and "\\" not in key:
        return key, rest
    return None, spec
