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

"""Global data shared by every template rendered by one engine."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from taft.data.merge import merge_into, snapshot
from taft.data.sources import SourceSpec, resolve_sources
from taft.exceptions import DecodeError

logger = logging.getLogger(__name__)


class DataStore:
    """Mapping built by merging data sources in call order.

    A source that fails to decode is logged and skipped as a whole; it
    never leaves half its keys behind.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add_data(self, sources: Iterable[SourceSpec] | SourceSpec | None) -> list[str]:
        """Merge *sources* into the store.

        Returns the labels of the sources that were applied.
        """
        applied: list[str] = []
        for source in resolve_sources(sources):
            try:
                decoded = source.load()
            except DecodeError as exc:
                logger.error("Skipping data source: %s", exc)
                continue
            except IsADirectoryError:
                logger.debug("Skipping directory %s", source.label)
                continue

            with self._lock:
                merge_into(self._data, decoded)
            applied.append(source.label)
            logger.debug("Merged data from %s (%d keys)", source.label, len(decoded))
        return applied

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of the current data that is safe to mutate."""
        with self._lock:
            return snapshot(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
