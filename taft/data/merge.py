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

"""Key-wise merging of nested mappings."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def deep_merge(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge *layers* left to right into a new dict.

    Later layers win on conflicting keys.  When both sides hold a mapping
    the two are merged recursively rather than replaced; every other value
    (lists included) is replaced wholesale.  Inputs are never mutated and
    the result shares no mutable state with them.
    """
    result: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merge_into(result, layer)
    return result


def merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Merge *layer* into *target* in place, copying values."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge(value)
        else:
            target[key] = copy.deepcopy(value)


def snapshot(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *data* that callers may mutate freely."""
    return deep_merge(data)
