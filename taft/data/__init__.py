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

"""Data sources, decoding and the global data store."""

from taft.data.decoders import (
    ParsedDocument,
    decode_data,
    parse_front_matter,
    read_data_file,
    read_template_file,
    sniff_format,
)
from taft.data.merge import deep_merge, snapshot
from taft.data.sources import DataSource, expand_paths, resolve_sources
from taft.data.store import DataStore

__all__ = [
    "DataSource",
    "DataStore",
    "ParsedDocument",
    "decode_data",
    "deep_merge",
    "expand_paths",
    "parse_front_matter",
    "read_data_file",
    "read_template_file",
    "resolve_sources",
    "sniff_format",
    "snapshot",
]
