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

"""Structured-data decoding for front matter and data files.

Supported formats:

* YAML front matter: a ``---`` delimited block at the top of a template
* YAML (``.yaml``, ``.yml``)
* JSON (``.json``)
* INI (``.ini``): sections become nested mappings
* templates (``.md``, ``.hbs``, ``.handlebars``, ``.html``): their front matter

When the extension says nothing useful the content is sniffed: a leading
``---`` means front matter, text wrapped in ``{ }`` means JSON, anything
else is tried as YAML.
"""

from __future__ import annotations

import configparser
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from taft.exceptions import DecodeError

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)

_EXTENSION_FORMATS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".ini": "ini",
    ".md": "front-matter",
    ".hbs": "front-matter",
    ".handlebars": "front-matter",
    ".html": "front-matter",
}

# Keys that appear before the first [section] of an INI file
_INI_ROOT = "__root__"


@dataclass
class ParsedDocument:
    """A template split into its front matter and body."""

    data: dict[str, Any] = field(default_factory=dict)
    content: str = ""


def parse_front_matter(text: str, path: str | Path | None = None) -> ParsedDocument:
    """Split *text* into front-matter data and body.

    Text without a front-matter block is returned whole with empty data.
    Raises :class:`DecodeError` for malformed YAML or a non-mapping block.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return ParsedDocument(data={}, content=text)
    data = _load_yaml(match.group(1), path)
    return ParsedDocument(data=data, content=text[match.end():])


def sniff_format(text: str) -> str:
    """Guess the data format of *text* from its first characters."""
    stripped = text.strip()
    if stripped.startswith("---"):
        return "front-matter"
    if stripped.startswith("{") and stripped.endswith("}"):
        return "json"
    return "yaml"


def format_for_path(path: str | Path) -> str | None:
    """Return the format implied by the extension of *path*, if any."""
    return _EXTENSION_FORMATS.get(Path(path).suffix.lower())


def decode_data(text: str, fmt: str | None = None, path: str | Path | None = None) -> dict[str, Any]:
    """Decode *text* to a mapping.

    *fmt* is one of ``"yaml"``, ``"json"``, ``"ini"`` or ``"front-matter"``;
    when omitted the format is sniffed from the content.
    """
    fmt = fmt or sniff_format(text)
    if fmt == "front-matter":
        text = text.lstrip()
        if FRONT_MATTER_PATTERN.match(text):
            return parse_front_matter(text, path).data
        return _load_yaml(text, path)
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(path, f"invalid JSON: {exc}") from exc
        return _require_mapping(data, path)
    if fmt == "ini":
        return _load_ini(text, path)
    if fmt == "yaml":
        return _load_yaml(text, path)
    raise DecodeError(path, f"unsupported data format {fmt!r}")


def read_text(path: str | Path) -> str:
    """Read *path* as UTF-8.

    ``IsADirectoryError`` is left to the caller so directories can be
    skipped quietly; other I/O failures become :class:`DecodeError`.
    """
    path = Path(path)
    if path.is_dir():
        raise IsADirectoryError(f"Is a directory: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except IsADirectoryError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise DecodeError(path, str(exc)) from exc


def read_data_file(path: str | Path) -> dict[str, Any]:
    """Read and decode a data file, choosing the format by extension."""
    text = read_text(path)
    return decode_data(text, format_for_path(path), path)


def read_template_file(path: str | Path) -> ParsedDocument:
    """Read a template file and split off its front matter."""
    return parse_front_matter(read_text(path), path)


# ---------------------------------------------------------------------------
# Format back-ends
# ---------------------------------------------------------------------------


def _load_yaml(text: str, path: str | Path | None) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DecodeError(path, f"invalid YAML: {exc}") from exc
    if data is None:
        return {}
    return _require_mapping(data, path)


def _load_ini(text: str, path: str | Path | None) -> dict[str, Any]:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep key case
    try:
        parser.read_string(f"[{_INI_ROOT}]\n{text}")
    except configparser.Error as exc:
        raise DecodeError(path, f"invalid INI: {exc}") from exc

    data: dict[str, Any] = {}
    for section in parser.sections():
        values = dict(parser.items(section))
        if section == _INI_ROOT:
            data.update(values)
        else:
            data[section] = values
    return data


def _require_mapping(data: Any, path: str | Path | None) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(path, f"expected a mapping, got {type(data).__name__}")
    return data
