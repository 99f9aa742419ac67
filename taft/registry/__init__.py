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

"""Helper, partial and layout registries."""

from taft.registry.helpers import (
    FromFactoryFunction,
    FromMapping,
    FromRegistrarFunction,
    HelperRegistry,
    HelperSource,
    probe_helper_source,
)
from taft.registry.layouts import LayoutRegistry
from taft.registry.partials import BODY_PARTIAL, register_partials

__all__ = [
    "BODY_PARTIAL",
    "FromFactoryFunction",
    "FromMapping",
    "FromRegistrarFunction",
    "HelperRegistry",
    "HelperSource",
    "LayoutRegistry",
    "probe_helper_source",
    "register_partials",
]
