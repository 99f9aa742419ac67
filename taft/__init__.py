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

"""taft: render front-matter templates through chains of layouts.

Usage::

    from taft import Taft

    engine = Taft(
        data=["site.yaml"],
        partials=["partials/*.hbs"],
        layouts=["layouts/*.hbs"],
    )
    result = engine.build("pages/index.hbs", {"title": "Home"})
    print(result.unwrap().body)
"""

__version__ = "0.6.0"

from taft.composer import Taft, render
from taft.config import TaftConfig, configure_logging
from taft.exceptions import (
    DecodeError,
    HelperRegistrationError,
    LayoutCycleError,
    LayoutRenderError,
    LayoutResolutionError,
    TaftError,
    TemplateRenderError,
)
from taft.models import BuildResult, Content, Failed, Rendered, Skipped

__all__ = [
    "BuildResult",
    "Content",
    "DecodeError",
    "Failed",
    "HelperRegistrationError",
    "LayoutCycleError",
    "LayoutRenderError",
    "LayoutResolutionError",
    "Rendered",
    "Skipped",
    "Taft",
    "TaftConfig",
    "TaftError",
    "TemplateRenderError",
    "configure_logging",
    "render",
]
