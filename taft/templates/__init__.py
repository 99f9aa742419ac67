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

"""Jinja2 expression engine used to render template bodies.

Usage::

    from taft.templates import TemplateEngine

    engine = TemplateEngine()
    engine.register_helper("shout", str.upper)
    engine.register_partial("greeting", "Hello {{ name | shout }}")
    render = engine.compile('{% include "greeting" %}!')
    render({"name": "world"})  # "Hello WORLD!"
"""

from taft.templates.engine import RenderFunction, TemplateEngine

__all__ = ["RenderFunction", "TemplateEngine"]
