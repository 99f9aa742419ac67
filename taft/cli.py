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

"""Command-line front end.

Usage:
    taft page.hbs                               # render to stdout
    taft -t layouts/base.hbs -d site.yaml *.hbs # with a layout and data
    taft -o _site -e .html pages/*.hbs          # write _site/<name>.html
    taft -c taft.yaml pages/*.hbs               # options from a config file
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from taft import __version__
from taft.composer import Taft
from taft.config import DEFAULT_EXT, TaftConfig, configure_logging
from taft.exceptions import DecodeError
from taft.models import Failed, Rendered, Skipped

typer_app = typer.Typer(add_completion=False)


def _write(content_body: str, source: Path, dest_dir: Path, ext: str) -> Path:
    target = dest_dir / f"{source.stem}{ext}"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content_body, encoding="utf-8")
    return target


@typer_app.command()
def cli(
    files: Optional[List[str]] = typer.Argument(None, help="Template files or globs to build."),
    data: Optional[List[str]] = typer.Option(
        None, "-d", "--data",
        help="Data file, glob, key=file, or '-' for stdin. Repeatable; later wins.",
    ),
    helpers: Optional[List[str]] = typer.Option(
        None, "-H", "--helper", help="Helper module name or Python file. Repeatable.",
    ),
    partials: Optional[List[str]] = typer.Option(
        None, "-p", "--partial", help="Partial file or glob. Repeatable.",
    ),
    layouts: Optional[List[str]] = typer.Option(
        None, "-t", "--layout", help="Layout file or glob. Repeatable.",
    ),
    default_layout: Optional[str] = typer.Option(
        None, "-y", "--default-layout", help="Layout applied to pages that name none.",
    ),
    dest_dir: Optional[Path] = typer.Option(
        None, "-o", "--dest-dir", help="Write output files here instead of stdout.",
    ),
    ext: str = typer.Option(DEFAULT_EXT, "-e", "--ext", help="Extension of written files."),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Read options from a YAML, JSON or INI file.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug diagnostics."),
    silent: bool = typer.Option(False, "-s", "--silent", help="Suppress all diagnostics."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Render templates with front matter through layouts."""
    if version:
        typer.echo(f"taft {__version__}")
        raise typer.Exit()

    config = TaftConfig()
    if config_file is not None:
        try:
            config = TaftConfig.from_file(config_file)
        except (DecodeError, IsADirectoryError) as exc:
            typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)

    config = config.merge(TaftConfig.from_dict({
        "data": data,
        "helpers": helpers,
        "partials": partials,
        "layouts": layouts,
        "default_layout": default_layout,
        "dest_dir": dest_dir,
        "ext": ext,
        "verbose": verbose,
        "silent": silent,
    }))
    log = configure_logging(verbose=config.verbose, silent=config.silent)

    if not files:
        typer.secho("Error: no template files given.", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2)

    engine = Taft.from_config(config)
    failures = 0
    written: dict[Path, Path] = {}
    for result in engine.build_many(files):
        if isinstance(result, Rendered):
            if config.dest_dir is None:
                typer.echo(result.content.body)
            else:
                target = _write(result.content.body, result.source, config.dest_dir, config.ext)
                if target in written:
                    log.warning(
                        "%s overwrites %s written from %s", result.source, target, written[target]
                    )
                written[target] = result.source
                log.info("Wrote %s", target)
        elif isinstance(result, Skipped):
            log.info("Skipped %s", result.source)
        elif isinstance(result, Failed):
            failures += 1

    if failures:
        raise typer.Exit(code=1)


def app() -> None:
    """Console-script entry point."""
    typer_app()


if __name__ == "__main__":
    app()
