"""
Renders a directive-annotated Markdown file to an HTML fragment.
The result goes to stdout, or atomically to a file with --output.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .config import build_config
from .exceptions import ConfigError, RenderFileError
from .filesystem import normalize_filepath, write_output
from .models import RenderedPage
from .pipeline import render_file

__all__ = ["cli"]

logger = logging.getLogger(__name__)


def format_json(page: RenderedPage) -> str:
    """Serialize a rendered page as JSON for templating tools."""
    payload = {
        "html": page.content_html,
        "toc_html": page.toc_html,
        "headings": [
            {"level": heading.level, "text": heading.text, "slug": heading.slug}
            for heading in page.headings
        ],
        "toc": [node.to_dict() for node in page.toc],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def format_html(page: RenderedPage, include_toc: bool) -> str:
    if include_toc and page.toc_html:
        return page.toc_html + page.content_html
    return page.content_html


@click.command()
@click.version_option(package_name="directive-markdown")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the result to this file instead of stdout",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "json"]),
    default="html",
    show_default=True,
    help="Output format",
)
@click.option("--toc/--no-toc", default=False, help="Prepend the table of contents (html format)")
@click.option("--toc-min-level", type=int, help="Smallest heading level in the table of contents")
@click.option("--toc-max-level", type=int, help="Largest heading level in the table of contents")
@click.option("--no-highlight", is_flag=True, help="Disable syntax highlighting")
@click.option("--no-line-numbers", is_flag=True, help="Omit line numbers from highlighted code")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    output: str | None = None,
    output_format: str = "html",
    toc: bool = False,
    toc_min_level: int | None = None,
    toc_max_level: int | None = None,
    no_highlight: bool = False,
    no_line_numbers: bool = False,
    verbose: bool = False,
):
    """
    Entry point for rendering a Markdown file with ::: directives.

    Args:
        filepath: Path to the Markdown file to render.
        output: Optional destination file.
        output_format: ``html`` for the fragment, ``json`` for HTML plus headings.
        toc: Whether to prepend the table of contents in html format.
        toc_min_level: Smallest heading level included in the ToC.
        toc_max_level: Largest heading level included in the ToC.
        no_highlight: Disable syntax highlighting.
        no_line_numbers: Omit line numbers from highlighted code.
        verbose: Log progress to stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is unsafe or configuration values are invalid.
        click.ClickException: If the file cannot be read or the output cannot be written.

    Examples:
        directive-markdown docs/guide.md --toc --toc-max-level 3 -o public/guide.html
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        source = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            source.parent,
            toc_min_level=toc_min_level,
            toc_max_level=toc_max_level,
            highlight=False if no_highlight else None,
            line_numbers=False if no_line_numbers else None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        page = render_file(source, config)
    except RenderFileError as error:
        raise click.ClickException(str(error)) from error

    if output_format == "json":
        rendered = format_json(page)
    else:
        rendered = format_html(page, toc)

    if output is None:
        click.echo(rendered, nl=False)
        return

    try:
        write_output(Path(output), rendered)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    logger.info("Wrote %s", output)


if __name__ == "__main__":
    cli()
