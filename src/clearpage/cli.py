"""Command-line interface for clearpage."""

from __future__ import annotations

import json
import sys
from typing import Optional

import click
import structlog

from clearpage import __version__
from clearpage.config import EngineConfig, load_config
from clearpage.errors import ExtractionError
from clearpage.extractor import SITE_RULES, ReadabilityEngine
from clearpage.observability import configure_logging

logger = structlog.get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """clearpage - extract readable articles from rendered HTML."""
    engine_config: EngineConfig = load_config(config)
    if log_level:
        engine_config.monitoring.log_level = log_level.upper()
    configure_logging(engine_config.monitoring)
    ctx.ensure_object(dict)
    ctx.obj["config"] = engine_config


@cli.command()
@click.argument("html_file", type=click.File("r", encoding="utf-8"))
@click.option("--url", required=True, help="URL the HTML was fetched from")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.pass_context
def extract(ctx: click.Context, html_file, url: str, output_format: str) -> None:
    """Extract the article in HTML_FILE ('-' for stdin)."""
    engine = ReadabilityEngine(ctx.obj["config"])
    try:
        article = engine.extract(html_file.read(), url)
    except ExtractionError as e:
        click.echo(f"Error ({e.kind}): {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(article.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(article.title)
    if article.author:
        click.echo(f"by {article.author}")
    click.echo(f"{article.reading_minutes} min")
    click.echo()
    click.echo(article.text_content)


@cli.command()
def rules() -> None:
    """List the built-in site rules."""
    for rule in SITE_RULES:
        click.echo(f"{rule.name}: {', '.join(rule.hosts)}")
        click.echo(f"  content: {', '.join(rule.content_selectors)}")
        if rule.strip_selectors:
            click.echo(f"  strip:   {', '.join(rule.strip_selectors)}")


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
