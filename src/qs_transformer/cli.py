"""Command-line interface for the Query String Transformer."""

import json
import logging
import sys
import click
from pathlib import Path
from typing import Optional
from .qs_transformer import QueryStringTransformer
from . import __version__


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """Query String Transformer - Convert between nested JSON and bracket query strings."""
    pass


@main.command()
@click.argument('input_file', required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--separator', '-s', default='&', help='Text between key=value segments (default: &)')
@click.option('--assigner', '-a', default='=', help='Text between keys and values (default: =)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def encode(input_file: Optional[Path], separator: str, assigner: str, verbose: bool):
    """Encode a JSON document (file or stdin) into a query string."""
    _configure_logging(verbose)

    try:
        if input_file is not None:
            json_content = input_file.read_text(encoding='utf-8')
        else:
            json_content = click.get_text_stream('stdin').read()
        value = json.loads(json_content)
    except (OSError, ValueError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    transformer = QueryStringTransformer(separator=separator, assigner=assigner)
    result = transformer.stringify(value)

    if not result.success:
        click.echo("❌ Encode operation failed:", err=True)
        for error in result.errors or []:
            click.echo(f"   • {error}", err=True)
        sys.exit(1)

    click.echo(result.query_string)


@main.command()
@click.argument('query')
@click.option('--indent', '-i', default=2, type=int, help='JSON indentation (default: 2)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def decode(query: str, indent: int, verbose: bool):
    """Decode a query string into JSON. Use '-' to read the query from stdin."""
    _configure_logging(verbose)

    if query == '-':
        query = click.get_text_stream('stdin').read().strip()
    if query.startswith('?'):
        query = query[1:]

    transformer = QueryStringTransformer()
    result = transformer.parse(query)

    for warning in result.warnings:
        click.echo(f"⚠️  {warning}", err=True)

    click.echo(json.dumps(result.data, indent=indent, ensure_ascii=False))


if __name__ == '__main__':
    main()
