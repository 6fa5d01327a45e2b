"""Developer command: ``flask quizlet-parse <module_id>``."""

import click
import requests
from flask import current_app
from flask.cli import with_appcontext

from .exceptions import ModuleImportError


@click.command('quizlet-parse')
@click.argument('module_id')
@with_appcontext
def quizlet_parse_command(module_id):
    """Fetch a public Quizlet set and print its cards, one per line."""
    parser = current_app.extensions['simplecards']['quizlet_parser']

    try:
        cards = parser.parse(module_id)
    except (ModuleImportError, requests.RequestException, ValueError) as exc:
        raise click.ClickException(str(exc))

    for card in cards:
        click.echo(f"{card.front}\t{card.back}")
    click.echo(f"{len(cards)} cards parsed from module {module_id}", err=True)
