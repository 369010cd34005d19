# services/waste/commands.py
import logging
from datetime import date

import click
from flask import current_app
from flask.cli import with_appcontext

from .formatting import results_to_lines
from .resolver import resolve
from .weeks import local_today


logger = logging.getLogger(__name__)


@click.command('lookup')
@click.argument('query')
@click.option('--today', 'today_str', default=None, help="Evaluate as of this date (YYYY-MM-DD).")
@with_appcontext
def lookup_command(query, today_str):
    """
    Print upcoming collection dates for a street fragment or house number.
    """
    store = current_app.extensions['rule_store']
    policy = current_app.extensions['resolver_policy']
    try:
        today = date.fromisoformat(today_str) if today_str else local_today(current_app.config["TIMEZONE"])
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {today_str!r}", param_hint="--today")

    logger.debug("CLI lookup %r as of %s", query, today)
    results = resolve(query, store, today=today, policy=policy)
    if not results:
        click.echo("Nenašli jsme žádnou ulici ani číslo popisné odpovídající zadání.")
        return
    for line in results_to_lines(results):
        click.echo(line)
