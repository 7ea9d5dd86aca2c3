"""Tax Cal CLI - Command-line interface for country tax calculation."""

import json
import sys

import click

from taxcal import __version__
from taxcal.sdk import (
    RulesFileNotFoundError,
    TaxCalError,
    calculate_tax,
    configure_logging,
    load_store,
    problem_details,
    result_to_dict,
)

from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="taxcal")
def cli():
    """Tax Cal - Per-country income tax calculation.

    Country rules are loaded from (in order):

    \b
    1. --rules FILE option (per command)
    2. settings.json 'rules_file' key (set via 'taxcal settings rules-file')
    3. rules.yaml in TAXCAL_CONFIG_PATH or ~/.config/taxcal/

    Run 'taxcal rules show' to see configured countries.
    """
    pass


cli.add_command(rules_group)
cli.add_command(settings_group)


def _format_amount(amount) -> str:
    return f"{amount:,.2f}"


@cli.command("calc")
@click.argument("country")
@click.argument("gross")
@click.option("--rules", "rules_file", type=click.Path(), help="Rules file (default: settings / config dir)")
@click.option("--json", "as_json", is_flag=True, help="Output result (or problem details) as JSON")
def calc(country, gross, rules_file, as_json):
    """Calculate taxes and net salary for GROSS in COUNTRY.

    Examples:
        taxcal calc DE 60000
        taxcal calc es 42000.50 --rules ./rules.yaml --json
    """
    try:
        store = load_store(rules_file)
    except RulesFileNotFoundError as e:
        raise click.ClickException(str(e))
    except TaxCalError as e:
        raise click.ClickException(e.message)

    try:
        result = calculate_tax(country, gross, store)
    except TaxCalError as e:
        if as_json:
            click.echo(json.dumps(problem_details(e), indent=2))
            sys.exit(1)
        raise click.ClickException(e.message)

    if as_json:
        click.echo(json.dumps(result_to_dict(result), indent=2))
        return

    width = max([len(entry.name) for entry in result.breakdown] + [12])
    click.echo(f"Country: {country.strip().upper()}")
    click.echo(f"{'Gross':<{width + 2}} {_format_amount(result.gross):>15}")
    click.echo()
    for entry in result.breakdown:
        click.echo(f"  {entry.name:<{width}} {_format_amount(entry.amount):>15}")
    click.echo()
    click.echo(f"{'Taxable base':<{width + 2}} {_format_amount(result.taxable_base):>15}")
    click.echo(f"{'Total taxes':<{width + 2}} {_format_amount(result.total_taxes):>15}")
    click.echo(f"{'Net salary':<{width + 2}} {_format_amount(result.net_salary):>15}")


def main():
    """Entry point for the CLI."""
    configure_logging(default_level="WARNING")
    cli()


if __name__ == "__main__":
    main()
