"""Rules CLI commands for Tax Cal.

Inspects and checks country tax rules files.
"""

import json

import click
import yaml

from taxcal.sdk import (
    InvalidCountryCodeError,
    RulesFileNotFoundError,
    TaxCalError,
    get_rules_path,
    load_rules_file,
    load_store,
    rule_to_dict,
    validate_country_code,
    validate_rule,
)


@click.group()
def rules():
    """Inspect and check country tax rules."""
    pass


@rules.command("path")
def rules_path():
    """Show the effective rules file location."""
    path = get_rules_path()
    click.echo(str(path))
    if not path.exists():
        click.echo("(file does not exist)", err=True)


@rules.command("show")
@click.argument("country", required=False)
@click.option("--rules", "rules_file", type=click.Path(), help="Rules file (default: settings / config dir)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def rules_show(country, rules_file, as_json):
    """List configured countries, or show the rule for COUNTRY."""
    try:
        store = load_store(rules_file)
    except (RulesFileNotFoundError, TaxCalError) as e:
        raise click.ClickException(str(e))

    if not country:
        codes = store.country_codes()
        if as_json:
            click.echo(json.dumps({"countries": codes}, indent=2))
        elif not codes:
            click.echo(f"No rules configured ({get_rules_path()}).")
        else:
            for code in codes:
                rule = store.get(code)
                click.echo(f"{code}  {len(rule.tax_items)} item(s)")
        return

    try:
        code = validate_country_code(country)
    except InvalidCountryCodeError as e:
        raise click.ClickException(e.message)

    rule = store.get(code)
    if rule is None:
        raise click.ClickException(f"No tax configuration for country {code}.")

    data = rule_to_dict(rule)
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())


@rules.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def rules_validate(path):
    """Check every rule in a rules file.

    Reports all rejected countries, not just the first one.
    """
    try:
        parsed = load_rules_file(path)
    except TaxCalError as e:
        raise click.ClickException(str(e))

    failures = 0
    for rule in parsed:
        try:
            validate_country_code(rule.country_code)
            error = validate_rule(rule)
        except InvalidCountryCodeError as e:
            error = e

        if error is None:
            click.echo(f"  ok    {rule.country_code} ({len(rule.tax_items)} item(s))")
        else:
            failures += 1
            click.echo(f"  FAIL  {rule.country_code}: {error}")

    if failures:
        raise click.ClickException(f"{failures} of {len(parsed)} rule(s) rejected")

    click.echo(f"All {len(parsed)} rule(s) valid.")
