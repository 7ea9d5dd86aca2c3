"""Settings CLI commands for Tax Cal.

Manages settings.json - rules file location.
"""

import click
from pathlib import Path

from taxcal.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_rules_path,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_file: path to the rules YAML (default: rules.yaml in config dir)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  rules_file: {get_rules_path()}")


@settings.command("rules-file")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_file, revert to default")
def settings_rules_file(path, clear):
    """Set or clear the rules file location.

    PATH is a YAML file with a 'countries' mapping of tax rules.

    Examples:
        taxcal settings rules-file ~/tax/rules.yaml
        taxcal settings rules-file --clear
    """
    if clear:
        current = load_settings()
        if "rules_file" in current:
            del current["rules_file"]
            save_settings(current)
            click.echo("Cleared rules_file setting.")
            click.echo(f"Rules file is now: {get_rules_path()} (default)")
        else:
            click.echo("rules_file was not set.")
        return

    if not path:
        current_rules_file = get_setting("rules_file")
        if current_rules_file:
            click.echo(f"Current rules_file: {current_rules_file}")
        else:
            click.echo(f"No custom rules_file set. Using default: {get_rules_path()}")
        return

    rules_path = Path(path).expanduser().resolve()
    if rules_path.exists() and not rules_path.is_file():
        raise click.ClickException(f"Path exists but is not a file: {rules_path}")
    if not rules_path.exists():
        click.echo(f"Warning: {rules_path} does not exist yet.", err=True)

    set_setting("rules_file", str(rules_path))
    click.echo(f"Set rules_file: {rules_path}")
    click.echo(f"Saved to: {get_settings_path()}")
