# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""RegKeeper CLI - inspect registry paths and compile purge plans"""

import json
import sys
from pathlib import Path

import click
import yaml

from regkeeper import __version__
from regkeeper.core.config import get_config
from regkeeper.core.exceptions import ErrorHandler, RegKeeperError
from regkeeper.core.logger import configure_logging
from regkeeper.core.paths import parse
from regkeeper.core.registry import get_registry
from regkeeper.core.runtime import compile_file
from regkeeper.core.values import parse_value_path


def _fail(error: RegKeeperError):
    ErrorHandler.handle_exception(error)
    click.echo(f"[-] Error: {error.message}", err=True)
    sys.exit(1)


def _emit(data, as_json: bool):
    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx):
    """RegKeeper - declarative registry keys with value purging.

    Commands:
        regkeeper parse   - Canonicalize a key path
        regkeeper value   - Split a value path into key and value name
        regkeeper plan    - Compile a manifest into an ordered plan
    """
    try:
        config = get_config()
    except RegKeeperError as e:
        _fail(e)

    configure_logging(
        "regkeeper",
        level=config.observability.log_level,
        log_dir=config.paths.log_dir,
        file_output=config.observability.file_logging,
    )
    ctx.obj = config


@cli.command("parse")
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse_command(path: str, as_json: bool):
    """Parse and canonicalize a registry key path.

    Examples:
        regkeeper parse 'hkey_local_machine\\Software\\Vendor'
        regkeeper parse '32:HKLM\\Software' --json
    """
    try:
        key = parse(path)
    except RegKeeperError as e:
        _fail(e)

    _emit(
        {
            "canonical": key.canonical,
            "hive": key.hive.long_name,
            "bit_width": key.bit_width.value,
            "access": hex(key.access),
            "segments": list(key.segments),
            "aliases": list(key.aliases),
            "ancestors": [ancestor.canonical for ancestor in key.ascend()],
        },
        as_json,
    )


@cli.command("value")
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def value_command(path: str, as_json: bool):
    """Split a registry value path into key and value name.

    A trailing separator names the key's default value.
    """
    try:
        value_path = parse_value_path(path)
    except RegKeeperError as e:
        _fail(e)

    _emit(
        {
            "canonical": value_path.canonical,
            "key": value_path.key.canonical,
            "value_name": value_path.value_name,
            "default": value_path.is_default,
        },
        as_json,
    )


@cli.command("plan")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--state", "-s", type=click.Path(exists=True, dir_okay=False),
              help="Registry snapshot for the memory provider")
@click.option("--provider", "-p", "provider_name", help="Provider name")
@click.option("--fail-fast/--no-fail-fast", default=None,
              help="Abort on the first provider failure")
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]),
              default="yaml", help="Output format")
@click.pass_obj
def plan_command(config, manifest, state, provider_name, fail_fast, output_format):
    """Compile MANIFEST into an ordered plan, including purge removals.

    Examples:
        regkeeper plan site.yaml --state snapshot.yaml
        regkeeper plan site.yaml -s snapshot.yaml --format json
    """
    name = provider_name or config.provider.name
    state_file = Path(state) if state else config.provider.state_file
    if fail_fast is None:
        fail_fast = config.reconcile.fail_fast

    options = {"state_file": state_file} if state_file else {}

    try:
        provider = get_registry().get_provider(name, **options)
        plan = compile_file(manifest, provider, fail_fast=fail_fast)
    except RegKeeperError as e:
        _fail(e)

    _emit(plan.to_dict(), output_format == "json")

    if not plan.ok:
        for ref, failure in plan.failures.items():
            click.echo(f"[-] {ref}: {failure['message']}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
