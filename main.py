"""
Command line entry point for the universe client.
"""

import asyncio
import dataclasses
import json
import logging
import sys

import click
from dotenv import load_dotenv

from blockchain import (
    DojoProvider,
    ManifestError,
    build_call,
    encode_username,
    get_account,
    get_client,
    load_manifest,
    setup_world,
)
from blockchain.contracts import get_operation
from config import UniverseConfig, torii_url_from_env
from models import SCHEMA, ModelsMapping
from torii_client import ToriiClient


class ColoredFormatter(logging.Formatter):
    """Custom colored formatter for universe client logs."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    # Component colors
    COMPONENT_COLORS = {
        'contracts': '\033[94m',     # Blue
        'provider': '\033[93m',      # Yellow
        'connection': '\033[92m',    # Green
        'torii_client': '\033[96m',  # Cyan
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        level_color = self.COLORS.get(record.levelname, '')

        component_name = record.name.split('.')[-1] if '.' in record.name else record.name
        component_color = self.COMPONENT_COLORS.get(component_name, '')

        timestamp = self.formatTime(record)

        if level_color or component_color:
            formatted = f"{self.BOLD}{level_color}[{record.levelname}]{self.RESET} "
            formatted += f"{component_color}[{component_name}]{self.RESET} "
            formatted += f"{timestamp} - {record.getMessage()}"
        else:
            formatted = f"[{record.levelname}] [{component_name}] {timestamp} - {record.getMessage()}"

        return formatted


def setup_logging(verbose: bool = False):
    """Setup colored logging on stderr so JSON output stays clean."""
    formatter = ColoredFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(console_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def _parse_arguments(operation: str, args):
    """Convert CLI strings to calldata; usernames may be given as plain text."""
    op = get_operation(operation)
    if len(args) != len(op.params):
        raise TypeError(
            f"{op.name} takes {len(op.params)} arguments "
            f"({', '.join(op.params)}), got {len(args)}"
        )
    values = []
    for name, raw in zip(op.params, args):
        if name == "username" and not raw.isdigit() and not raw.lower().startswith("0x"):
            values.append(encode_username(raw))
        elif raw.isdigit():
            values.append(int(raw))
        else:
            values.append(raw)
    return op, values


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, verbose):
    """Universe world client CLI."""
    ctx.obj = {"verbose": verbose}
    load_dotenv()


@cli.command()
def schema():
    """Print model defaults and model tags."""
    output = {
        namespace: {name: dataclasses.asdict(record) for name, record in models.items()}
        for namespace, models in SCHEMA.items()
    }
    output["models"] = {member.name: member.value for member in ModelsMapping}
    click.echo(json.dumps(output, indent=2))


@cli.command()
@click.argument("operation")
@click.argument("args", nargs=-1)
def calldata(operation, args):
    """Print the call descriptor for OPERATION without sending it."""
    try:
        op, values = _parse_arguments(operation, args)
        call = build_call(op.name, *values)
    except (KeyError, TypeError, ValueError) as e:
        raise click.UsageError(str(e))
    click.echo(json.dumps(call.to_dict(), indent=2))


@cli.command()
@click.argument("operation")
@click.argument("args", nargs=-1)
@click.pass_context
def invoke(ctx, operation, args):
    """Sign and send OPERATION to the game contract."""
    setup_logging(ctx.obj["verbose"])
    try:
        op, values = _parse_arguments(operation, args)
    except (KeyError, TypeError, ValueError) as e:
        raise click.UsageError(str(e))

    try:
        config = UniverseConfig.from_env()
    except KeyError as e:
        raise click.ClickException(f"Missing environment variable {e.args[0]}")
    try:
        provider = DojoProvider(load_manifest(config.manifest_path), config.wait_for_acceptance)
    except ManifestError as e:
        raise click.ClickException(str(e))
    account = get_account(
        get_client(config.rpc_url),
        config.account_address,
        config.private_key,
        config.chain_id,
    )
    world = setup_world(provider, config.namespace)

    result = asyncio.run(world.game.invoke(op.name, account, *values))
    click.echo(json.dumps({"transaction_hash": result.transaction_hash_hex}))


async def _fetch_player(torii_url: str, player_id):
    async with ToriiClient(torii_url) as client:
        return await client.get_player(player_id)


async def _fetch_user(torii_url: str, owner: str):
    async with ToriiClient(torii_url) as client:
        return await client.get_user(owner)


@cli.command()
@click.argument("player_id")
@click.pass_context
def player(ctx, player_id):
    """Show a UniversePlayer record from the indexer."""
    setup_logging(ctx.obj["verbose"])
    key = int(player_id) if player_id.isdigit() else player_id
    record = asyncio.run(_fetch_player(torii_url_from_env(), key))
    if record is None:
        raise click.ClickException(f"Player {player_id} not found")
    click.echo(json.dumps(dataclasses.asdict(record), indent=2))


@cli.command()
@click.argument("address")
@click.pass_context
def user(ctx, address):
    """Show a User record from the indexer."""
    setup_logging(ctx.obj["verbose"])
    record = asyncio.run(_fetch_user(torii_url_from_env(), address))
    if record is None:
        raise click.ClickException(f"User {address} not found")
    click.echo(json.dumps(dataclasses.asdict(record), indent=2))


if __name__ == "__main__":
    cli()
