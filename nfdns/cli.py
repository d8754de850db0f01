"""NFDNS CLI — the main entry point for managing a token registry."""

from __future__ import annotations

import functools

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nfdns import __version__
from nfdns.config import load_settings
from nfdns.observability import configure_logging
from nfdns.registry.errors import RegistryError
from nfdns.registry.local_store import LocalTokenStore
from nfdns.registry.models import Collection, parse_token_id
from nfdns.registry.token_registry import TokenRegistry

console = Console(emoji=False)


def registry_dir_option(func):
    return click.option(
        "--registry-dir",
        "-r",
        default=None,
        help="Registry directory (default from config or NFDNS_REGISTRY_DIR)",
    )(func)


def reports_registry_errors(func):
    """Print registry failures and exit non-zero instead of tracing back."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RegistryError as exc:
            console.print(f"[red]{exc.code}:[/] {escape(str(exc))}")
            raise SystemExit(1)

    return wrapper


def _print_value(value: str) -> None:
    """Print a stored value exactly as held, with no markup, emoji or wrapping."""
    console.print(value, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _store(ctx: click.Context, registry_dir: str | None) -> LocalTokenStore:
    return LocalTokenStore(registry_dir or ctx.obj["settings"].registry_dir)


def _open(ctx: click.Context, registry_dir: str | None) -> TokenRegistry:
    return TokenRegistry.open(_store(ctx, registry_dir))


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to an nfdns.yaml config file")
@click.option("--log-level", default=None, help="Logging level (overrides config)")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str | None):
    """NFDNS — registry of unique, ownable tokens.

    Mint tokens as the collection's minting authority, look up owners,
    and transfer tokens between identities.
    """
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# ── Collection ───────────────────────────────────────────────────────


@main.command()
@click.argument("name")
@click.argument("symbol")
@click.option("--authority", "-a", required=True, help="Identity allowed to mint tokens")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def init(ctx: click.Context, name: str, symbol: str, authority: str, registry_dir: str | None):
    """Create an empty registry for collection NAME (SYMBOL)."""
    store = _store(ctx, registry_dir)
    store.initialize(Collection(name=name, symbol=symbol, minting_authority=authority))
    console.print(f"  Initialized [cyan]{escape(name)}[/] ({escape(symbol)}) at {escape(str(store.registry_dir))}")


@main.command()
@registry_dir_option
@click.pass_context
@reports_registry_errors
def info(ctx: click.Context, registry_dir: str | None):
    """Show the collection descriptor and total supply."""
    reg = _open(ctx, registry_dir)
    console.print(f"  Name:       [cyan]{escape(reg.name)}[/]")
    console.print(f"  Symbol:     {escape(reg.symbol)}")
    console.print(f"  Authority:  {escape(reg.minting_authority)}")
    console.print(f"  Supply:     {reg.total_supply()}")


# ── Tokens ───────────────────────────────────────────────────────────


@main.command()
@click.argument("token_id")
@click.argument("owner")
@click.option("--uri", default="", help="Metadata URI attached to the token")
@click.option("--caller", "-c", required=True, help="Identity performing the mint")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def mint(ctx: click.Context, token_id: str, owner: str, uri: str, caller: str, registry_dir: str | None):
    """Mint TOKEN_ID to OWNER."""
    reg = _open(ctx, registry_dir)
    record = reg.mint(parse_token_id(token_id), owner, uri, caller=caller)
    console.print(f"  Minted [cyan]{escape(str(record.token_id))}[/] to {escape(record.owner)}")


@main.command()
@click.argument("from_owner", metavar="FROM")
@click.argument("to")
@click.argument("token_id")
@click.option("--caller", "-c", required=True, help="Identity performing the transfer")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def transfer(ctx: click.Context, from_owner: str, to: str, token_id: str, caller: str, registry_dir: str | None):
    """Transfer TOKEN_ID from FROM to TO."""
    reg = _open(ctx, registry_dir)
    record = reg.transfer(from_owner, to, parse_token_id(token_id), caller=caller)
    console.print(f"  Transferred [cyan]{escape(str(record.token_id))}[/]: {escape(from_owner)} -> {escape(record.owner)}")


@main.command()
@click.argument("token_id")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def owner(ctx: click.Context, token_id: str, registry_dir: str | None):
    """Print the current owner of TOKEN_ID."""
    reg = _open(ctx, registry_dir)
    _print_value(reg.owner_of(parse_token_id(token_id)))


@main.command()
@click.argument("token_id")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def exists(ctx: click.Context, token_id: str, registry_dir: str | None):
    """Print whether TOKEN_ID has been minted."""
    reg = _open(ctx, registry_dir)
    console.print("true" if reg.exists(parse_token_id(token_id)) else "false")


@main.command()
@registry_dir_option
@click.pass_context
@reports_registry_errors
def supply(ctx: click.Context, registry_dir: str | None):
    """Print the number of minted tokens."""
    reg = _open(ctx, registry_dir)
    console.print(str(reg.total_supply()))


@main.command()
@click.argument("token_id")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def uri(ctx: click.Context, token_id: str, registry_dir: str | None):
    """Print the metadata URI of TOKEN_ID."""
    reg = _open(ctx, registry_dir)
    _print_value(reg.token_uri(parse_token_id(token_id)))


@main.command(name="list")
@registry_dir_option
@click.pass_context
@reports_registry_errors
def list_tokens(ctx: click.Context, registry_dir: str | None):
    """List all tokens in the registry."""
    reg = _open(ctx, registry_dir)
    records = reg.tokens()

    if not records:
        console.print("[yellow]Registry is empty.[/]")
        return

    table = Table(title=f"{escape(reg.name)} ({len(records)} tokens)")
    table.add_column("Token", style="cyan")
    table.add_column("Owner")
    table.add_column("URI")
    table.add_column("Minted", style="dim")

    for record in records:
        table.add_row(
            escape(str(record.token_id)),
            escape(record.owner),
            escape(record.uri[:50]),
            record.minted_at,
        )

    console.print(table)


if __name__ == "__main__":
    main()
