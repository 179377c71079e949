"""CLI for DeFi API adapters."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal
from enum import StrEnum
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from defi_adapters.core.models import BeefyVaults, NetworkId
from defi_adapters.data import get_all_network_ids, get_beefy_chain, get_chain_id
from defi_adapters.protocols import BeefyAPIClient, BeefyAPIError

# Install rich traceback handler
install(show_locals=True)

T = TypeVar("T")

app = typer.Typer(
    name="defi-adapters",
    help="Query Beefy Finance vaults, prices, TVL and APY data",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _make_client(settings: dict[str, Any]) -> BeefyAPIClient:
    return BeefyAPIClient(base_url=settings["base_url"], timeout=settings["timeout"])


def _run(ctx: typer.Context, fetch: Callable[[BeefyAPIClient], Awaitable[T]]) -> T:
    """
    Run a fetch against a fresh client and exit with an error on failure.

    Parameters
    ----------
    ctx : typer.Context
        Context carrying the global options
    fetch : Callable[[BeefyAPIClient], Awaitable[T]]
        Coroutine function using the client

    Returns
    -------
    T
        Result of the fetch

    Raises
    ------
    typer.Exit
        If the fetch fails

    """
    settings = ctx.obj

    async def _main() -> T:
        async with _make_client(settings) as client:
            return await fetch(client)

    try:
        return asyncio.run(_main())
    except BeefyAPIError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if settings["debug"]:
            raise
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: str = typer.Option(
        BeefyAPIClient.BASE_URL,
        "--base-url",
        envvar="BEEFY_API_URL",
        help="Beefy API base URL",
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Query Beefy Finance vaults, prices, TVL and APY data."""
    _configure_logging(debug)
    ctx.obj = {"base_url": base_url, "timeout": timeout, "debug": debug}


@app.command()
def networks() -> None:
    """List all known networks."""
    table = Table(title="Networks", show_header=True, header_style="bold magenta")
    table.add_column("Network", style="cyan")
    table.add_column("Beefy Chain", style="green")
    table.add_column("Chain ID", style="yellow", justify="right")
    table.add_column("Status", style="green")

    for network_id in get_all_network_ids():
        beefy_chain = get_beefy_chain(network_id)
        table.add_row(
            network_id.value,
            beefy_chain or "-",
            str(get_chain_id(network_id)),
            "✓ Supported" if beefy_chain else "Unsupported",
        )

    console.print(table)


@app.command()
def apy(
    ctx: typer.Context,
    vault: str | None = typer.Option(None, "--vault", "-v", help="Only show this vault ID"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show APY breakdown by vault."""
    breakdown = _run(ctx, lambda client: client.get_apy_breakdown())

    if vault is not None:
        breakdown = {vault: breakdown[vault]} if vault in breakdown else {}

    if format == OutputFormat.JSON:
        _output_json(breakdown)
        return

    if not breakdown:
        console.print("\n[yellow]No APY data found[/yellow]")
        return

    table = Table(title="APY Breakdown", show_header=True, header_style="bold magenta")
    table.add_column("Vault", style="cyan")
    table.add_column("Total APY", style="bold green", justify="right")
    table.add_column("Vault APR", style="white", justify="right")

    for vault_id, components in breakdown.items():
        components = components or {}
        table.add_row(
            vault_id,
            _format_percent(components.get("totalApy")),
            _format_percent(components.get("vaultApr")),
        )

    console.print(table)


@app.command()
def tvls(
    ctx: typer.Context,
    network: NetworkId = typer.Argument(..., help="Network identifier"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show TVL by vault for a network."""
    tvl_map = _run(ctx, lambda client: client.get_tvls(network))

    if format == OutputFormat.JSON:
        _output_json(tvl_map)
        return

    _output_value_table(f"TVL on {network.value}", "Vault", "TVL", tvl_map)


@app.command()
def vaults(
    ctx: typer.Context,
    network: NetworkId = typer.Argument(..., help="Network identifier"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """List standard and governance vaults for a network."""
    listing = _run(ctx, lambda client: client.get_beefy_vaults(network))

    if format == OutputFormat.JSON:
        _output_json(listing.model_dump(mode="json", by_alias=True))
        return

    _output_vaults_table(network, listing)


@app.command()
def prices(
    ctx: typer.Context,
    network: NetworkId = typer.Argument(..., help="Network identifier"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Show at most this many prices"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Show LP and token prices for a network."""
    price_map = _run(ctx, lambda client: client.get_beefy_prices(network))

    if limit is not None:
        price_map = dict(list(price_map.items())[:limit])

    if format == OutputFormat.JSON:
        _output_json(price_map)
        return

    _output_value_table(f"Prices on {network.value}", "Oracle / Token", "USD Price", price_map)


def _format_percent(value: Decimal | None) -> str:
    return f"{value * 100:,.2f}%" if value is not None else "-"


def _output_value_table(title: str, key_label: str, value_label: str, data: dict[str, Decimal | None]) -> None:
    """Output a flat USD value map as rich table."""
    if not data:
        console.print("\n[yellow]No data found[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column(key_label, style="cyan")
    table.add_column(value_label, style="bold green", justify="right")

    for key, value in data.items():
        table.add_row(key, f"${value:,.2f}" if value is not None else "-")

    console.print(table)


def _output_vaults_table(network: NetworkId, listing: BeefyVaults) -> None:
    """Output vault listings as rich tables."""
    if not listing.vaults and not listing.gov_vaults:
        console.print("\n[yellow]No vaults found[/yellow]")
        return

    for title, items in (
        (f"Vaults on {network.value}", listing.vaults),
        (f"Governance vaults on {network.value}", listing.gov_vaults),
    ):
        if not items:
            continue

        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Platform", style="blue")
        table.add_column("Status", style="yellow")
        table.add_column("Address", style="green")

        for vault in items:
            table.add_row(vault.id, vault.name, vault.platform_id or "-", vault.status, vault.earn_contract_address)

        console.print(table)


def _output_json(data: Any) -> None:
    """Output data as JSON."""

    def decimal_default(obj):
        if isinstance(obj, Decimal):
            return str(obj)
        raise TypeError

    json_str = json.dumps(data, indent=2, default=decimal_default)
    console.print(json_str, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
