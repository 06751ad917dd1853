"""CLI entry point for Restaurant Guide.

Provides the ``restaurant-guide`` command with subcommands for creating the
schema and managing cities and restaurants from the terminal.

This is the ONLY module where console output is allowed. All other modules
use ``logging``. Async internals are bridged to typer's synchronous
interface via ``asyncio.run()``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from sqlmodel import col

from Restaurant_Guide.config import Settings, load_settings, save_settings
from Restaurant_Guide.data.context import ContextFactory, ContextOptions
from Restaurant_Guide.data.guide import RestaurantGuideContext
from Restaurant_Guide.data.providers import parse_connection_string
from Restaurant_Guide.logging_config import configure_logging
from Restaurant_Guide.models.entities import City, Restaurant
from Restaurant_Guide.models.requests import RestaurantCreate
from Restaurant_Guide.utils.exceptions import DataAccessError

# ---------------------------------------------------------------------------
# Typer app and sub-apps
# ---------------------------------------------------------------------------

app = typer.Typer(name="restaurant-guide", help="Cities and their restaurants")
db_app = typer.Typer(help="Create or drop the database schema")
city_app = typer.Typer(help="Manage cities")
restaurant_app = typer.Typer(help="Manage restaurants")
config_app = typer.Typer(help="Show or change the stored settings")
app.add_typer(db_app, name="db")
app.add_typer(city_app, name="city")
app.add_typer(restaurant_app, name="restaurant")
app.add_typer(config_app, name="config")

# Rich console for formatted output
console = Console()

ConnectionOption = Annotated[
    str | None,
    typer.Option("--connection", "-c", help="Connection string (overrides settings)"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]

GuideFactory = ContextFactory[RestaurantGuideContext]


def _run(connection: str | None, work: Callable[[GuideFactory], Awaitable[None]]) -> None:
    """Run ``work`` against a fresh factory, mapping data errors to exit code 1.

    Args:
        connection: Connection string from ``--connection``; settings when None.
        work: Coroutine function receiving the factory.
    """

    async def runner() -> None:
        connection_string = connection or load_settings().connection_string
        factory = ContextFactory(
            RestaurantGuideContext, ContextOptions.from_connection_string(connection_string)
        )
        try:
            await work(factory)
        finally:
            await factory.dispose()

    try:
        asyncio.run(runner())
    except (DataAccessError, ValidationError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


# ---------------------------------------------------------------------------
# db commands
# ---------------------------------------------------------------------------


@db_app.command("create")
def db_create(connection: ConnectionOption = None, verbose: VerboseOption = False) -> None:
    """Create any missing tables (safe to run repeatedly)."""
    configure_logging(verbose=verbose, quiet=not verbose)
    _run(connection, _db_create_async)


async def _db_create_async(factory: GuideFactory) -> None:
    async with factory.create() as context:
        created = await context.ensure_created()
    if created:
        console.print("[green]Schema created.[/green]")
    else:
        console.print("[yellow]Schema already exists.[/yellow]")


@db_app.command("drop")
def db_drop(
    connection: ConnectionOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Drop every table and its data."""
    configure_logging(verbose=verbose, quiet=not verbose)
    if not yes:
        typer.confirm("Drop all restaurant guide tables?", abort=True)
    _run(connection, _db_drop_async)


async def _db_drop_async(factory: GuideFactory) -> None:
    async with factory.create() as context:
        dropped = await context.ensure_deleted()
    if dropped:
        console.print("[green]Schema dropped.[/green]")
    else:
        console.print("[yellow]Nothing to drop.[/yellow]")


# ---------------------------------------------------------------------------
# city commands
# ---------------------------------------------------------------------------


@city_app.command("add")
def city_add(
    postal_code_prefix: Annotated[int, typer.Argument(help="Postal code prefix", min=0)],
    connection: ConnectionOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Add a city."""
    configure_logging(verbose=verbose, quiet=not verbose)
    _run(connection, partial(_city_add_async, postal_code_prefix=postal_code_prefix))


async def _city_add_async(factory: GuideFactory, postal_code_prefix: int) -> None:
    async with factory.create() as context:
        city = City(postal_code_prefix=postal_code_prefix)
        context.cities.add(city)
        await context.save_changes()
    console.print(f"[green]Created city {city.id}.[/green]")


@city_app.command("list")
def city_list(connection: ConnectionOption = None, verbose: VerboseOption = False) -> None:
    """List all cities with their restaurant counts."""
    configure_logging(verbose=verbose, quiet=not verbose)
    _run(connection, _city_list_async)


async def _city_list_async(factory: GuideFactory) -> None:
    async with factory.create() as context:
        cities = await context.cities.to_list()
        counts = {
            city.id: await context.restaurants.count(col(Restaurant.city_id) == city.id)
            for city in cities
        }

    if not cities:
        console.print("[yellow]No cities found.[/yellow]")
        return

    table = Table(title="Cities")
    table.add_column("ID", justify="right")
    table.add_column("Postal Prefix", justify="right")
    table.add_column("Restaurants", justify="right")
    for city in cities:
        table.add_row(str(city.id), str(city.postal_code_prefix), str(counts[city.id]))
    console.print(table)


# ---------------------------------------------------------------------------
# restaurant commands
# ---------------------------------------------------------------------------


@restaurant_app.command("add")
def restaurant_add(
    city_id: Annotated[int, typer.Argument(help="Owning city ID")],
    name: Annotated[str, typer.Argument(help="Restaurant name")],
    connection: ConnectionOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Add a restaurant to an existing city."""
    configure_logging(verbose=verbose, quiet=not verbose)
    _run(connection, partial(_restaurant_add_async, city_id=city_id, name=name.strip()))


async def _restaurant_add_async(factory: GuideFactory, city_id: int, name: str) -> None:
    async with factory.create() as context:
        payload = RestaurantCreate(city_id=city_id, name=name)
        restaurant = Restaurant(city_id=payload.city_id, name=payload.name)
        context.restaurants.add(restaurant)
        await context.save_changes()
    console.print(f"[green]Created restaurant {restaurant.id} in city {city_id}.[/green]")


@restaurant_app.command("list")
def restaurant_list(
    city_id: Annotated[int | None, typer.Option("--city-id", help="Only this city")] = None,
    connection: ConnectionOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List restaurants, optionally for one city."""
    configure_logging(verbose=verbose, quiet=not verbose)
    _run(connection, partial(_restaurant_list_async, city_id=city_id))


async def _restaurant_list_async(factory: GuideFactory, city_id: int | None) -> None:
    async with factory.create() as context:
        if city_id is None:
            restaurants = await context.restaurants.to_list()
        else:
            restaurants = await context.restaurants.where(col(Restaurant.city_id) == city_id)

    if not restaurants:
        console.print("[yellow]No restaurants found.[/yellow]")
        return

    table = Table(title="Restaurants")
    table.add_column("ID", justify="right")
    table.add_column("City", justify="right")
    table.add_column("Name")
    for restaurant in restaurants:
        table.add_row(str(restaurant.id), str(restaurant.city_id), restaurant.name)
    console.print(table)


# ---------------------------------------------------------------------------
# config commands
# ---------------------------------------------------------------------------

SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", help="Settings file (default: data/settings.json)"),
]


@config_app.command("show")
def config_show(settings_path: SettingsOption = None) -> None:
    """Show the connection string in effect and the provider it selects."""
    settings = load_settings(settings_path)
    try:
        kind = parse_connection_string(settings.connection_string).kind.value
    except DataAccessError as exc:
        kind = f"invalid ({exc})"
    console.print(f"Connection string: {settings.connection_string}")
    console.print(f"Provider: {kind}")


@config_app.command("set-connection")
def config_set_connection(
    connection_string: Annotated[str, typer.Argument(help="New connection string")],
    settings_path: SettingsOption = None,
) -> None:
    """Store a new connection string after checking it names a known provider."""
    try:
        parsed = parse_connection_string(connection_string)
    except DataAccessError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    save_settings(Settings(connection_string=connection_string.strip()), settings_path)
    console.print(f"[green]Saved {parsed.kind.value} connection string.[/green]")
