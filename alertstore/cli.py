"""CLI entry point for Alertstore."""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from alertstore.config import config, get_default_db_path
from alertstore.core.diagnostics import collect_stats
from alertstore.core.models import Alert, AlertState, AlertType, Asset, StatLevel
from alertstore.core.storage import AlertRepository
from alertstore.logging_setup import setup_logging

app = typer.Typer(
    name="alertstore",
    help="Inspect and maintain alert databases.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

DbOption = Annotated[
    Path | None, typer.Option("--db", help="Database file (default: ALERTSTORE_DB_PATH)")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at INFO level")] = False,
) -> None:
    """Alertstore command line."""
    setup_logging("INFO" if verbose else config.LOG_LEVEL, console=err_console)


def open_repo(db: Path | None) -> AlertRepository:
    """Open the database, exiting with status 1 if it cannot be opened."""
    path = db or get_default_db_path()
    repo = AlertRepository()
    if not repo.open(path):
        err_console.print(f"[red]Could not open alert database[/red] {path}")
        raise typer.Exit(code=1)
    return repo


def alert_to_dict(alert: Alert) -> dict[str, object]:
    """Convert an Alert to a JSON-serializable dict."""
    asset_config = alert.asset_configuration
    return {
        "id": alert.id,
        "token": alert.token,
        "type": alert.type_name,
        "state": alert.state.value,
        "scheduled_time_unix": alert.scheduled_time_unix,
        "scheduled_time_iso_8601": alert.scheduled_time_iso_8601,
        "loop_count": alert.loop_count,
        "loop_pause_ms": alert.loop_pause_ms,
        "background_asset": asset_config.background_asset_id,
        "assets": {a.avs_id: a.url for a in asset_config.assets.values()},
        "play_order": list(asset_config.asset_play_order_items),
    }


def parse_asset(value: str) -> Asset:
    """Parse an ``avs_id=url`` pair."""
    avs_id, sep, url = value.partition("=")
    if not sep or not avs_id or not url:
        raise typer.BadParameter(f"Expected avs_id=url, got '{value}'")
    return Asset(avs_id=avs_id, url=url)


@app.command()
def init(db: DbOption = None) -> None:
    """Create a new, empty alert database."""
    path = db or get_default_db_path()
    repo = AlertRepository()
    if not repo.create_database(path):
        err_console.print(f"[red]Could not create alert database[/red] {path}")
        raise typer.Exit(code=1)
    repo.close()
    console.print(f"[green]Created[/green] {path}")


@app.command()
def add(
    token: Annotated[str, typer.Option("--token", "-t", help="Unique alert token")],
    at: Annotated[int, typer.Option("--at", help="Scheduled time, unix seconds")],
    alert_type: Annotated[
        AlertType, typer.Option("--type", case_sensitive=False, help="Alert type")
    ] = AlertType.ALARM,
    state: Annotated[
        AlertState, typer.Option("--state", case_sensitive=False, help="Initial state")
    ] = AlertState.SET,
    loop_count: Annotated[int, typer.Option("--loop-count", min=0)] = 0,
    loop_pause_ms: Annotated[int, typer.Option("--loop-pause-ms", min=0)] = 0,
    background_asset: Annotated[str, typer.Option("--background-asset")] = "",
    asset: Annotated[
        list[str] | None, typer.Option("--asset", "-a", help="Asset as avs_id=url")
    ] = None,
    play: Annotated[
        list[str] | None, typer.Option("--play", "-p", help="Asset token, in play order")
    ] = None,
    db: DbOption = None,
) -> None:
    """Store a new alert."""
    alert = Alert(
        token=token,
        type=alert_type,
        state=state,
        loop_count=loop_count,
        loop_pause_ms=loop_pause_ms,
    )
    alert.set_time_unix(at)
    alert.asset_configuration.background_asset_id = background_asset
    for value in asset or []:
        alert.asset_configuration.add_asset(parse_asset(value))
    alert.asset_configuration.asset_play_order_items = list(play or [])

    with open_repo(db) as repo:
        if not repo.store(alert):
            err_console.print(f"[red]Could not store alert[/red] '{token}'")
            raise typer.Exit(code=1)
    console.print(f"[green]Stored[/green] {alert.type_name} '{token}' with id {alert.id}")


@app.command("list")
def list_alerts(
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    db: DbOption = None,
) -> None:
    """List stored alerts."""
    with open_repo(db) as repo:
        alerts: list[Alert] = []
        if not repo.load(alerts):
            err_console.print("[red]Could not load alerts[/red]")
            raise typer.Exit(code=1)

    if output_json:
        print(json.dumps([alert_to_dict(a) for a in alerts]))
        return

    if not alerts:
        console.print("No alerts stored")
        return
    for alert in alerts:
        console.print(
            f"[cyan]{alert.id}[/cyan] {alert.type_name} [bold]{alert.token}[/bold] "
            f"({alert.state.value})"
        )
        console.print(f"  [dim]{alert.scheduled_time_iso_8601}[/]")


@app.command()
def stats(
    level: Annotated[
        StatLevel, typer.Option("--level", "-l", help="Detail level")
    ] = StatLevel.ONE_LINE,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    db: DbOption = None,
) -> None:
    """Show database statistics."""
    with open_repo(db) as repo:
        if output_json:
            print(json.dumps(repo.get_stats()))
            return
        for line in collect_stats(repo, level):
            console.print(line, markup=False, highlight=False)


@app.command()
def erase(
    ids: Annotated[list[int], typer.Argument(help="Database ids of the alerts to erase")],
    db: DbOption = None,
) -> None:
    """Erase alerts by database id."""
    with open_repo(db) as repo:
        if not repo.erase_ids(ids):
            err_console.print("[red]Could not erase alerts[/red]")
            raise typer.Exit(code=1)
    console.print(f"[green]Erased[/green] {len(ids)} alert(s)")


@app.command()
def clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
    db: DbOption = None,
) -> None:
    """Delete all stored alerts."""
    if not yes:
        typer.confirm("Delete all stored alerts?", abort=True)

    with open_repo(db) as repo:
        if not repo.clear_database():
            err_console.print("[red]Could not clear alert database[/red]")
            raise typer.Exit(code=1)
    console.print("[green]Cleared[/green]")


if __name__ == "__main__":
    app()
