from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import format_tstamp, render_feeds
from services.signing import firmware_key_declaration


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for submitting and charting station readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="API base URL (defaults to API_BASE_URL env or http://localhost:5000).",
    ),
    key: Optional[str] = typer.Option(
        None,
        "--key",
        "-k",
        help="Shared HMAC key used to sign submissions (defaults to STATION_HMAC_KEY env).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, hmac_key=key, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="Identifier of the reporting station."),
    temperature: float = typer.Option(..., "--temperature", "-t", help="Temperature reading."),
    humidity: float = typer.Option(..., "--humidity", "-H", help="Relative humidity reading."),
) -> None:
    """Sign and submit one reading, as a station would."""
    state = _get_state(ctx)
    state.client.submit_reading(station_id, temperature, humidity)
    typer.secho(f"Reading accepted for station={station_id}", fg=typer.colors.GREEN)


@app.command("since")
def since_command(
    ctx: typer.Context,
    from_ms: int = typer.Argument(..., min=0, help="Exclusive lower bound in epoch milliseconds."),
) -> None:
    """Show decimated feeds newer than a timestamp."""
    state = _get_state(ctx)
    render_feeds(state.client.feeds_since(from_ms))


@app.command("range")
def range_command(
    ctx: typer.Context,
    from_ms: int = typer.Argument(..., min=0, help="Exclusive lower bound in epoch milliseconds."),
    to_ms: int = typer.Argument(..., min=0, help="Exclusive upper bound in epoch milliseconds."),
) -> None:
    """Show decimated feeds strictly between two timestamps."""
    state = _get_state(ctx)
    render_feeds(state.client.feeds_in_range(from_ms, to_ms))


@app.command("epoch")
def epoch_command(ctx: typer.Context) -> None:
    """Print the server clock."""
    state = _get_state(ctx)
    epoch = state.client.epoch()
    typer.echo(f"epoch: {epoch} ({format_tstamp(epoch)})")


@app.command("firmware-key")
def firmware_key_command(ctx: typer.Context) -> None:
    """Print the signing key as a C declaration for station firmware."""
    state = _get_state(ctx)
    if not state.config.hmac_key:
        typer.secho("No HMAC key configured (--key or STATION_HMAC_KEY).", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(firmware_key_declaration(state.config.hmac_key))
