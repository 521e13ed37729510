from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def format_tstamp(tstamp: Any) -> str:
    if not isinstance(tstamp, int):
        return str(tstamp)
    moment = datetime.fromtimestamp(tstamp / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def render_feeds(feeds: Iterable[Dict[str, Any]]) -> None:
    rows = list(feeds)
    echo_heading(f"Station Feeds ({len(rows)})")
    if not rows:
        typer.echo("No feeds in range.")
        return

    for feed in rows:
        typer.echo(
            f"  - {format_tstamp(feed.get('tstamp'))} "
            f"station={feed.get('stationId')} "
            f"temperature={feed.get('temperature')} "
            f"humidity={feed.get('humidity')} "
            f"id={feed.get('id')}"
        )
