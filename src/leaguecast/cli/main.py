"""LeagueCast CLI — run the server and poke at a running one.

Usage:
    leaguecast serve                              # Start the API + WebSocket server
    leaguecast players                            # List players
    leaguecast add-player "Kovács Béla" kb@x.hu --age 24
    leaguecast delete-player 7
    leaguecast standings                          # Team table
    leaguecast notify kb@x.hu "Training" "Moved to 18:00"
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from leaguecast import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("LEAGUECAST_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the LeagueCast backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    Transport failures (server down, timeouts) exit 1 with a red error line.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        run = asyncio.run
    else:
        def run(c):
            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, c).result()
    try:
        return run(coro)
    except httpx.HTTPError as e:
        click.secho(f"Error: request to {_api_url()} failed ({e!r})", fg="red", err=True)
        sys.exit(1)


def _check(r: httpx.Response) -> None:
    """Exit with the server's error detail on a non-2xx response."""
    if r.is_success:
        return
    try:
        body = r.json()
    except ValueError:
        body = None
    detail = body.get("detail", r.text) if isinstance(body, dict) else r.text
    click.secho(f"Error {r.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(
            str("—" if row.get(k) is None else row[k])[:w].ljust(w)
            for _, k, w in columns
        )
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="leaguecast")
def main():
    """LeagueCast — league data with a live player feed."""


@main.command()
def serve():
    """Start the server (host/port/keepalive from LEAGUECAST_* env vars)."""
    from leaguecast.main import run

    run()


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------


@main.command()
def players():
    """List all players."""
    _run(_players_impl())


async def _players_impl():
    async with _client() as c:
        r = await c.get("/players")
        _check(r)
        rows = r.json()

    if not rows:
        click.echo("No players.")
        return
    _print_table(rows, [("ID", "id", 5), ("NAME", "name", 24), ("AGE", "age", 4), ("EMAIL", "email", 30)])


@main.command("add-player")
@click.argument("name")
@click.argument("email")
@click.option("--age", type=int, help="Player age")
def add_player(name: str, email: str, age: Optional[int]):
    """Create a player (connected clients see it immediately)."""
    _run(_add_player_impl(name, email, age))


async def _add_player_impl(name: str, email: str, age: Optional[int]):
    async with _client() as c:
        r = await c.post("/players", json={"name": name, "email": email, "age": age})
        _check(r)
        player = r.json()
    click.secho(f"Created player #{player['id']}: {player['name']}", fg="green")


@main.command("delete-player")
@click.argument("player_id", type=int)
def delete_player(player_id: int):
    """Delete a player by id."""
    _run(_delete_player_impl(player_id))


async def _delete_player_impl(player_id: int):
    async with _client() as c:
        r = await c.delete(f"/players/{player_id}")
        _check(r)
    click.secho(f"Deleted player #{player_id}", fg="green")


# ---------------------------------------------------------------------------
# League
# ---------------------------------------------------------------------------


@main.command()
def standings():
    """Show the team table, best first."""
    _run(_standings_impl())


async def _standings_impl():
    async with _client() as c:
        r = await c.get("/teams")
        _check(r)
        teams = r.json()

    teams.sort(key=lambda t: (-t["points"], -t["wins"], t["teamName"]))
    _print_table(
        teams,
        [
            ("TEAM", "teamName", 16),
            ("CLUB", "clubName", 10),
            ("P", "matchesPlayed", 3),
            ("W", "wins", 3),
            ("D", "draws", 3),
            ("L", "losses", 3),
            ("PTS", "points", 4),
        ],
    )


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.argument("title")
@click.argument("body")
def notify(email: str, title: str, body: str):
    """Push a notification to the device registered for EMAIL."""
    _run(_notify_impl(email, title, body))


async def _notify_impl(email: str, title: str, body: str):
    async with _client() as c:
        r = await c.post(
            "/send_fcm_notification",
            json={"targetEmail": email, "title": title, "body": body},
        )
        _check(r)
        status = r.json()["status"]
    color = "green" if status == "sent" else "yellow"
    click.secho(f"Notification {status}", fg=color)
