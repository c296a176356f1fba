"""CLI: tempest auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

from tempest_wx.client import AsyncTempest
from tempest_wx.errors import TransportError
from tempest_wx.transport.http import DEFAULT_BASE_URL

console = Console()


def _read_stored() -> dict:
    from tempest_wx.cli.main import _read_stored
    return _read_stored()


def _load_config() -> dict:
    from tempest_wx.cli.main import _load_config
    return _load_config()


def _env_source(key: str) -> Optional[str]:
    from tempest_wx.cli.main import _env_source
    return _env_source(key)


def _save_config(cfg: dict) -> None:
    from tempest_wx.cli.main import _save_config
    _save_config(cfg)


def _run(coro):
    from tempest_wx.cli.main import _run
    return _run(coro)


@click.group()
def auth():
    """Cloud access token commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="WeatherFlow REST base URL")
@click.option("--token", default=None, help="Personal access token (prompted if omitted)")
def auth_login(base_url: Optional[str], token: Optional[str]):
    """Verify and store a personal access token."""

    async def _login():
        stored = _read_stored()
        url = base_url or stored.get("base_url", DEFAULT_BASE_URL)
        access_token = token or click.prompt("Personal access token", hide_input=True)
        client = AsyncTempest(token=access_token, base_url=url)
        try:
            with console.status("Verifying token..."):
                stations = await client.cloud.stations()
        except TransportError as e:
            console.print(f"[red]Token rejected: {e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        console.print(f"[green]Token accepted ({len(stations)} station(s) visible).[/green]")

        _save_config({**stored, "token": access_token, "base_url": url})
        console.print("[dim]Token saved to ~/.tempest/config.json[/dim]")

    _run(_login())


@auth.command("status")
def auth_status():
    """Show which token is in effect and where it comes from."""
    cfg = _load_config()
    base_url = cfg.get("base_url", DEFAULT_BASE_URL)
    env = _env_source("token")
    if env:
        console.print(f"[green]Token from {env}[/green] for {base_url}")
    elif cfg.get("token"):
        console.print(f"[green]Token stored[/green] for {base_url}")
    else:
        console.print("[yellow]No token stored. Run `tempest auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear the stored token."""
    stored = _read_stored()
    stored.pop("token", None)
    _save_config(stored)
    console.print("[green]Token cleared.[/green]")
    env = _env_source("token")
    if env:
        console.print(f"[yellow]{env} is still set and will be used.[/yellow]")
