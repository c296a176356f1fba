"""CLI: tempest cloud stations|obs"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from tempest_wx.errors import DecodeError, TransportError

console = Console()


def _get_client():
    from tempest_wx.cli.main import _get_client
    return _get_client(require_token=True)


def _run(coro):
    from tempest_wx.cli.main import _run
    return _run(coro)


@click.group()
def cloud():
    """Cloud REST queries (requires `tempest auth login`)."""


@cloud.command("stations")
@click.option("--json-output", "--json", is_flag=True)
def cloud_stations(json_output: bool):
    """List stations and their devices."""

    async def _stations():
        client = _get_client()
        try:
            with console.status("Fetching stations..."):
                stations = await client.cloud.stations()
        except TransportError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        if json_output:
            click.echo(json.dumps(stations, indent=2))
            return
        table = Table(title=f"Stations ({len(stations)})")
        table.add_column("Station", style="bold")
        table.add_column("Device ID")
        table.add_column("Type")
        table.add_column("Serial")
        for s in stations:
            for d in s.get("devices", []):
                table.add_row(s.get("name", ""), str(d.get("device_id", "")),
                              d.get("device_type", ""), d.get("serial_number", ""))
        console.print(table)

    _run(_stations())


@cloud.command("obs")
@click.argument("device_id", type=int)
@click.option("--serial", "serial_number", default=None, help="Device serial number, e.g. ST-00028405 (default: from station listing)")
@click.option("--hub", "hub_sn", default=None, help="Hub serial number, e.g. HB-00027548 (default: from station listing)")
@click.option("--json-output", "--json", is_flag=True)
def cloud_obs(device_id: int, serial_number: Optional[str], hub_sn: Optional[str], json_output: bool):
    """Fetch and decode the latest observation for DEVICE_ID."""
    from tempest_wx.cli.decode import print_result

    async def _obs():
        client = _get_client()
        try:
            with console.status("Fetching observation..."):
                result = await client.device_observations(device_id, serial_number, hub_sn)
        except TransportError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()
        print_result(result, json_output, source=f"device {device_id}")
        if isinstance(result, DecodeError):
            raise SystemExit(1)

    _run(_obs())
