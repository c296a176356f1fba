"""CLI: tempest decode, tempest listen"""

import json
import sys
from typing import Any, Optional, Union

import click
from rich.console import Console
from rich.table import Table

from tempest_wx.decoder import classify_and_decode
from tempest_wx.errors import DecodeError, TransportError
from tempest_wx.models.record import Record

console = Console()


def _get_client(**kwargs):
    from tempest_wx.cli.main import _get_client
    return _get_client(**kwargs)


def _run(coro):
    from tempest_wx.cli.main import _run
    return _run(coro)


def _flatten(data: Any, prefix: str = "") -> list[tuple[str, Any]]:
    if isinstance(data, dict):
        rows: list[tuple[str, Any]] = []
        for key, value in data.items():
            rows.extend(_flatten(value, f"{prefix}{key}."))
        return rows
    if isinstance(data, (list, tuple)) and data and isinstance(data[0], dict):
        rows = []
        for i, value in enumerate(data):
            rows.extend(_flatten(value, f"{prefix.rstrip('.')}[{i}]."))
        return rows
    return [(prefix.rstrip("."), data)]


def result_json(result: Union[Record, DecodeError]) -> dict[str, Any]:
    if isinstance(result, DecodeError):
        return {"error": result.code, "message": str(result), "details": result.details}
    return result.model_dump(mode="json")


def print_result(result: Union[Record, DecodeError], json_output: bool, source: Optional[str] = None) -> None:
    if json_output:
        click.echo(json.dumps(result_json(result)))
        return
    if isinstance(result, DecodeError):
        where = f" ({source})" if source else ""
        console.print(f"[red]{result.code}{where}:[/red] {result}")
        return
    title = f"{result.type}" + (f" from {source}" if source else "")
    table = Table(title=title)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in _flatten(result.model_dump(exclude={"type"})):
        table.add_row(name, "" if value is None else str(value))
    console.print(table)


@click.command("decode")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--json-output", "--json", is_flag=True)
def decode_cmd(source, json_output: bool):
    """Decode newline-delimited envelopes from FILE (default stdin)."""
    failed = 0
    for lineno, line in enumerate(source, 1):
        if not line.strip():
            continue
        result = classify_and_decode(line)
        if isinstance(result, DecodeError):
            failed += 1
        print_result(result, json_output, source=f"line {lineno}")
    if failed:
        sys.exit(1)


@click.command("listen")
@click.option("--host", default=None, help="Bind address (default 0.0.0.0)")
@click.option("--port", default=None, type=int, help="UDP port (default 50222)")
@click.option("-n", "--count", default=10, type=int, help="Stop after N datagrams (0 = forever)")
@click.option("--timeout", default=None, type=float, help="Stop after S idle seconds")
@click.option("--json-output", "--json", is_flag=True)
def listen_cmd(host: Optional[str], port: Optional[int], count: int, timeout: Optional[float], json_output: bool):
    """Print decoded hub UDP broadcasts."""

    async def _listen():
        client = _get_client(host=host, port=port)
        if not json_output:
            console.print("[dim]Listening for hub broadcasts (Ctrl+C to stop)[/dim]")
        try:
            async for reception in client.listen(count=count or None, timeout=timeout):
                print_result(reception.result, json_output, source=reception.source[0])
        except TransportError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        finally:
            await client.close()

    try:
        _run(_listen())
    except KeyboardInterrupt:
        pass
