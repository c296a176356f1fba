"""
tempest CLI: `tempest` command.

Commands:
  tempest decode [FILE]       Decode newline-delimited envelopes
  tempest listen              Print decoded hub UDP broadcasts
  tempest auth login          Store a cloud personal access token
  tempest cloud <cmd>         Cloud REST queries

Settings come from ~/.tempest/config.json; TEMPEST_TOKEN and
TEMPEST_BASE_URL override the stored values without rewriting the file.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install tempest-wx[cli]")

from tempest_wx.client import AsyncTempest
from tempest_wx.transport.http import DEFAULT_BASE_URL
from tempest_wx.transport.udp import DEFAULT_HOST, DEFAULT_PORT

console = Console()
CONFIG_FILE = Path.home() / ".tempest" / "config.json"
ENV_OVERRIDES = {"TEMPEST_TOKEN": "token", "TEMPEST_BASE_URL": "base_url"}


def _read_stored() -> dict[str, Any]:
    """Settings as saved on disk; {} when the file is absent or unreadable."""
    try:
        stored = json.loads(CONFIG_FILE.read_text())
    except (OSError, ValueError):
        return {}
    return stored if isinstance(stored, dict) else {}


def _save_config(cfg: dict[str, Any]) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _env_source(key: str) -> Optional[str]:
    """Name of the environment variable currently overriding ``key``, if any."""
    for var, name in ENV_OVERRIDES.items():
        if name == key and os.environ.get(var):
            return var
    return None


def _load_config() -> dict[str, Any]:
    """Effective settings: stored values with environment overrides applied."""
    cfg = _read_stored()
    for var, key in ENV_OVERRIDES.items():
        if os.environ.get(var):
            cfg[key] = os.environ[var]
    return cfg


def _get_client(require_token: bool = False, host: Optional[str] = None, port: Optional[int] = None) -> AsyncTempest:
    cfg = _load_config()
    if require_token and not cfg.get("token"):
        console.print("[red]No access token. Run `tempest auth login` or set TEMPEST_TOKEN.[/red]")
        raise SystemExit(1)
    return AsyncTempest(
        token=cfg.get("token"),
        base_url=cfg.get("base_url", DEFAULT_BASE_URL),
        host=host or DEFAULT_HOST,
        port=port or cfg.get("port", DEFAULT_PORT),
    )


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
def main(verbose: bool):
    """tempest: decode WeatherFlow Tempest hub telemetry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands from separate modules
from tempest_wx.cli.auth import auth
from tempest_wx.cli.cloud import cloud
from tempest_wx.cli.decode import decode_cmd, listen_cmd

main.add_command(auth)
main.add_command(cloud)
main.add_command(decode_cmd)
main.add_command(listen_cmd)


if __name__ == "__main__":
    main()
