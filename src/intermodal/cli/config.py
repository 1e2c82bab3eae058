"""CLI: intermodal config show|set"""

import click
from rich.console import Console

console = Console()

KEYS = ("domain", "origin", "scope")


def _load_config() -> dict:
    from intermodal.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from intermodal.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Defaults used by `intermodal wrap`."""


@config.command("show")
def config_show():
    """Show saved defaults."""
    cfg = _load_config()
    if not cfg:
        console.print("[yellow]No defaults set. Run `intermodal config set`.[/yellow]")
        return
    for key in KEYS:
        if key in cfg:
            console.print(f"{key} = {cfg[key]}")


@config.command("set")
@click.argument("key", type=click.Choice(KEYS))
@click.argument("value")
def config_set(key: str, value: str):
    """Save a default value."""
    cfg = _load_config()
    _save_config({**cfg, key: value})
    console.print(f"[green]{key} set to {value}[/green]")
