"""
intermodal CLI — `intermodal` command.

Commands:
  intermodal inspect <file>          Show the manifest of an envelope
  intermodal wrap <payload-file>     Wrap a payload in an envelope
  intermodal config show|set         CLI defaults for domain/origin
"""

import json
import logging
import os
from pathlib import Path

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install intermodal[cli]")

console = Console()
_LOGGING_CONFIGURED = False


def config_path() -> Path:
    override = os.environ.get("INTERMODAL_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".intermodal" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(config_path().read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


def _configure_logging(verbose: bool) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    _LOGGING_CONFIGURED = True


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(verbose: bool):
    """intermodal CLI — inspect and build message envelopes."""
    _configure_logging(verbose)


# Register subcommands from separate modules
from intermodal.cli.config import config
from intermodal.cli.envelopes import inspect_cmd, wrap_cmd

main.add_command(config)
main.add_command(inspect_cmd)
main.add_command(wrap_cmd)


if __name__ == "__main__":
    main()
