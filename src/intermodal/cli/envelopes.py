"""CLI: intermodal inspect|wrap"""

import json
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from intermodal.codec import Format, encode, load
from intermodal.errors import IntermodalError
from intermodal.models.envelope import Envelope, Header
from intermodal.models.manifest import Manifest

console = Console()

FORMATS = click.Choice([f.value for f in Format])


def _load_config() -> dict:
    from intermodal.cli.main import _load_config
    return _load_config()


def _parse_labels(pairs: tuple[str, ...]) -> dict[str, str]:
    labels: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--label")
        labels[key] = value
    return labels


@click.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=FORMATS, default=None, help="Override format detection")
@click.option("--json-output", "--json", is_flag=True)
def inspect_cmd(path: Path, fmt: Optional[str], json_output: bool):
    """Show the manifest of an envelope file."""
    try:
        header = load(path, Header, Format(fmt) if fmt else None)
    except IntermodalError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(encode(header, Format.JSON, indent=2))
        return

    m = header.manifest
    table = Table(title=str(path))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("domain", m.domain)
    table.add_row("scope", m.scope)
    table.add_row("kind", m.kind)
    table.add_row("version", str(m.version))
    table.add_row("origin", m.origin)
    table.add_row("ctime", m.ctime.isoformat())
    for key in sorted(m.labels):
        table.add_row(f"labels.{key}", m.labels[key])
    console.print(table)


@click.command("wrap")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--kind", required=True)
@click.option("--version", "schema_version", required=True, type=click.IntRange(min=0))
@click.option("--scope", default=None)
@click.option("--domain", default=None)
@click.option("--origin", default=None)
@click.option("--label", "labels", multiple=True, help="key=value, repeatable")
@click.option("--format", "fmt", type=FORMATS, default=Format.JSON.value, help="Output format")
def wrap_cmd(
    path: Path,
    kind: str,
    schema_version: int,
    scope: Optional[str],
    domain: Optional[str],
    origin: Optional[str],
    labels: tuple[str, ...],
    fmt: str,
):
    """Wrap a JSON/YAML payload file in an envelope and print it."""
    cfg = _load_config()
    values = {
        "domain": domain or cfg.get("domain"),
        "scope": scope or cfg.get("scope", ""),
        "origin": origin or cfg.get("origin"),
    }
    missing = [k for k, v in values.items() if v is None]
    if missing:
        console.print(
            f"[red]Missing {', '.join(missing)}. Pass the option or run `intermodal config set`.[/red]"
        )
        raise SystemExit(1)

    try:
        raw = path.read_text()
        payload = yaml.safe_load(raw) if Format.from_path(path) is Format.YAML else json.loads(raw)
    except (IntermodalError, yaml.YAMLError, ValueError) as exc:
        console.print(f"[red]Cannot read payload: {escape(str(exc))}[/red]")
        raise SystemExit(1)

    manifest = Manifest.create(kind=kind, version=schema_version, labels=_parse_labels(labels), **values)
    envelope = Envelope(manifest=manifest, payload=payload)
    output = encode(envelope, Format(fmt), indent=2)
    click.echo(output, nl=not output.endswith("\n"))
