"""payloadpack CLI application with Typer."""

import io
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from payloadpack import __version__
from payloadpack.app import PayloadService
from payloadpack.bootstrap import bootstrap_application
from payloadpack.config import Settings, get_settings
from payloadpack.utils import compute_sha256

app = typer.Typer(
    name="payloadpack",
    help="Package generated artifacts into deterministic zip archives, trees, or text dumps",
    add_completion=True,
    no_args_is_help=True,
)

PrefixOption = Annotated[
    str | None,
    typer.Option("--prefix", "-p", help="Contents prefix prepended to every file name"),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"payloadpack version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str | int) -> None:
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_payload(
    source: Path, prefix: str | None, settings: Settings | None = None
) -> PayloadService:
    """Bootstrap the application and collect ``source`` into a new payload."""
    container = bootstrap_application(settings)
    resolved = source.resolve()
    if not resolved.is_dir():
        typer.secho(f"Error: Directory not found: {resolved}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    payload = container.new_payload(prefix)
    count = payload.collect_directory(resolved, workers=container.settings.collect_workers)
    typer.secho(f"Collected {count} files from {resolved}", err=True)
    return payload


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr"),
    ] = False,
) -> None:
    """payloadpack - deterministic payload packaging."""
    settings = get_settings()
    _configure_logging(logging.DEBUG if verbose else settings.log_level.upper())


@app.command("zip")
def zip_command(
    source: Annotated[Path, typer.Argument(help="Directory whose files form the payload")],
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Archive path, or '-' for stdout"),
    ] = "-",
    prefix: PrefixOption = None,
    manifest_version: Annotated[
        str | None,
        typer.Option("--manifest-version", help="Version recorded in manifest/manifest.json"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail the archive when any file cannot be added"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the archive report as JSON (to stderr with -o -)"),
    ] = False,
) -> None:
    """Write the payload as a zip archive."""
    updates: dict[str, str] = {}
    if manifest_version is not None:
        updates["manifest_version"] = manifest_version
    if strict:
        updates["failure_policy"] = "strict"
    settings = get_settings().model_copy(update=updates)

    payload = _load_payload(source, prefix, settings)

    if output == "-":
        report = payload.write_zip(sys.stdout.buffer)
        digest = None
    else:
        sink = io.BytesIO()
        report = payload.write_zip(sink)
        digest = compute_sha256(sink.getvalue()) if report.success else None
        if report.success:
            destination = Path(output)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(sink.getvalue())

    if json_output:
        typer.echo(
            json.dumps({**report.model_dump(mode="json"), "sha256": digest}, indent=2),
            err=output == "-",
        )

    if not report.success:
        typer.secho(f"Error: archive not written ({report.error})", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    for name in report.skipped:
        typer.secho(f"Warning: skipped {name}", fg=typer.colors.YELLOW, err=True)
    if output != "-" and not json_output:
        typer.secho(f"✓ Archive written: {output}", fg=typer.colors.GREEN)
        typer.echo(f"  Entries: {len(report.entries)}")
        typer.echo(f"  Size: {report.size} bytes")
        typer.echo(f"  SHA-256: {digest}")


@app.command("plain")
def plain_command(
    source: Annotated[Path, typer.Argument(help="Directory whose files form the payload")],
    output: Annotated[Path, typer.Option("--output", "-o", help="Destination directory")],
    prefix: PrefixOption = None,
) -> None:
    """Write the payload as a plain directory tree."""
    payload = _load_payload(source, prefix)
    report = payload.write_plain(output.resolve())

    for name in report.failed:
        typer.secho(f"Error: unable to write {name}", fg=typer.colors.RED, err=True)
    typer.echo(f"Wrote {len(report.written)} files to {report.root}")
    if not report.success:
        raise typer.Exit(code=1)


@app.command("dump")
def dump_command(
    source: Annotated[Path, typer.Argument(help="Directory whose files form the payload")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the dump to a file instead of stdout"),
    ] = None,
    prefix: PrefixOption = None,
) -> None:
    """Print a human-readable dump of the payload."""
    payload = _load_payload(source, prefix)
    if output is None:
        payload.write_plain_stream(sys.stdout.buffer)
        return

    with output.open("wb") as handle:
        payload.write_plain_stream(handle)


@app.command("ls")
def ls_command(
    source: Annotated[Path, typer.Argument(help="Directory whose files form the payload")],
    prefix: PrefixOption = None,
) -> None:
    """List payload file names in output order."""
    payload = _load_payload(source, prefix)
    for key in payload.ordered_file_names():
        typer.echo(str(key))


if __name__ == "__main__":
    app()
