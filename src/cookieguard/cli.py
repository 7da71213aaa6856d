"""CLI entry point for cookieguard."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from cookieguard import __version__
from cookieguard.dom.snapshot import SnapshotError
from cookieguard.scanner import ScanResult, scan_file, scan_url
from cookieguard.schemas.settings import Settings, SettingsError, load_settings


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


@click.command()
@click.argument("source")
@click.option(
    "-f", "--format", "fmt",
    type=click.Choice(["text", "md", "json", "pdf"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "-o", "--output",
    type=click.Path(resolve_path=True),
    default=None,
    help="Output file path. Defaults to stdout, or cookieguard-report.pdf for pdf.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    default=None,
    help="YAML settings file.",
)
@click.option(
    "--url-label",
    default=None,
    help="URL to record in the report when SOURCE is a saved HTML file.",
)
@click.option("--mailto", is_flag=True, default=False, help="Also print a complaint e-mail link.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
@click.version_option(version=__version__)
def main(
    source: str,
    fmt: str,
    output: str | None,
    config_path: str | None,
    url_label: str | None,
    mailto: bool,
    verbose: bool,
) -> None:
    """Check the cookie consent banner of SOURCE (an HTML file or http(s) URL) for dark patterns."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        settings = load_settings(Path(config_path) if config_path else None)
    except SettingsError as e:
        raise click.ClickException(str(e))

    result = _scan(source, settings, url_label)

    fmt = fmt.lower()
    if fmt == "json":
        _output_json(result, output)
    elif fmt == "pdf":
        _output_pdf(result, output, settings)
    elif fmt == "md":
        _output_md(result, output, settings)
    else:
        _output_text(result, output, settings)

    if mailto:
        from cookieguard.render.mailto import render_mailto
        click.echo(render_mailto(result, settings.report))


def _scan(source: str, settings: Settings, url_label: str | None) -> ScanResult:
    try:
        if _is_url(source):
            return scan_url(source, settings)
        path = Path(source)
        if not path.is_file():
            raise click.ClickException(f"No such file: {source}")
        return scan_file(path, settings, url=url_label)
    except (SnapshotError, ImportError, OSError) as e:
        raise click.ClickException(str(e))


def _write_or_echo(text: str, output: str | None, label: str) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"{label} written to {output}")
    else:
        click.echo(text)


def _output_text(result: ScanResult, output: str | None, settings: Settings) -> None:
    from cookieguard.render.text import render_text
    _write_or_echo(render_text(result, settings.report), output, "Report")


def _output_md(result: ScanResult, output: str | None, settings: Settings) -> None:
    from cookieguard.render.markdown import render_markdown
    _write_or_echo(render_markdown(result, settings.report), output, "Report")


def _output_pdf(result: ScanResult, output: str | None, settings: Settings) -> None:
    from cookieguard.render.pdf import render_pdf
    dest = Path(output) if output else Path("cookieguard-report.pdf")
    try:
        render_pdf(result, dest, settings.report)
    except ImportError as e:
        raise click.ClickException(str(e))
    click.echo(f"PDF report written to {dest}")


def _output_json(result: ScanResult, output: str | None) -> None:
    data = {
        "url": result.url,
        "source": result.source,
        "passes": result.passes,
        "scanned_at": result.scanned_at.isoformat(),
        "detection": result.detection.model_dump(mode="json"),
        "summary": result.summary.model_dump(mode="json"),
    }
    _write_or_echo(json.dumps(data, indent=2, ensure_ascii=False), output, "JSON report")


if __name__ == "__main__":
    main()
