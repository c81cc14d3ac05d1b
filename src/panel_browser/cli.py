"""Command line interface for panel-browser."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .config import load_config
from .factory import build_browser, build_notifier
from .orchestrator.runner import ScriptRunner

app = typer.Typer(help="Drive the control panel over HTTP like a logged-in browser")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("panel-browser"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def run(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML script configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    session_id: Annotated[
        Optional[str],
        typer.Option("--sid", help="Resume an existing ASP.NET session id."),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Per-request timeout in seconds."),
    ] = None,
    notify: Annotated[
        Optional[str],
        typer.Option("--notify", help="Notification channels, e.g. 'console,log'."),
    ] = None,
) -> None:
    """Run every configured step against one panel session."""

    overrides: dict[str, Any] = {}
    if session_id:
        overrides["session_id"] = session_id
    if timeout is not None:
        overrides["transport"] = {"timeout": timeout}
    if notify:
        overrides["notifications"] = {"channel": notify}

    config = load_config(config_path, env_file=env_file, **overrides)
    if not config.steps:
        typer.echo("No steps configured.", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Loaded {len(config.steps)} step(s)")

    browser = build_browser(config.transport)
    notifier = build_notifier(config.notifications)

    runner = ScriptRunner(config=config, browser=browser, notifier=notifier)
    success = runner.run()
    sid = browser.info.sid()
    if sid:
        typer.echo(f"Session id: {sid}")
    if not success:
        raise typer.Exit(code=1)
    typer.echo("Script completed successfully.")


if __name__ == "__main__":
    app()
