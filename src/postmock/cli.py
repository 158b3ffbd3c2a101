"""CLI entry point for postmock."""

import logging
import sys
from pathlib import Path

import click
import uvicorn

from postmock.parser.base import ApiSpecification, FormatError
from postmock.parser.detect import load_specification
from postmock.parser.reader import InputNotFoundError, ParseError, file_size
from postmock.server.app import HEALTH_PATH, ServerOptions, create_app
from postmock.server.delay import validate_delay_range

STARTUP_ERRORS = (InputNotFoundError, ParseError, FormatError)


def _validate_delay(ctx, param, value: str) -> str:
    value = (value or "").strip() or "0"
    try:
        return validate_delay_range(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _delay_value(value: str) -> str:
    """value_proc for the interactive delay prompt; UsageError makes click ask again."""
    value = value.strip() or "0"
    try:
        return validate_delay_range(value)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


def _load(input_path: Path) -> ApiSpecification:
    try:
        return load_specification(input_path)
    except STARTUP_ERRORS as e:
        raise click.ClickException(f"Failed to start server: {e}") from e


def _prompt_options(input_path: Path | None, options: ServerOptions) -> tuple[Path, ServerOptions]:
    """Ask for every setting, using the current values as defaults."""
    click.echo(click.style("Welcome to postmock!", fg="blue"))
    click.echo(click.style("Mock API servers from Postman collections or OpenAPI specs\n", fg="bright_black"))

    path = click.prompt(
        "Path to your Postman collection (.json) or OpenAPI spec (.yaml/.json)",
        default=str(input_path) if input_path else None,
        type=click.Path(path_type=Path),
    )
    port = click.prompt("Port", default=options.port, type=click.IntRange(1, 65535))
    delay = click.prompt(
        "Simulated delay in milliseconds (e.g. 100-300, 0 for none)",
        default=options.delay,
        value_proc=_delay_value,
    )
    dynamic = click.confirm("Generate random responses for every request?", default=options.dynamic)
    cors = click.confirm("Enable CORS for cross-origin requests?", default=options.cors)
    hot_reload = click.confirm("Watch the file and restart on changes?", default=options.hot_reload)

    return path, options.model_copy(
        update={"port": port, "delay": delay, "dynamic": dynamic, "cors": cors, "hot_reload": hot_reload}
    )


def _print_banner(spec: ApiSpecification, options: ServerOptions) -> None:
    base_url = f"http://{options.host}:{options.port}"
    click.echo(click.style("\nMock API server is running!", fg="green"))
    click.echo(click.style(f"Server URL: {base_url}", fg="blue"))
    click.echo(click.style(f"Health check: {base_url}{HEALTH_PATH}", fg="blue"))
    click.echo(click.style(f"Total endpoints: {len(spec.endpoints)}", fg="bright_black"))
    click.echo(click.style("\nPress Ctrl+C to stop the server\n", fg="bright_black"))
    for ep in spec.endpoints:
        click.echo(click.style(f"  {ep.method:<6} {ep.path}", fg="cyan"))


def _serve(input_path: Path, options: ServerOptions) -> None:
    """Run the server; with hot reload, re-parse and restart on every file change."""
    while True:
        spec = _load(input_path)
        state = {"restart": False, "server": None}

        def on_change():
            click.echo(click.style("File changed, restarting server...", fg="yellow"))
            state["restart"] = True
            state["server"].should_exit = True

        try:
            app = create_app(spec, options, input_path=input_path, on_change=on_change)
        except FormatError as e:
            raise click.ClickException(f"Failed to start server: {e}") from e

        server = uvicorn.Server(uvicorn.Config(app, host=options.host, port=options.port, log_level="warning"))
        state["server"] = server
        _print_banner(spec, options)
        server.run()

        if not state["restart"]:
            click.echo(click.style("Server stopped", fg="green"))
            return


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """postmock: serve mock JSON APIs from Postman collections and OpenAPI specs."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


@main.command()
@click.argument("input_path", required=False, type=click.Path(path_type=Path))
@click.option("--host", default="127.0.0.1", show_default=True, envvar="POSTMOCK_HOST", help="Interface to bind.")
@click.option("-p", "--port", default=4000, show_default=True, type=click.IntRange(1, 65535), envvar="POSTMOCK_PORT", help="Port to listen on.")
@click.option("-d", "--delay", default="0", show_default=True, callback=_validate_delay, envvar="POSTMOCK_DELAY", help="Response delay in ms, or a min-max range.")
@click.option("--dynamic/--static", default=False, show_default=True, envvar="POSTMOCK_DYNAMIC", help="Random responses on every request.")
@click.option("--cors/--no-cors", default=True, show_default=True, envvar="POSTMOCK_CORS", help="Allow cross-origin requests.")
@click.option("--hot-reload/--no-hot-reload", default=False, show_default=True, envvar="POSTMOCK_HOT_RELOAD", help="Restart when the input file changes.")
@click.option("-i", "--interactive", is_flag=True, help="Prompt for every setting.")
def serve(input_path: Path | None, host: str, port: int, delay: str, dynamic: bool, cors: bool, hot_reload: bool, interactive: bool):
    """Start a mock server for INPUT_PATH (prompts for settings if omitted)."""
    options = ServerOptions(host=host, port=port, delay=delay, dynamic=dynamic, cors=cors, hot_reload=hot_reload)
    if interactive or input_path is None:
        input_path, options = _prompt_options(input_path, options)

    click.echo(click.style("\nStarting postmock...", fg="blue"))
    click.echo(click.style(f"Input file: {input_path} ({file_size(input_path)})", fg="bright_black"))
    click.echo(click.style(f"Port: {options.port}", fg="bright_black"))
    click.echo(click.style(f"Dynamic responses: {'Yes' if options.dynamic else 'No'}", fg="bright_black"))
    if options.delay != "0":
        click.echo(click.style(f"Delay simulation: {options.delay}ms", fg="bright_black"))

    _serve(input_path, options)


@main.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
def endpoints(input_path: Path):
    """List the endpoints INPUT_PATH would serve."""
    spec = _load(input_path)
    version = f" v{spec.version}" if spec.version else ""
    click.echo(f"{spec.name}{version} ({spec.type}): {len(spec.endpoints)} endpoints")
    for ep in spec.endpoints:
        click.echo(f"  {ep.method:<7} {ep.path}  {ep.description}")
