"""
StackBlitz BFF command line.

    stackblitz-bff serve [--host HOST] [--port PORT] [--reload] [--json-logs]
    stackblitz-bff schema [--output FILE]
    stackblitz-bff --version
"""

from __future__ import annotations

import os
import platform
from pathlib import Path

import typer

from stackblitz_bff import __version__

APP_FACTORY = "stackblitz_bff.graphql.integration:create_graphql_app"

app = typer.Typer(
    help="GraphQL gateway for the StackBlitz REST API.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"stackblitz-bff {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """StackBlitz BFF main callback for global options."""
    pass


@app.command("serve")
def serve_command(
    host: str | None = typer.Option(
        None, "--host", help="Interface to bind (default: STACKBLITZ_BFF_HOST or 127.0.0.1)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to listen on (default: STACKBLITZ_BFF_PORT or 8000)"
    ),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload (dev only)"),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Log JSON lines instead of text (STACKBLITZ_BFF_LOG_JSON)"
    ),
) -> None:
    """Serve the GraphQL endpoint with uvicorn."""
    import uvicorn

    from stackblitz_bff.config import get_settings
    from stackblitz_bff.logging import setup_logging

    if json_logs:
        # Inherited by the server process, which configures its own logging
        os.environ["STACKBLITZ_BFF_LOG_JSON"] = "true"
        get_settings.cache_clear()

    try:
        settings = get_settings()
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    logger = setup_logging(settings.log_level, json_output=settings.log_json)

    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info(f"Starting stackblitz-bff {__version__}")
    logger.info(f"  Backend: {settings.api_url}")
    logger.info(f"  GraphQL: http://{bind_host}:{bind_port}/graphql")

    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("schema")
def schema_command(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the SDL to this file instead of stdout"
    ),
) -> None:
    """Print the GraphQL schema (SDL)."""
    from stackblitz_bff.graphql.integration import print_schema

    sdl = print_schema()
    if output is None:
        typer.echo(sdl)
    else:
        output.write_text(sdl + "\n", encoding="utf-8")
        typer.echo(f"Schema written to {output}")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
