"""CLI for the ghdrive proxy."""

import asyncio
import logging
import sys

import click
from dotenv import load_dotenv
from ghstore import FileStore, StoreConfig

from .settings import ConfigError, ProxySettings

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_store() -> FileStore:
    """Build a store from GITHUB_* variables, exiting on missing config."""
    load_dotenv()
    try:
        config = StoreConfig.from_env()
    except KeyError as e:
        raise click.ClickException(f"{e.args[0]} is not defined") from e
    return FileStore.from_config(config)


# ============ CLI Group ============

@click.group()
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
def cli(verbose: int) -> None:
    """Serve and inspect files stored in a GitHub repository."""
    setup_logging(verbose)


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, help="Listen port (default: $PORT or 8000)")
def serve(host: str, port: int | None) -> None:
    """Run the HTTP proxy."""
    import uvicorn

    from .app import create_app

    try:
        settings = ProxySettings.from_env()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    port = port or settings.port
    click.echo(f"listening on {port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


# ============ Store Commands ============

@cli.command()
@click.argument("path")
def exists(path: str) -> None:
    """Check whether PATH exists (exit code 1 if not)."""
    store = load_store()
    found = asyncio.run(store.exist(path))
    click.echo("exist" if found else "missing")
    if not found:
        sys.exit(1)


@cli.command()
@click.argument("path")
@click.option("--raw", "use_raw", is_flag=True, help="Read from the raw mirror")
def cat(path: str, use_raw: bool) -> None:
    """Print the content of PATH."""
    store = load_store()
    if use_raw:
        content = asyncio.run(store.raw(path))
    else:
        record = asyncio.run(store.get(path))
        content = record.content if record else None
    if content is None:
        click.echo(f"Not found: {path}", err=True)
        sys.exit(1)
    click.echo(content, nl=False)


if __name__ == "__main__":
    cli()
