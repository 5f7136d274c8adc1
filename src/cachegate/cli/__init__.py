"""CLI commands for cachegate.

Provides command-line interface using Typer:
- cachegate serve: Run the API server
- cachegate fetch: Fetch a key through the cache once
- cachegate invalidate: Remove a key from the cache

Usage:
    cachegate --help
    cachegate serve --port 8080
    cachegate fetch posts --ttl 60
    cachegate fetch k1 --ttl 30 --payload '{"x": 1}'
    cachegate invalidate posts
"""

import typer

from cachegate.cli.cache_cmd import fetch, invalidate
from cachegate.cli.serve import app as serve_app

# Main CLI application
app = typer.Typer(
    name="cachegate",
    help="cachegate: cache-aside HTTP gateway",
    no_args_is_help=True,
)

# Add subcommands
app.add_typer(serve_app, name="serve")
app.command("fetch")(fetch)
app.command("invalidate")(invalidate)


@app.callback()
def callback() -> None:
    """cachegate: cache-aside HTTP gateway."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
