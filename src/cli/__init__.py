"""Main CLI application module."""

import typer

from .admin_commands import db_app, token_app
from .storage_commands import storage_app

# Create the main CLI application
app = typer.Typer(
    help="Bookshelf API maintenance tool",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(db_app, name="db")
app.add_typer(token_app, name="token")
app.add_typer(storage_app, name="storage")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
