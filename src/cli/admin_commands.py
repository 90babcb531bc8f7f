"""Database bootstrap and development token commands."""

import typer
from rich.console import Console

from src.app.core.services import JwtGeneratorService
from src.app.runtime.context import get_config
from src.app.runtime.init_db import init_db

console = Console()

db_app = typer.Typer(help="Manage the bookshelf database")
token_app = typer.Typer(help="Mint access tokens for local development")


@db_app.command("init")
def init_database() -> None:
    """Create the book table and the attachment directory."""
    config = get_config()
    try:
        init_db()
    except Exception as e:
        console.print(f"[red]❌ Database initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]✅ Database ready[/green] ({config.database.url}), "
        f"attachments in [cyan]{config.attachments.directory}[/cyan]"
    )


@token_app.command("create")
def create_token(
    owner_id: str = typer.Argument(..., help="Owner id to place in the sub claim"),
    expires_in: int | None = typer.Option(
        None, "--expires-in", "-e", help="Lifetime in seconds (defaults to config)"
    ),
    email: str | None = typer.Option(None, "--email", help="Optional email claim"),
) -> None:
    """Print a signed bearer token for ``owner_id``."""
    if get_config().app.environment == "production":
        console.print("[red]❌ Refusing to mint tokens in production[/red]")
        raise typer.Exit(code=1)

    extra = {"email": email} if email else {}
    token = JwtGeneratorService().generate_access_token(
        owner_id, expires_in_seconds=expires_in, **extra
    )
    console.print(f"[green]Bearer token for {owner_id}[/green]")
    console.print(token, soft_wrap=True, highlight=False)
