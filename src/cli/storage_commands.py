"""Attachment storage maintenance commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from src.app.core.services import DbSessionService
from src.app.core.services.attachment import audit_storage, prune_orphans
from src.app.core.storage import AttachmentStore
from src.app.entities.service.book import BookRepository
from src.app.runtime.context import get_config

console = Console()

storage_app = typer.Typer(help="Inspect and repair attachment storage")


@storage_app.command("check")
def check_storage(
    prune: bool = typer.Option(
        False, "--prune", help="Remove files that no book references (run while the API is idle)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Compare attachment metadata with the files on disk."""
    store = AttachmentStore(get_config().attachments)
    database = DbSessionService()
    try:
        with database.session_scope() as session:
            audit = audit_storage(BookRepository(session), store)
    finally:
        database.dispose()

    if audit.clean:
        console.print("[green]✅ Attachment storage is consistent[/green]")
        return

    table = Table(title=f"Attachment storage in {store.root}")
    table.add_column("Problem", style="yellow")
    table.add_column("Book", style="cyan")
    table.add_column("File", style="magenta")
    for name in audit.orphaned_files:
        table.add_row("orphaned file", "-", name)
    for book_id, name in audit.missing_files.items():
        table.add_row("missing file", book_id, name)
    for book_id, name in audit.size_mismatches.items():
        table.add_row("size mismatch", book_id, name)
    console.print(table)

    if prune and audit.orphaned_files:
        if not force and not Confirm.ask(
            f"Remove {len(audit.orphaned_files)} orphaned file(s)?"
        ):
            console.print("[yellow]Nothing removed[/yellow]")
        else:
            removed = prune_orphans(audit, store)
            console.print(f"[green]Removed {removed} orphaned file(s)[/green]")

    if audit.missing_files or audit.size_mismatches:
        raise typer.Exit(code=1)
