from __future__ import annotations
import json
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table
from rich import box
from .config import NotesConfig, write_default_config
from .db import DB
from .errors import ConfigError, SummarizeNoteError
from .functions import summarize_note
from .logging_utils import setup_logging
from .summarizer import summarize as summarize_text

app = typer.Typer(help="Notes with extractive summaries")
console = Console()

def _cfg(ctx: typer.Context) -> NotesConfig:
    return ctx.obj or NotesConfig.from_env()

def _open_db(ctx: typer.Context, db_path: Optional[Path]) -> DB:
    return DB(db_path or Path(_cfg(ctx).db_path))

def _short(text: Optional[str], width: int = 60) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= width else text[: width - 1] + "…"

@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="JSON config file"),
    log_level: Optional[str] = typer.Option(None, help="Override log level"),
):
    try:
        cfg = NotesConfig.load(config_path) if config_path else None
        cfg = NotesConfig.from_env(base=cfg)
    except ConfigError as ex:
        typer.echo(f"Config error: {ex}")
        raise typer.Exit(code=2)
    if log_level:
        cfg.log_level = log_level.upper()
    setup_logging(cfg.log_level, cfg.log_path or None)
    ctx.obj = cfg

@app.command()
def init(
    ctx: typer.Context,
    config_path: Path = typer.Option("notes.json", help="Where to create config"),
    db_path: Optional[Path] = typer.Option(None, help="SQLite file"),
):
    """Create default config and SQLite DB."""
    write_default_config(config_path)
    db_file = db_path or Path(_cfg(ctx).db_path)
    DB(db_file).close()
    console.print(f"[green]Created[/green] {config_path} and {db_file}")

@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Note title"),
    content: Optional[str] = typer.Option(None, help="Note body (read from stdin when omitted)"),
    user: str = typer.Option("anonymous", help="Owner id"),
    db_path: Optional[Path] = typer.Option(None),
    summarize: Optional[bool] = typer.Option(None, "--summarize/--no-summarize", help="Store a summary right away"),
):
    """Create a note."""
    cfg = _cfg(ctx)
    if content is None:
        content = typer.get_text_stream("stdin").read()
    want_summary = cfg.auto_summarize if summarize is None else summarize
    summary = summarize_text(content, cfg.default_sentences) if want_summary else None
    db = _open_db(ctx, db_path)
    try:
        r = db.create_note(user, title, content, summary)
    finally:
        db.close()
    console.print(f"[green]Created[/green] note {r['id']}")

@app.command("list")
def list_cmd(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, help="Only this owner's notes"),
    search: Optional[str] = typer.Option(None, help="Match title or content"),
    limit: Optional[int] = typer.Option(None),
    db_path: Optional[Path] = typer.Option(None),
):
    """List notes, most recently updated first."""
    db = _open_db(ctx, db_path)
    try:
        rows = db.list_notes(user, limit=limit or _cfg(ctx).list_limit, search=search)
    finally:
        db.close()
    if not rows:
        console.print("[yellow]No notes[/yellow]")
        return
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    for c in ("id", "title", "summary", "updated_at"):
        table.add_column(c)
    for r in rows:
        table.add_row(r["id"], _short(r["title"], 30), _short(r["summary"]), r["updated_at"])
    console.print(table)

@app.command()
def show(
    ctx: typer.Context,
    note_id: str = typer.Argument(...),
    user: Optional[str] = typer.Option(None),
    db_path: Optional[Path] = typer.Option(None),
):
    """Print one note."""
    db = _open_db(ctx, db_path)
    try:
        r = db.get_note(note_id, user)
    finally:
        db.close()
    if not r:
        typer.echo("Note not found")
        raise typer.Exit(code=1)
    console.print(f"[bold]{r['title']}[/bold]  ({r['id']})")
    if r["summary"]:
        console.print(f"[cyan]Summary:[/cyan] {r['summary']}")
    console.print(r["content"], markup=False)

@app.command()
def edit(
    ctx: typer.Context,
    note_id: str = typer.Argument(...),
    title: Optional[str] = typer.Option(None),
    content: Optional[str] = typer.Option(None),
    clear_summary: bool = typer.Option(False, help="Drop the stored summary"),
    user: Optional[str] = typer.Option(None),
    db_path: Optional[Path] = typer.Option(None),
):
    """Change a note's title or content."""
    fields = {"summary": None} if clear_summary else {}
    db = _open_db(ctx, db_path)
    try:
        r = db.update_note(note_id, user, title=title, content=content, **fields)
    finally:
        db.close()
    if not r:
        typer.echo("Note not found")
        raise typer.Exit(code=1)
    console.print(f"[green]Updated[/green] note {note_id}")

@app.command()
def delete(
    ctx: typer.Context,
    note_id: str = typer.Argument(...),
    user: Optional[str] = typer.Option(None),
    db_path: Optional[Path] = typer.Option(None),
):
    """Delete a note."""
    db = _open_db(ctx, db_path)
    try:
        deleted = db.delete_note(note_id, user)
    finally:
        db.close()
    if not deleted:
        typer.echo("Note not found")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted[/green] note {note_id}")

@app.command()
def summarize(
    ctx: typer.Context,
    note_id: Optional[str] = typer.Argument(None, help="Note to summarize and update"),
    text: Optional[str] = typer.Option(None, help="Summarize this text instead of a note"),
    stdin: bool = typer.Option(False, "--stdin", help="Summarize text read from stdin"),
    sentences: Optional[int] = typer.Option(None, help="Number of sentences (1-2)"),
    db_path: Optional[Path] = typer.Option(None),
):
    """Create extractive summaries."""
    n = sentences if sentences is not None else _cfg(ctx).default_sentences
    if text is not None or stdin:
        source = text if text is not None else typer.get_text_stream("stdin").read()
        console.print(summarize_text(source, n), markup=False)
        return
    if not note_id:
        typer.echo("Provide a note id, --text or --stdin")
        raise typer.Exit(code=2)

    db = _open_db(ctx, db_path)
    try:
        result = summarize_note(db, note_id, n)
    except SummarizeNoteError as ex:
        typer.echo(f"Error ({ex.status_code}): {ex.message}")
        raise typer.Exit(code=1)
    finally:
        db.close()
    console.print(result["summary"], markup=False)

@app.command("stats")
def stats_cmd(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(None),
):
    """Show DB stats."""
    db = _open_db(ctx, db_path)
    try:
        s = db.stats()
    finally:
        db.close()
    table = Table(title="Notes Stats", box=box.SIMPLE)
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    for k, v in s.items():
        table.add_row(k, str(v))
    console.print(table)

@app.command()
def export(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(None),
    outfile: Path = typer.Option("notes.json"),
    fmt: str = typer.Option("json", help="json|csv"),
    user: Optional[str] = typer.Option(None),
):
    """Export notes."""
    import csv
    db = _open_db(ctx, db_path)
    try:
        rows = [dict(r) for r in db.list_notes(user, limit=-1)]
    finally:
        db.close()

    if fmt == "json":
        outfile.write_text(json.dumps(rows, indent=2))
        console.print(f"[green]Wrote[/green] {outfile}")
        return
    if fmt != "csv":
        typer.echo(f"Unknown format: {fmt}")
        raise typer.Exit(code=2)

    keys = ["id", "user_id", "title", "content", "summary", "created_at", "updated_at"]
    with outfile.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=keys)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k) or "" for k in keys})
    console.print(f"[green]Wrote[/green] {outfile}")

@app.command()
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1"),
    port: int = typer.Option(8000),
):
    """Run the HTTP API."""
    import uvicorn
    from .server.main import create_app
    uvicorn.run(create_app(_cfg(ctx)), host=host, port=port)

def main():
    app()

if __name__ == "__main__":
    main()
