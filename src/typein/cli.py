"""typein CLI - one journal entry per day, from the terminal."""

import json
import logging
import sys
from pathlib import Path

import click

from .adapters.kv_entries import EntryNotFoundError, KeyValueEntryStore
from .config import load_config
from .core.entries import content_preview
from .core.status import status_line
from .session import EditorSession, open_session

HELP_TEXT = """Type text to add a line. Commands:
  :u  undo        :r  redo
  :w  save        :e  edit in $EDITOR
  :p  print       :s  status
  :q  save and quit"""


def _session(ctx: click.Context) -> EditorSession:
    """Lazily open the session for this invocation."""
    if "session" not in ctx.obj:
        ctx.obj["session"] = open_session(ctx.obj["config"], ctx.obj["data_dir"])
    return ctx.obj["session"]


def _entries(session: EditorSession) -> KeyValueEntryStore:
    return session.entries


def _save(session: EditorSession) -> None:
    if not session.save():
        click.echo("Warning: save failed, changes kept in memory.", err=True)


@click.group()
@click.version_option()
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Storage directory (overrides DATA_DIR in typein.conf)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, data_dir: Path | None, debug: bool):
    """typein - a quiet place to type things."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else config.log_level,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["data_dir"] = data_dir


@main.command()
@click.pass_context
def write(ctx):
    """Interactive writing session on the active entry."""
    session = _session(ctx)
    autosave = ctx.obj["config"].autosave

    click.echo(session.content, nl=False)
    if session.content and not session.content.endswith("\n"):
        click.echo()
    click.echo(HELP_TEXT)

    while True:
        try:
            line = click.prompt("", default="", show_default=False, prompt_suffix="> ")
        except click.Abort:
            click.echo()
            break

        match line.strip():
            case ":q":
                break
            case ":u":
                if not session.snapshot.can_undo:
                    click.echo("Nothing to undo.")
                    continue
                session.undo()
            case ":r":
                if not session.snapshot.can_redo:
                    click.echo("Nothing to redo.")
                    continue
                session.redo()
            case ":w":
                _save(session)
                click.echo(status_line(session.snapshot))
                continue
            case ":e":
                edited = click.edit(session.content)
                if edited is None:
                    click.echo("No changes.")
                    continue
                session.set_content(edited)
            case ":p":
                click.echo(session.content)
                continue
            case ":s":
                click.echo(status_line(session.snapshot))
                continue
            case ":h" | ":help":
                click.echo(HELP_TEXT)
                continue
            case _:
                text = session.content
                if text and not text.endswith("\n"):
                    text += "\n"
                session.set_content(text + line + "\n")

        if autosave and session.is_dirty:
            _save(session)

    if session.is_dirty:
        _save(session)
    click.echo(status_line(session.snapshot))


@main.command()
@click.pass_context
def edit(ctx):
    """Edit the active entry in $EDITOR."""
    session = _session(ctx)
    edited = click.edit(session.content)
    if edited is None or edited == session.content:
        click.echo("No changes.")
        return
    session.set_content(edited)
    _save(session)
    click.echo(status_line(session.snapshot))


@main.command()
@click.pass_context
def show(ctx):
    """Print the active entry."""
    session = _session(ctx)
    if not session.content.strip():
        click.echo("Entry is empty.")
        return
    click.echo(session.content.rstrip("\n"))


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(ctx, as_json: bool):
    """List entries, newest first."""
    session = _session(ctx)
    entries = _entries(session).list_entries()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "date": e.date,
                        "active": e.id == session.entry_id,
                        "preview": content_preview(e.content),
                    }
                    for e in entries
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    for entry in entries:
        marker = "*" if entry.id == session.entry_id else " "
        when = entry.created.strftime("%a %b %d")
        click.echo(f"{marker} {entry.id[:8]}  {when}  {content_preview(entry.content)}")


@main.command()
@click.pass_context
def new(ctx):
    """Start a new entry and make it active."""
    session = _session(ctx)
    entry = _entries(session).create()
    session.load()
    click.echo(f"Created entry {entry.id[:8]}")


@main.command("open")
@click.argument("entry_id")
@click.pass_context
def open_cmd(ctx, entry_id: str):
    """Make ENTRY_ID (or a unique prefix) the active entry."""
    session = _session(ctx)
    session.save_if_dirty()
    try:
        entry = _entries(session).select(entry_id)
    except EntryNotFoundError:
        click.echo(f"Error: no unique entry matching {entry_id!r}", err=True)
        sys.exit(1)
    session.load()
    click.echo(f"Opened {entry.id[:8]} - {content_preview(entry.content)}")


@main.command()
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, entry_id: str, yes: bool):
    """Delete ENTRY_ID (or a unique prefix)."""
    session = _session(ctx)
    store = _entries(session)
    try:
        entry = store.resolve(entry_id)
    except EntryNotFoundError:
        click.echo(f"Error: no unique entry matching {entry_id!r}", err=True)
        sys.exit(1)

    if not yes:
        click.confirm(f"Delete entry {entry.id[:8]} ({content_preview(entry.content)})?", abort=True)

    current = store.delete(entry.id)
    session.load()
    click.echo(f"Deleted {entry.id[:8]}. Active entry: {current.id[:8]}")


@main.command()
@click.pass_context
def status(ctx):
    """Show word and character counts for the active entry."""
    session = _session(ctx)
    # Save times live only in a running session.
    click.echo(status_line(session.snapshot, show_saved=False))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def inspect(ctx, as_json: bool):
    """Decode the stored editor state."""
    blob = _session(ctx).stored_blob()
    if blob is None:
        click.echo("No saved editor state.")
        return

    if as_json:
        click.echo(json.dumps(blob.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Content: {content_preview(blob.content)}")
    click.echo(f"History: {len(blob.history)} entries, position {blob.history_index}")


if __name__ == "__main__":
    main()
