"""Quill CLI - PIN-locked journal."""

import json
import logging
import sys

import click

from .config import load_config
from .session import EntrySession
from .workflows import format_entry_line, open_session, render_entry


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_unlocked() -> EntrySession:
    """Open a session, failing unless a remembered unlock is in place."""
    config = load_config()
    session = open_session(config)
    if session.is_locked:
        _fail("Journal is locked. Run 'quill unlock' first.")
    if session.error:
        _fail(session.error)
    return session


def _resolve(session: EntrySession, assume_yes: bool = False) -> None:
    """Ask the user about a pending confirmation, then accept or cancel it."""
    pending = session.gate.pending
    if pending is None:
        return
    if assume_yes or click.confirm(pending.prompt, default=False):
        session.gate.accept()
    else:
        session.gate.cancel()
        click.echo("Cancelled.")


def _select_or_fail(session: EntrySession, entry_id: str) -> None:
    try:
        session.select(entry_id)
    except KeyError:
        _fail(f"No entry with id {entry_id}")


@click.group()
@click.version_option(package_name="quill-journal")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Quill - PIN-locked personal journal."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.option("--remember/--no-remember", default=True, help="Stay unlocked until 'quill lock'")
def unlock(remember: bool):
    """Unlock the journal with your PIN."""
    config = load_config()
    session = open_session(config, load=False)

    if not session.is_locked:
        click.echo("Journal is already unlocked.")
        return

    pin = click.prompt("PIN", hide_input=True)
    if not session.unlock(pin, remember=remember):
        _fail(session.error)
    click.echo("Unlocked.")


@main.command()
def lock():
    """Lock the journal."""
    config = load_config()
    session = open_session(config, load=False)
    session.lock()
    click.echo("Locked.")


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_entries(as_json: bool):
    """List entries, newest first."""
    session = _open_unlocked()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "title": e.title,
                        "tags": e.tag_list,
                        "date": e.entry_date.isoformat(),
                        "created_at": e.created_at.isoformat(),
                        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
                    }
                    for e in session.entries
                ],
                indent=2,
            )
        )
        return

    if not session.entries:
        click.echo("No entries yet. Run 'quill new' to start one.")
        return

    for entry in session.entries:
        click.echo(format_entry_line(entry))


@main.command()
@click.argument("entry_id")
def show(entry_id: str):
    """Show one entry."""
    session = _open_unlocked()
    _select_or_fail(session, entry_id)
    click.echo(render_entry(session.selected_entry, session.config.timezone))


@main.command()
def new():
    """Create an empty entry dated today."""
    session = _open_unlocked()
    entry = session.add()
    if entry is None:
        _fail(session.error or "Failed to add new entry")
    click.echo(f"Created entry {entry.id} for {entry.entry_date.isoformat()}.")


@main.command()
@click.argument("entry_id")
@click.option("--title", help="New title")
@click.option("--content", help="New content ('-' reads stdin)")
@click.option("--tags", help="Comma-separated tags")
@click.option("--suggest-title", is_flag=True, help="Generate the title from the content")
@click.option("--suggest-tags", is_flag=True, help="Generate tags from the content")
def edit(
    entry_id: str,
    title: str | None,
    content: str | None,
    tags: str | None,
    suggest_title: bool,
    suggest_tags: bool,
):
    """Edit an entry and save it."""
    session = _open_unlocked()
    _select_or_fail(session, entry_id)

    if content == "-":
        content = sys.stdin.read()
    for field, value in (("title", title), ("content", content), ("tags", tags)):
        if value is not None:
            session.mutate_draft(field, value)

    # A failed suggestion leaves the field as typed; the rest still saves
    if suggest_title and not session.suggest_title():
        click.echo(f"Warning: {session.assist.error}", err=True)
    if suggest_tags and not session.suggest_tags():
        click.echo(f"Warning: {session.assist.error}", err=True)

    if not session.has_unsaved_changes:
        click.echo("Nothing to save.")
        return

    if not session.save():
        _fail(session.error)
    click.echo(f"Saved entry {entry_id}.")
    if suggest_title or suggest_tags:
        click.echo(f"Title: {session.draft.title}")
        click.echo(f"Tags: {session.draft.tags}")


@main.command()
@click.argument("entry_id")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Delete without asking")
def delete(entry_id: str, assume_yes: bool):
    """Delete an entry."""
    session = _open_unlocked()
    try:
        session.delete(entry_id)
    except KeyError:
        _fail(f"No entry with id {entry_id}")

    _resolve(session, assume_yes)
    if session.error:
        _fail(session.error)
    if all(e.id != entry_id for e in session.entries):
        click.echo(f"Deleted entry {entry_id}.")


@main.command()
def bot():
    """Run the Telegram bot."""
    from .telegram_bot import run_bot

    try:
        run_bot()
    except ValueError as e:
        _fail(str(e))
