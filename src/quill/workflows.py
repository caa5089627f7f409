"""Shared workflow layer between CLI and Telegram.

Builds a session wired to the configured adapters, and renders entries as
markdown for either surface.
"""

from .adapters.file_unlock import FileUnlockStore
from .adapters.openai_chat import OpenAIChatService
from .adapters.supabase_store import SupabaseEntryStore
from .assist import AIAssist
from .config import Config
from .core.dates import format_datetime, format_updated_at
from .core.entries import Entry
from .session import EntrySession


def open_session(config: Config, load: bool = True, remember_unlock: bool = True) -> EntrySession:
    """
    Create a session against Supabase and OpenAI.

    With remember_unlock the session shares the on-disk unlock marker, so a
    PIN entered once stays valid until an explicit lock.
    """
    session = EntrySession(
        store=SupabaseEntryStore(config),
        config=config,
        unlock_store=FileUnlockStore() if remember_unlock else None,
        assist=AIAssist(OpenAIChatService(config), config),
    )
    session.restore_unlock()
    if load:
        session.load()
    return session


def format_entry_line(entry: Entry, selected: bool = False) -> str:
    """One-line summary for entry listings."""
    marker = "*" if selected else " "
    title = entry.title or "Untitled"
    tags = f" [{', '.join(entry.tag_list)}]" if entry.tags else ""
    return f"{marker} {entry.id:>8}  {entry.entry_date.isoformat()}  {title}{tags}"


def render_entry(entry: Entry, tz: str) -> str:
    """Render an entry as markdown."""
    lines = [f"# {entry.title or 'Untitled'}", ""]
    lines.append(f"_{entry.entry_date.strftime('%A, %B %d, %Y')} · created {format_datetime(entry.created_at, tz)}_")
    updated = format_updated_at(entry.updated_at, tz=tz)
    if updated:
        lines.append(f"_{updated}_")
    if entry.tag_list:
        lines.append("")
        lines.append("Tags: " + ", ".join(entry.tag_list))
    lines.append("")
    lines.append(entry.content or "(empty)")
    return "\n".join(lines)
