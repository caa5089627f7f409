"""Supabase adapter - PostgREST client for journal entries."""

import logging
from datetime import date, datetime, timezone

import requests

from quill.config import Config, load_config
from quill.core.entries import Entry, EntryStoreError

logger = logging.getLogger(__name__)


class SupabaseEntryStore:
    """
    Supabase (PostgREST) entry store.

    Implements EntryStore protocol. Rows are normalized into Entry at this
    boundary; no business logic here - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self.base_url = f"{self.config.supabase_url.rstrip('/')}/rest/v1/{self.config.entries_table}"
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": self.config.supabase_key,
                "Authorization": f"Bearer {self.config.supabase_key}",
                "Content-Type": "application/json",
            }
        )

    def _api_request(
        self,
        method: str,
        params: dict | None = None,
        payload: dict | None = None,
        returning: bool = False,
    ) -> list[dict]:
        """Make a PostgREST request and return the decoded rows."""
        if not self.config.supabase_url or not self.config.supabase_key:
            raise EntryStoreError("Missing Supabase credentials. Set SUPABASE_URL and SUPABASE_KEY.")

        headers = {"Prefer": "return=representation"} if returning else {}
        try:
            resp = self._session.request(
                method,
                self.base_url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Supabase {method} failed: {e}")
            raise EntryStoreError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error(f"Supabase {method} returned {resp.status_code}: {resp.text}")
            raise EntryStoreError(f"Supabase returned HTTP {resp.status_code}")

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            raise EntryStoreError("Supabase returned a non-JSON body") from e
        return data if isinstance(data, list) else [data]

    def list_entries(self) -> list[Entry]:
        """All entries, newest created first."""
        rows = self._api_request("GET", params={"select": "*", "order": "created_at.desc"})
        return [Entry.from_row(row) for row in rows]

    def insert_entry(self, title: str, content: str, tags: str, entry_date: date) -> Entry:
        """Insert an entry and return it with its generated id and timestamps."""
        rows = self._api_request(
            "POST",
            payload={
                "title": title,
                "content": content,
                "tags": tags,
                "strict_date": entry_date.isoformat(),
            },
            returning=True,
        )
        if not rows:
            raise EntryStoreError("Insert returned no row")
        return Entry.from_row(rows[0])

    def update_entry(self, entry_id: str, *, title: str, content: str, tags: str) -> Entry:
        """Overwrite title/content/tags and stamp updated_at."""
        rows = self._api_request(
            "PATCH",
            params={"id": f"eq.{entry_id}"},
            payload={
                "title": title,
                "content": content,
                "tags": tags,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            returning=True,
        )
        if not rows:
            raise EntryStoreError(f"No entry with id {entry_id}")
        return Entry.from_row(rows[0])

    def delete_entry(self, entry_id: str) -> None:
        self._api_request("DELETE", params={"id": f"eq.{entry_id}"})
