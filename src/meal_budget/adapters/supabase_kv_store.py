"""Supabase-backed key-value store."""

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from meal_budget.adapters.kv_household_repository import KeyValueStore
from meal_budget.domain.errors import StorageError


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores values in a ``key text primary key, value jsonb`` table.

    Transport and PostgREST failures surface as ``StorageError``.
    """

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> object | None:
        """Return the value stored under a key."""
        try:
            response = (
                self.client.table(self.table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except (httpx.HTTPError, APIError) as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: object) -> None:
        """Insert or replace the value under a key."""
        try:
            self.client.table(self.table).upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            ).execute()
        except (httpx.HTTPError, APIError) as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        """Remove a key."""
        try:
            self.client.table(self.table).delete().eq("key", key).execute()
        except (httpx.HTTPError, APIError) as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc
