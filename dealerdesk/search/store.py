"""Entity store access over the PostgREST interface."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

import httpx

if TYPE_CHECKING:
    from dealerdesk.config.schema import StoreConfig

Row = dict[str, Any]


class StoreQueryFailed(Exception):
    """Raised when an entity store query cannot be completed."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table
        self.message = message


class EntityStore(Protocol):
    """Read-only query shape the search adapters depend on."""

    async def search_text(
        self,
        table: str,
        *,
        select: str,
        fields: Sequence[str],
        query: str,
        limit: int,
    ) -> list[Row]:
        """Rows where any of `fields` contains `query`, case-insensitively."""
        ...

    async def find_exact(
        self,
        table: str,
        *,
        select: str,
        field: str,
        value: Any,
        limit: int,
    ) -> list[Row]:
        """Rows where `field` equals `value`."""
        ...


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text is matched literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def quote_filter_value(text: str) -> str:
    """Double-quote a value for use inside a PostgREST logic filter."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_ilike_any(fields: Sequence[str], query: str) -> str:
    """Build an `or=(...)` filter matching `query` as a substring of any field."""
    pattern = quote_filter_value(f"*{escape_like(query)}*")
    return "(" + ",".join(f"{name}.ilike.{pattern}" for name in fields) + ")"


class PostgrestEntityStore:
    """EntityStore backed by a Supabase/PostgREST endpoint."""

    _ENV_URL = "SUPABASE_URL"
    _ENV_KEY = "SUPABASE_KEY"

    def __init__(self, config: StoreConfig | None = None):
        from dealerdesk.config.schema import StoreConfig

        self.config = config or StoreConfig()

    async def search_text(
        self,
        table: str,
        *,
        select: str,
        fields: Sequence[str],
        query: str,
        limit: int,
    ) -> list[Row]:
        params = {
            "select": select,
            "or": build_ilike_any(fields, query),
            "limit": str(limit),
        }
        return await self._get(table, params)

    async def find_exact(
        self,
        table: str,
        *,
        select: str,
        field: str,
        value: Any,
        limit: int,
    ) -> list[Row]:
        params = {
            "select": select,
            field: f"eq.{value}",
            "limit": str(limit),
        }
        return await self._get(table, params)

    async def _get(self, table: str, params: dict[str, str]) -> list[Row]:
        base_url = (self.config.url or os.environ.get(self._ENV_URL, "")).rstrip("/")
        if not base_url:
            raise StoreQueryFailed(
                table, f"store url not configured (set store.url or {self._ENV_URL})"
            )
        api_key = self.config.api_key or os.environ.get(self._ENV_KEY, "")

        headers = {
            "Accept": "application/json",
            "Accept-Profile": self.config.schema_name,
        }
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{base_url}/rest/v1/{table}",
                    params=params,
                    headers=headers,
                    timeout=self.config.timeout_s,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise StoreQueryFailed(table, str(e) or type(e).__name__) from e

        payload = response.json()
        if not isinstance(payload, list):
            raise StoreQueryFailed(table, f"unexpected response shape: {type(payload).__name__}")
        return payload
