# app/clients/notes_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from app.config import Settings, settings as default_settings
from app.clients.http_utils import get_http_client

logger = logging.getLogger("app.clients.notes")


@dataclass(frozen=True)
class NotesFound:
    notes: str


@dataclass(frozen=True)
class NotesFallback:
    reason: str
    notes: str = ""


NotesLookup = Union[NotesFound, NotesFallback]


def extract_top_notes(payload: Any) -> Optional[str]:
    """
    Comma-joined `topNotes` of the first dataset item, or None when the
    payload does not have that shape.
    """
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    notes = first.get("topNotes")
    if not isinstance(notes, list):
        return None
    return ", ".join("" if n is None else str(n) for n in notes)


class NotesClient:
    """
    Best-effort top-notes lookup against the Apify fragrantica-scraper task.
    `fetch_top_notes` never raises: every failure becomes a NotesFallback.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_settings
        self._http_client = http_client

    @property
    def path(self) -> str:
        return f"/v2/actor-tasks/{self.config.apify_notes_task}/run-sync-get-dataset-items"

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await get_http_client(self.config.apify_base_url)

    async def fetch_top_notes(self, name: str, token: str) -> NotesLookup:
        body = {"searchText": name, "maxReviewsCount": 1, "resultsCount": 1}
        try:
            client = await self._client()
            resp = await client.post(
                self.path,
                params={"token": token},
                json=body,
                headers={"Content-Type": "application/json"},
            )
            if resp.is_error:
                return self._fallback(name, f"HTTP {resp.status_code}")
            payload = resp.json()
        except httpx.TimeoutException:
            return self._fallback(name, "timeout")
        except httpx.HTTPError as e:
            # the request URL carries the token; log the error type only
            return self._fallback(name, f"transport error ({type(e).__name__})")
        except ValueError:
            return self._fallback(name, "malformed response body")
        except Exception as e:
            return self._fallback(name, f"unexpected error ({type(e).__name__})")

        notes = extract_top_notes(payload)
        if notes is None:
            return self._fallback(name, "no topNotes in response")
        return NotesFound(notes)

    @staticmethod
    def _fallback(name: str, reason: str) -> NotesFallback:
        logger.warning("Top notes lookup for %r fell back to empty: %s", name, reason)
        return NotesFallback(reason)


_notes_client: Optional[NotesClient] = None


def get_notes_client() -> NotesClient:
    global _notes_client
    if _notes_client is None:
        _notes_client = NotesClient()
    return _notes_client
