"""
Persistence for decks, progress and the recent-sets list.

Everything goes through a string-keyed KeyValueStore holding JSON blobs.
MemoryStore keeps them in a dict; SqliteStore additionally tracks pending
writes and flushes them to the kv_store table, so callers of CardStorage
stay synchronous.

Corrupt blobs are logged and read back as "nothing saved".
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol, Sequence

import aiosqlite
from pydantic import TypeAdapter, ValidationError

from app.config import settings
from app.db.sqlite import delete_value, get_all_values, set_value
from app.models.card import Card
from app.models.deck import CardPreview, Progress, RecentSet, SavedCardSet

logger = logging.getLogger(__name__)

CARDS_KEY = "markdown-flashcards"
PROGRESS_KEY = "markdown-flashcards-progress"
RECENT_KEY = "markdown-flashcards-recent"
RAW_KEY = "markdown-flashcards-raw"

_RecentSetsAdapter = TypeAdapter(list[RecentSet])


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, data: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteStore(MemoryStore):
    """MemoryStore mirrored to SQLite. Writes are queued until flush()."""

    def __init__(self) -> None:
        super().__init__()
        self._pending: dict[str, str | None] = {}  # None = delete

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self._pending[key] = value

    def remove(self, key: str) -> None:
        super().remove(key)
        self._pending[key] = None

    @property
    def dirty(self) -> bool:
        return bool(self._pending)

    async def load(self, db: aiosqlite.Connection) -> None:
        self._data = await get_all_values(db)
        self._pending.clear()

    async def flush(self, db: aiosqlite.Connection) -> None:
        if not self._pending:
            return
        pending, self._pending = self._pending, {}
        for key, value in pending.items():
            if value is None:
                await delete_value(db, key, commit=False)
            else:
                await set_value(db, key, value, commit=False)
        await db.commit()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class CardStorage:
    """Logical entries (cards, progress, recent sets, raw text) over a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        recent_limit: int | None = None,
        preview_cards: int | None = None,
        preview_front_chars: int | None = None,
    ):
        self.store = store
        self.recent_limit = recent_limit or settings.recent_sets_limit
        self.preview_cards = preview_cards or settings.preview_cards
        self.preview_front_chars = preview_front_chars or settings.preview_front_chars

    # --- Cards ---

    def save_cards(self, cards: Sequence[Card], title: str | None = None) -> SavedCardSet:
        saved = SavedCardSet(
            title=title or settings.default_set_title,
            cards=list(cards),
            timestamp=_now_iso(),
        )
        self.store.set(CARDS_KEY, saved.model_dump_json(by_alias=True))
        self._save_to_recent(saved)
        return saved

    def load_cards(self) -> SavedCardSet | None:
        raw = self.store.get(CARDS_KEY)
        if raw is None:
            return None
        try:
            return SavedCardSet.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring corrupt saved card set: %s", e)
            return None

    # --- Progress ---

    def save_progress(self, correct_count: int, incorrect_count: int) -> Progress:
        progress = Progress(
            correct_count=correct_count,
            incorrect_count=incorrect_count,
            timestamp=_now_iso(),
        )
        self.store.set(PROGRESS_KEY, progress.model_dump_json(by_alias=True))
        return progress

    def load_progress(self) -> Progress | None:
        raw = self.store.get(PROGRESS_KEY)
        if raw is None:
            return None
        try:
            return Progress.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring corrupt saved progress: %s", e)
            return None

    def clear_progress(self) -> None:
        self.store.remove(PROGRESS_KEY)

    # --- Recent sets ---

    def get_recent_sets(self) -> list[RecentSet]:
        raw = self.store.get(RECENT_KEY)
        if raw is None:
            return []
        try:
            return _RecentSetsAdapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring corrupt recent sets list: %s", e)
            return []

    def _save_to_recent(self, saved: SavedCardSet) -> None:
        card_count = len(saved.cards)
        # Same title and size counts as the same set: move it to the front
        recent = [
            r
            for r in self.get_recent_sets()
            if not (r.title == saved.title and r.card_count == card_count)
        ]
        summary = RecentSet(
            title=saved.title,
            card_count=card_count,
            timestamp=_now_iso(),
            preview=[
                CardPreview(
                    type=card.type,
                    front=_truncate(card.front, self.preview_front_chars),
                )
                for card in saved.cards[: self.preview_cards]
            ],
        )
        recent.insert(0, summary)
        recent = recent[: self.recent_limit]
        self.store.set(
            RECENT_KEY,
            _RecentSetsAdapter.dump_json(recent, by_alias=True).decode("utf-8"),
        )

    # --- Raw document ---

    def save_raw_markdown(self, markdown: str) -> None:
        self.store.set(RAW_KEY, markdown)

    def load_raw_markdown(self) -> str | None:
        return self.store.get(RAW_KEY)

    def clear_all(self) -> None:
        """Drop saved cards, progress and raw text. Recent sets are kept."""
        for key in (CARDS_KEY, PROGRESS_KEY, RAW_KEY):
            self.store.remove(key)
