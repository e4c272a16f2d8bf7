"""
Deck router.

Endpoints:
  GET    /deck/sample        — starter markdown document
  POST   /deck/parse         — parse markdown without touching the deck
  POST   /deck/load          — parse, load into the deck, save as current set
  GET    /deck/current       — active card + stats
  POST   /deck/next|prev     — move and return the new active card
  POST   /deck/shuffle       — shuffle the current view
  POST   /deck/filter        — show one card type ("all" restores)
  POST   /deck/correct|incorrect — tally and save progress
  POST   /deck/reset-stats   — zero tallies, drop saved progress
  GET    /deck/stats
  POST   /deck/restore       — reload the saved set and progress
  GET    /deck/recent        — recently loaded sets
  GET    /deck/raw           — last loaded markdown
  DELETE /deck/saved         — forget saved set, progress and markdown
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Request

from app.db.sqlite import get_db
from app.models.deck import (
    DeckStats,
    DeckView,
    FilterRequest,
    MarkdownRequest,
    ParseResult,
    RecentSet,
)
from app.services.deck import DeckController
from app.services.markdown_parser import parse_document
from app.services.sample import SAMPLE_MARKDOWN
from app.services.storage import CardStorage, SqliteStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_deck(request: Request) -> DeckController:
    return request.app.state.deck


def get_storage(deck: DeckController = Depends(get_deck)) -> CardStorage:
    assert deck.storage is not None, "Deck has no storage attached"
    return deck.storage


async def flush_storage(storage: CardStorage, db: aiosqlite.Connection) -> None:
    if isinstance(storage.store, SqliteStore):
        await storage.store.flush(db)


def _view(deck: DeckController) -> DeckView:
    return DeckView(card=deck.current(), stats=deck.stats())


async def load_markdown(
    markdown: str,
    title: str | None,
    deck: DeckController,
    storage: CardStorage,
    db: aiosqlite.Connection,
) -> DeckView:
    """Shared by /load and /upload: save raw text, parse, load, save the set."""
    if not markdown.strip():
        raise HTTPException(400, "Markdown content is empty")

    storage.save_raw_markdown(markdown)
    result = parse_document(markdown)
    if not result.cards:
        await flush_storage(storage, db)
        raise HTTPException(
            422,
            "No valid flashcards found in the markdown content. "
            "Please check the format and try again.",
        )

    deck.load_cards(result.cards)
    storage.save_cards(result.cards, title)
    await flush_storage(storage, db)
    return _view(deck)


@router.get("/sample")
async def get_sample() -> dict:
    return {"markdown": SAMPLE_MARKDOWN}


@router.post("/parse", response_model=ParseResult)
async def parse_markdown(body: MarkdownRequest) -> ParseResult:
    """Preview the cards a document would produce."""
    return parse_document(body.markdown)


@router.post("/load", response_model=DeckView)
async def load_deck(
    body: MarkdownRequest,
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
) -> DeckView:
    return await load_markdown(body.markdown, body.title, deck, storage, db)


@router.get("/current", response_model=DeckView)
async def current_card(deck: DeckController = Depends(get_deck)) -> DeckView:
    return _view(deck)


@router.post("/next", response_model=DeckView)
async def next_card(deck: DeckController = Depends(get_deck)) -> DeckView:
    deck.next()
    return _view(deck)


@router.post("/prev", response_model=DeckView)
async def prev_card(deck: DeckController = Depends(get_deck)) -> DeckView:
    deck.prev()
    return _view(deck)


@router.post("/shuffle", response_model=DeckView)
async def shuffle_deck(deck: DeckController = Depends(get_deck)) -> DeckView:
    deck.shuffle()
    return _view(deck)


@router.post("/filter", response_model=DeckView)
async def filter_deck(
    body: FilterRequest, deck: DeckController = Depends(get_deck)
) -> DeckView:
    deck.filter_by_type(body.type)
    return _view(deck)


# --- Scoring ---


@router.post("/correct", response_model=DeckStats)
async def mark_correct(
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
) -> DeckStats:
    deck.mark_correct()
    await flush_storage(storage, db)
    return deck.stats()


@router.post("/incorrect", response_model=DeckStats)
async def mark_incorrect(
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
) -> DeckStats:
    deck.mark_incorrect()
    await flush_storage(storage, db)
    return deck.stats()


@router.post("/reset-stats", response_model=DeckStats)
async def reset_stats(
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
) -> DeckStats:
    deck.reset_stats()
    await flush_storage(storage, db)
    return deck.stats()


@router.get("/stats", response_model=DeckStats)
async def deck_stats(deck: DeckController = Depends(get_deck)) -> DeckStats:
    return deck.stats()


# --- Saved sets ---


@router.post("/restore", response_model=DeckView)
async def restore_saved(
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
) -> DeckView:
    saved = storage.load_cards()
    if saved is None or not saved.cards:
        raise HTTPException(status_code=404, detail="No saved flashcards")
    deck.load_cards(saved.cards)
    deck.restore_progress()
    logger.info("Restored saved set %r (%d cards)", saved.title, len(saved.cards))
    return _view(deck)


@router.get("/recent", response_model=list[RecentSet])
async def recent_sets(storage: CardStorage = Depends(get_storage)) -> list[RecentSet]:
    return storage.get_recent_sets()


@router.get("/raw")
async def raw_markdown(storage: CardStorage = Depends(get_storage)) -> dict:
    return {"markdown": storage.load_raw_markdown()}


@router.delete("/saved", status_code=204)
async def clear_saved(
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
) -> None:
    storage.clear_all()
    await flush_storage(storage, db)
