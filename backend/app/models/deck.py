from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.models.card import CamelModel, Card, CardType


class Progress(CamelModel):
    correct_count: int = 0
    incorrect_count: int = 0
    timestamp: str


class SavedCardSet(CamelModel):
    title: str
    cards: list[Card]
    timestamp: str


class CardPreview(CamelModel):
    type: str
    front: str  # truncated


class RecentSet(CamelModel):
    title: str
    card_count: int
    timestamp: str
    preview: list[CardPreview] = Field(default_factory=list)


class DeckStats(CamelModel):
    position: int  # 1-based, 0 when the deck is empty
    total: int
    correct_count: int
    incorrect_count: int


class ParseResult(BaseModel):
    cards: list[Card]
    skipped: int = 0  # segments dropped for lacking a title


# --- Request / response bodies ---


class MarkdownRequest(BaseModel):
    markdown: str
    title: str | None = None


class FilterRequest(BaseModel):
    type: CardType | Literal["all"] = "all"


class DeckView(CamelModel):
    card: Card | None
    stats: DeckStats
