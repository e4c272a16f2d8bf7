"""
Deck navigation and scoring.

DeckController owns the loaded cards, the active position and the
correct/incorrect tallies. Navigation wraps around at both ends. Scoring is
not tied to a card: each mark adds one to a counter and saves a progress
snapshot through CardStorage, when one is attached.

Every operation is safe on an empty deck; reads return None.
Not thread-safe: callers serialize access.
"""
from __future__ import annotations

import logging
import random
from typing import Sequence

from app.models.card import Card, CardType
from app.models.deck import DeckStats
from app.services.storage import CardStorage

logger = logging.getLogger(__name__)

ALL_TYPES = "all"


class DeckController:
    def __init__(
        self,
        storage: CardStorage | None = None,
        rng: random.Random | None = None,
    ):
        self.storage = storage
        self._rng = rng or random.Random()
        self._cards: list[Card] = []
        self._unfiltered: list[Card] | None = None
        self.current_index = 0
        self.correct_count = 0
        self.incorrect_count = 0

    @property
    def cards(self) -> list[Card]:
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def load_cards(self, cards: Sequence[Card]) -> None:
        """Replace the deck; position and counters start over."""
        self._cards = list(cards)
        self._unfiltered = None
        self.current_index = 0
        self.correct_count = 0
        self.incorrect_count = 0
        logger.info("Loaded deck with %d card(s)", len(self._cards))

    def current(self) -> Card | None:
        if not self._cards:
            return None
        return self._cards[self.current_index]

    def next(self) -> Card | None:
        if not self._cards:
            return None
        self.current_index = (self.current_index + 1) % len(self._cards)
        return self.current()

    def prev(self) -> Card | None:
        if not self._cards:
            return None
        self.current_index = (self.current_index - 1) % len(self._cards)
        return self.current()

    # --- Scoring ---

    def mark_correct(self) -> None:
        self.correct_count += 1
        self._save_progress()

    def mark_incorrect(self) -> None:
        self.incorrect_count += 1
        self._save_progress()

    def reset_stats(self) -> None:
        self.correct_count = 0
        self.incorrect_count = 0
        if self.storage is not None:
            self.storage.clear_progress()

    def restore_progress(self) -> bool:
        """Load saved counters, if any. Returns True when something was restored."""
        if self.storage is None:
            return False
        progress = self.storage.load_progress()
        if progress is None:
            return False
        self.correct_count = progress.correct_count
        self.incorrect_count = progress.incorrect_count
        return True

    def _save_progress(self) -> None:
        if self.storage is not None:
            self.storage.save_progress(self.correct_count, self.incorrect_count)

    # --- Ordering ---

    def shuffle(self) -> None:
        """Fisher–Yates shuffle of the current view; back to the first card."""
        self._rng.shuffle(self._cards)
        self.current_index = 0

    def filter_by_type(self, card_type: CardType | str | None = ALL_TYPES) -> None:
        """Show only cards of ``card_type``, always filtering the full deck.

        The first call keeps a copy of the unfiltered deck; "all" restores it.
        """
        if self._unfiltered is None:
            self._unfiltered = list(self._cards)

        if not card_type or card_type == ALL_TYPES:
            self._cards = list(self._unfiltered)
        else:
            wanted = CardType(card_type).value
            self._cards = [c for c in self._unfiltered if c.type == wanted]
        self.current_index = 0

    def stats(self) -> DeckStats:
        return DeckStats(
            position=self.current_index + 1 if self._cards else 0,
            total=len(self._cards),
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
        )
