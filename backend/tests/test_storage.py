import asyncio
import json

import aiosqlite

from app.db.sqlite import get_all_values, init_sqlite
from app.models.card import BasicCard, MultipleChoiceCard, Option
from app.services.storage import (
    CARDS_KEY,
    PROGRESS_KEY,
    RAW_KEY,
    RECENT_KEY,
    CardStorage,
    SqliteStore,
)


def _cards(n=3, prefix="Q"):
    return [BasicCard(front=f"{prefix}{i}", back=f"a{i}") for i in range(n)]


def test_save_and_load_cards(storage, store):
    cards = [
        BasicCard(front="Q", back="A"),
        MultipleChoiceCard(
            front="Pick",
            back="",
            options=[Option(text="x", is_correct=True)],
            correct_index=0,
        ),
    ]
    storage.save_cards(cards, "Physics")

    blob = json.loads(store.get(CARDS_KEY))
    assert blob["title"] == "Physics"
    assert blob["cards"][1]["correctIndex"] == 0
    assert blob["cards"][1]["options"][0]["isCorrect"] is True

    saved = storage.load_cards()
    assert saved.title == "Physics"
    assert saved.cards == cards


def test_default_title(storage):
    assert storage.save_cards(_cards(1)).title == "My Flashcards"


def test_corrupt_blobs_read_as_nothing_saved(storage, store):
    store.set(CARDS_KEY, "{not json")
    store.set(PROGRESS_KEY, '{"correctCount": "lots"}')
    store.set(RECENT_KEY, '{"oops": 1}')
    assert storage.load_cards() is None
    assert storage.load_progress() is None
    assert storage.get_recent_sets() == []


def test_recent_sets_most_recent_first_and_deduplicated(storage):
    storage.save_cards(_cards(3), "A")
    storage.save_cards(_cards(2), "B")
    storage.save_cards(_cards(3), "A")
    storage.save_cards(_cards(4), "A")

    recent = storage.get_recent_sets()
    assert [(r.title, r.card_count) for r in recent] == [("A", 4), ("A", 3), ("B", 2)]


def test_recent_sets_are_capped(storage):
    for i in range(12):
        storage.save_cards(_cards(1), f"Set {i}")
    recent = storage.get_recent_sets()
    assert len(recent) == 10
    assert recent[0].title == "Set 11"
    assert recent[-1].title == "Set 2"


def test_recent_set_preview(storage, store):
    long_front = "x" * 60
    cards = [BasicCard(front=long_front, back="")] + _cards(4)
    storage.save_cards(cards, "Preview")

    preview = storage.get_recent_sets()[0].preview
    assert len(preview) == 3
    assert preview[0].front == "x" * 50 + "..."
    assert preview[1].front == "Q0"
    assert preview[0].type == "basic"

    entry = json.loads(store.get(RECENT_KEY))[0]
    assert entry["cardCount"] == 5


def test_clear_all_keeps_recent_sets(storage, store):
    storage.save_raw_markdown("## Q\nA")
    storage.save_cards(_cards(1))
    storage.save_progress(1, 0)
    storage.clear_all()
    assert storage.load_cards() is None
    assert storage.load_progress() is None
    assert storage.load_raw_markdown() is None
    assert len(storage.get_recent_sets()) == 1


def test_sqlite_store_flushes_to_database(tmp_path):
    async def scenario():
        await init_sqlite(tmp_path)
        db_path = tmp_path / "markdeck.db"

        store = SqliteStore()
        storage = CardStorage(store)
        storage.save_raw_markdown("## Q\nA")
        storage.save_progress(2, 1)
        storage.clear_progress()
        assert store.dirty

        async with aiosqlite.connect(db_path) as db:
            await store.flush(db)
            values = await get_all_values(db)
        assert not store.dirty
        assert values == {RAW_KEY: "## Q\nA"}

        reloaded = SqliteStore()
        async with aiosqlite.connect(db_path) as db:
            await reloaded.load(db)
        assert CardStorage(reloaded).load_raw_markdown() == "## Q\nA"

    asyncio.run(scenario())
