from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db import init_all_databases


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    from app.db.sqlite import get_db
    from app.services.deck import DeckController
    from app.services.storage import CardStorage, SqliteStore

    store = SqliteStore()
    async for db in get_db():
        await store.load(db)
    app.state.store = store
    app.state.deck = DeckController(storage=CardStorage(store))
    yield


def create_app() -> FastAPI:
    application = FastAPI(
        title="MarkDeck Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from app.routers import deck, health, upload

    application.include_router(health.router)
    application.include_router(deck.router, prefix="/deck", tags=["deck"])
    application.include_router(upload.router, prefix="/deck", tags=["deck"])

    return application


app = create_app()
