from pathlib import Path

import aiosqlite
from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile

from app.db.sqlite import get_db
from app.models.deck import DeckView
from app.routers.deck import get_deck, get_storage, load_markdown
from app.services.deck import DeckController
from app.services.storage import CardStorage

router = APIRouter()

MARKDOWN_SUFFIXES = (".md", ".markdown")


@router.post("/upload", response_model=DeckView, status_code=201)
async def upload_markdown(
    file: UploadFile,
    title: str | None = Form(default=None),
    deck: DeckController = Depends(get_deck),
    storage: CardStorage = Depends(get_storage),
    db: aiosqlite.Connection = Depends(get_db),
):
    # Validate file type
    filename = file.filename or ""
    if (
        not filename.lower().endswith(MARKDOWN_SUFFIXES)
        and file.content_type != "text/markdown"
    ):
        raise HTTPException(400, "Please upload a markdown file (.md or .markdown)")

    content = await file.read()
    try:
        markdown = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(400, "Error reading file: not valid UTF-8 text")

    return await load_markdown(
        markdown, title or Path(filename).stem or None, deck, storage, db
    )
