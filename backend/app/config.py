from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".markdeck" / "data"
    sqlite_filename: str = "markdeck.db"
    default_set_title: str = "My Flashcards"
    recent_sets_limit: int = 10
    preview_cards: int = 3
    preview_front_chars: int = 50  # longer fronts get a "..." suffix
    log_level: str = "warning"

    model_config = {"env_prefix": "MARKDECK_"}


settings = Settings()
