from app.models.card import (
    BasicCard,
    Card,
    CardType,
    ConceptCard,
    MultiLineQuestionCard,
    MultipleChoiceCard,
    Option,
    TrueFalseCard,
)
from app.models.deck import (
    CardPreview,
    DeckStats,
    DeckView,
    FilterRequest,
    MarkdownRequest,
    ParseResult,
    Progress,
    RecentSet,
    SavedCardSet,
)

__all__ = [
    "BasicCard",
    "Card",
    "CardPreview",
    "CardType",
    "ConceptCard",
    "DeckStats",
    "DeckView",
    "FilterRequest",
    "MarkdownRequest",
    "MultiLineQuestionCard",
    "MultipleChoiceCard",
    "Option",
    "ParseResult",
    "Progress",
    "RecentSet",
    "SavedCardSet",
    "TrueFalseCard",
]
