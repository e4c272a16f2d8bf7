from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CardType(str, Enum):
    BASIC = "basic"
    TRUE_FALSE = "true-false"
    MULTIPLE_CHOICE = "multiple-choice"
    CONCEPT = "concept"
    MULTI_LINE_QUESTION = "multi-line-question"


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in stored blobs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _CardBase(CamelModel):
    front: str
    back: str
    tags: list[str] = Field(default_factory=list)


class BasicCard(_CardBase):
    type: Literal["basic"] = "basic"


class TrueFalseCard(_CardBase):
    type: Literal["true-false"] = "true-false"
    answer: bool | None  # None = no T/F line found, whole body is the explanation


class Option(CamelModel):
    text: str
    is_correct: bool


class MultipleChoiceCard(_CardBase):
    type: Literal["multiple-choice"] = "multiple-choice"
    options: list[Option] = Field(default_factory=list)
    correct_index: int = -1


class ConceptCard(_CardBase):
    type: Literal["concept"] = "concept"


class MultiLineQuestionCard(_CardBase):
    """Both sides are already rendered."""

    type: Literal["multi-line-question"] = "multi-line-question"


Card = Annotated[
    Union[
        BasicCard,
        TrueFalseCard,
        MultipleChoiceCard,
        ConceptCard,
        MultiLineQuestionCard,
    ],
    Field(discriminator="type"),
]

