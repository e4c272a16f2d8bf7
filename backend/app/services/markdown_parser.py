"""
Markdown document → flashcards.

Each `## ` heading starts a card. The heading text is the title and the
rest of the section (up to the next `## ` heading) is the body. The card
type is decided by the first matching rule in _CLASSIFIERS:

  [T/F] / [V/F] title     → true/false
  `- [ ]` / `- [x]` lines → multiple choice
  Concept: title          → concept
  `%` in body             → multi-line question (split at first %)
  anything else           → basic

Soft failures: sections without a title are skipped and counted, never raised.
"""
from __future__ import annotations

import logging
import re
from typing import Callable

from app.models.card import (
    BasicCard,
    Card,
    ConceptCard,
    MultiLineQuestionCard,
    MultipleChoiceCard,
    Option,
    TrueFalseCard,
)
from app.models.deck import ParseResult
from app.services.renderer import Render, render_markdown

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"^## (.*?)(?=^## |\Z)", re.MULTILINE | re.DOTALL)
_TRUE_FALSE_RE = re.compile(r"^\[(T|V)/F\]\s*", re.IGNORECASE)
_CONCEPT_RE = re.compile(r"^concept:\s*", re.IGNORECASE)
_OPTION_RE = re.compile(r"^- \[([ x])\] (.*)")
_TAG_RE = re.compile(r"\[#([^\]]+)\]\([^)]*\)")

TRUE_TOKENS = frozenset({"t", "true", "v", "verdadero"})
FALSE_TOKENS = frozenset({"f", "false", "falso"})

MULTI_LINE_DELIMITER = "%"


def parse(document: str, render: Render = render_markdown) -> list[Card]:
    """Parse a markdown document into cards, in document order."""
    return parse_document(document, render).cards


def parse_document(document: str, render: Render = render_markdown) -> ParseResult:
    """Like parse(), but also reports how many sections were skipped."""
    text = (document or "").replace("\r\n", "\n")
    cards: list[Card] = []
    skipped = 0

    for match in _SEGMENT_RE.finditer(text):
        card = parse_segment(match.group(0).strip(), render)
        if card is None:
            skipped += 1
            continue
        cards.append(card)

    if skipped:
        logger.warning("Skipped %d section(s) without a usable title", skipped)
    return ParseResult(cards=cards, skipped=skipped)


def parse_segment(segment: str, render: Render = render_markdown) -> Card | None:
    """Parse one `## ` section. Returns None when it yields no card."""
    title_line, _, rest = segment.partition("\n")
    if not title_line.startswith("## "):
        return None

    title = title_line[3:].strip()
    if not title:
        return None
    body = rest.strip()

    build = next(build for matches, build in _CLASSIFIERS if matches(title, body))
    card = build(title, body, render)
    if not card.front.strip():
        return None
    card.tags = extract_tags(body)
    return card


def extract_tags(content: str) -> list[str]:
    """Collect `[#tag](link)` references, in order of appearance."""
    return [m.group(1).strip() for m in _TAG_RE.finditer(content)]


# --- Classification ---


def _is_true_false(title: str, body: str) -> bool:
    return _TRUE_FALSE_RE.match(title) is not None


def _has_options(title: str, body: str) -> bool:
    return any(_OPTION_RE.match(line.strip()) for line in body.split("\n"))


def _is_concept(title: str, body: str) -> bool:
    return _CONCEPT_RE.match(title) is not None


def _is_multi_line(title: str, body: str) -> bool:
    return MULTI_LINE_DELIMITER in body


def _always(title: str, body: str) -> bool:
    return True


# --- Builders ---


def _build_true_false(title: str, body: str, render: Render) -> TrueFalseCard:
    question = _TRUE_FALSE_RE.sub("", title, count=1).strip()
    first_line, _, remainder = body.partition("\n")
    token = first_line.strip().lower()

    if token in TRUE_TOKENS:
        answer: bool | None = True
        explanation = remainder.strip()
    elif token in FALSE_TOKENS:
        answer = False
        explanation = remainder.strip()
    else:
        # No answer line: keep the whole body, first line included
        answer = None
        explanation = body

    return TrueFalseCard(front=question, answer=answer, back=render(explanation))


def _build_multiple_choice(
    title: str, body: str, render: Render
) -> MultipleChoiceCard:
    lines = body.split("\n")
    options: list[Option] = []
    correct_index = -1
    explanation = ""

    for i, raw in enumerate(lines):
        line = raw.strip()
        m = _OPTION_RE.match(line)
        if m:
            is_correct = m.group(1) == "x"
            if is_correct and correct_index == -1:
                correct_index = len(options)
            options.append(Option(text=m.group(2).strip(), is_correct=is_correct))
        elif options and not line:
            explanation = "\n".join(lines[i + 1 :]).strip()
            break

    return MultipleChoiceCard(
        front=title,
        options=options,
        correct_index=correct_index,
        back=render(explanation),
    )


def _build_concept(title: str, body: str, render: Render) -> ConceptCard:
    name = _CONCEPT_RE.sub("", title, count=1).strip()
    return ConceptCard(front=name, back=render(body))


def _build_multi_line(
    title: str, body: str, render: Render
) -> MultiLineQuestionCard:
    question, _, answer = body.partition(MULTI_LINE_DELIMITER)
    return MultiLineQuestionCard(
        front=render(f"{title}\n\n{question.strip()}"),
        back=render(answer.strip()),
    )


def _build_basic(title: str, body: str, render: Render) -> BasicCard:
    return BasicCard(front=title, back=render(body))


# Evaluated top-down; the rules overlap, so order matters.
_CLASSIFIERS: list[
    tuple[Callable[[str, str], bool], Callable[[str, str, Render], Card]]
] = [
    (_is_true_false, _build_true_false),
    (_has_options, _build_multiple_choice),
    (_is_concept, _build_concept),
    (_is_multi_line, _build_multi_line),
    (_always, _build_basic),
]
