from app.models.card import (
    BasicCard,
    ConceptCard,
    MultiLineQuestionCard,
    MultipleChoiceCard,
    Option,
    TrueFalseCard,
)
from app.services.markdown_parser import extract_tags, parse, parse_document
from app.services.sample import SAMPLE_MARKDOWN


def test_basic_card(render):
    assert parse("## Q\nA", render) == [BasicCard(front="Q", back=render("A"))]


def test_basic_card_with_empty_body(render):
    cards = parse("## Lonely heading", render)
    assert cards == [BasicCard(front="Lonely heading", back=render(""))]


def test_true_false_true_answer(render):
    doc = "## [T/F] Sky is blue\nT\nBecause of Rayleigh scattering."
    assert parse(doc, render) == [
        TrueFalseCard(
            front="Sky is blue",
            answer=True,
            back=render("Because of Rayleigh scattering."),
        )
    ]


def test_true_false_spanish_tokens(render):
    cards = parse("## [V/F] El sol es frío\nFalso\nNo lo es.", render)
    assert cards[0].answer is False
    assert cards[0].front == "El sol es frío"
    assert cards[0].back == render("No lo es.")

    cards = parse("## [v/f] Agua moja\nverdadero", render)
    assert cards[0].answer is True
    assert cards[0].back == render("")


def test_true_false_marker_is_case_insensitive(render):
    cards = parse("## [t/f]Lowercase marker\nfalse", render)
    assert isinstance(cards[0], TrueFalseCard)
    assert cards[0].front == "Lowercase marker"
    assert cards[0].answer is False


def test_true_false_without_answer_keeps_whole_body(render):
    cards = parse("## [T/F] Unclear\nMaybe so\nMore detail.", render)
    assert cards[0].answer is None
    assert cards[0].back == render("Maybe so\nMore detail.")


def test_multiple_choice(render):
    doc = "## Pick one\n- [ ] A\n- [x] B\n\nB is correct because..."
    assert parse(doc, render) == [
        MultipleChoiceCard(
            front="Pick one",
            options=[Option(text="A", is_correct=False), Option(text="B", is_correct=True)],
            correct_index=1,
            back=render("B is correct because..."),
        )
    ]


def test_multiple_choice_first_correct_wins(render):
    card = parse("## Q\n- [x] A\n- [ ] B\n- [x] C", render)[0]
    assert card.correct_index == 0
    assert [o.is_correct for o in card.options] == [True, False, True]
    # No blank line after the options: no explanation
    assert card.back == render("")


def test_multiple_choice_none_marked(render):
    card = parse("## Q\n- [ ] A\n- [ ] B\n\nNone of them.", render)[0]
    assert card.correct_index == -1
    assert card.back == render("None of them.")


def test_multiple_choice_uppercase_x_is_not_an_option(render):
    card = parse("## Q\n- [ ] A\n- [X] B", render)[0]
    assert [o.text for o in card.options] == ["A"]
    assert card.correct_index == -1


def test_multiple_choice_blank_lines_before_options(render):
    doc = "## Q\nSome intro.\n\n  - [ ] A\n- [x]   B  \n\nWhy B.\n\nMore."
    card = parse(doc, render)[0]
    assert [o.text for o in card.options] == ["A", "B"]
    assert card.correct_index == 1
    assert card.back == render("Why B.\n\nMore.")


def test_concept_card(render):
    doc = "## Concept: Inertia\nResistance to change in motion."
    assert parse(doc, render) == [
        ConceptCard(front="Inertia", back=render("Resistance to change in motion."))
    ]


def test_concept_marker_is_case_insensitive(render):
    assert parse("## concept:Entropy\nDisorder.", render)[0].front == "Entropy"


def test_multi_line_question(render):
    doc = "## Long question\nPart one.\n%\nThe answer."
    assert parse(doc, render) == [
        MultiLineQuestionCard(
            front=render("Long question\n\nPart one."),
            back=render("The answer."),
        )
    ]


def test_multi_line_question_splits_on_first_percent_only(render):
    card = parse("## Growth\nHow much?\n%\nAbout 5% to 10%.", render)[0]
    assert card.back == render("About 5% to 10%.")


def test_classification_priority(render):
    # True/false beats options, options beat concept, concept beats %
    tf = parse("## [T/F] Options inside\n- [x] A\n", render)[0]
    mc = parse("## Concept: With options\n- [ ] A\n- [x] B", render)[0]
    concept = parse("## Concept: Percent\n100% sure", render)[0]
    assert tf.type == "true-false"
    assert mc.type == "multiple-choice"
    assert concept.type == "concept"


def test_segments_in_document_order(render):
    doc = "Preamble is ignored.\n\n## One\n1\n### Sub heading\nstill one\n## Two\n2\n"
    cards = parse(doc, render)
    assert [c.front for c in cards] == ["One", "Two"]
    assert cards[0].back == render("1\n### Sub heading\nstill one")


def test_titleless_segments_are_skipped(render):
    result = parse_document("## \nOrphan body\n## [T/F]\nT\n## Real\nAnswer", render)
    assert [c.front for c in result.cards] == ["Real"]
    assert result.skipped == 2


def test_empty_document_yields_no_cards(render):
    assert parse("", render) == []
    assert parse("No headings at all", render) == []


def test_windows_line_endings(render):
    cards = parse("## Q\r\nA\r\n## Concept: C\r\nD", render)
    assert cards == [
        BasicCard(front="Q", back=render("A")),
        ConceptCard(front="C", back=render("D")),
    ]


def test_parse_is_deterministic():
    assert parse(SAMPLE_MARKDOWN) == parse(SAMPLE_MARKDOWN)


def test_sample_covers_every_type():
    types = [c.type for c in parse(SAMPLE_MARKDOWN)]
    assert types == [
        "basic",
        "true-false",
        "multiple-choice",
        "concept",
        "multi-line-question",
    ]


def test_default_renderer_produces_html():
    card = parse("## Q\nSome **bold** text")[0]
    assert card.front == "Q"
    assert "<strong>bold</strong>" in card.back


def test_tags(render):
    body = "Answer [#physics](tags/physics) and [# motion ](x)."
    assert extract_tags(body) == ["physics", "motion"]
    assert parse(f"## Q\n{body}", render)[0].tags == ["physics", "motion"]
