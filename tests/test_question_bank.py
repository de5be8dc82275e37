import pytest

from wellness.question_bank import (
    CATEGORY_TAGS,
    OPTION_SCORES,
    OVERALL,
    Question,
    QuestionBank,
    REVERSE_SCORED_QUESTIONS,
    YES_NO_OPTIONS,
    build_question_bank,
    is_known_tag,
    load_question_bank,
)


def test_default_bank_question_counts():
    bank = load_question_bank()
    assert bank.question_counts() == {
        "depression": 13,
        "stress": 11,
        "anxiety": 10,
        "adhd": 10,
        "wellbeing": 23,
        "overall": 67,
    }


def test_default_bank_is_loaded_once():
    assert load_question_bank() is load_question_bank()


def test_iteration_follows_declaration_order():
    assert list(load_question_bank()) == list(CATEGORY_TAGS)


def test_reverse_scored_items_are_flagged():
    bank = load_question_bank()
    flagged = {q.text for q in bank.all_questions() if q.is_reverse_scored}
    assert flagged == REVERSE_SCORED_QUESTIONS
    assert len(flagged) == 21


def test_calm_and_relaxed_is_reverse_scored_wellbeing_item():
    question = load_question_bank().questions_for("wellbeing")[1]
    assert question.text == "I feel calm and relaxed"
    assert question.category == "wellbeing"
    assert question.is_reverse_scored


def test_yes_no_items_use_yes_no_options():
    yes_no = [q for q in load_question_bank().all_questions() if q.options == YES_NO_OPTIONS]
    assert len(yes_no) == 4
    assert all(q.category == "wellbeing" for q in yes_no)


def test_option_scores():
    assert OPTION_SCORES["Never"] == 0
    assert OPTION_SCORES["Rarely"] == 1
    assert OPTION_SCORES["Sometimes"] == 2
    assert OPTION_SCORES["Often"] == 3
    assert OPTION_SCORES["Always"] == 4
    assert OPTION_SCORES["Yes"] == 4
    assert OPTION_SCORES["No"] == 0


def test_bank_is_read_only():
    bank = load_question_bank()
    with pytest.raises(TypeError):
        bank.categories["depression"] = ()
    with pytest.raises(AttributeError):
        bank.version = "v2"


def test_duplicate_question_text_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        build_question_bank(
            {"depression": ("Same text",), "stress": ("Same text",)},
            version="bad",
        )


def test_misfiled_question_rejected():
    with pytest.raises(ValueError, match="filed under"):
        QuestionBank(version="bad", categories={"stress": (Question("A question", "depression"),)})


def test_unknown_category_rejected():
    with pytest.raises(ValueError, match="Unknown category"):
        build_question_bank({"sleep": ("I sleep well",)}, version="bad")


def test_known_tags():
    assert is_known_tag(OVERALL)
    assert is_known_tag("adhd")
    assert not is_known_tag("sleep")
