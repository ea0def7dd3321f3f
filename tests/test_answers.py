# tests/test_answers.py
import pytest

from agenthub.db import ApplicationQuestion
from agenthub.errors import ValidationFailed
from agenthub.services.applications import validate_answers
from agenthub.utils.answers import AnswerError, coerce_answer, is_empty

OPTIONS = [
    {"value": "remote_desktop", "label": "Remote Desktop", "labelEs": "Escritorio Remoto"},
    {"value": "crm", "label": "CRM Software", "labelEs": "Software CRM"},
    {"value": "ticketing", "label": "Ticketing", "labelEs": "Tickets"},
]


@pytest.mark.parametrize("value", [None, "", "   ", []])
def test_empty_values(value):
    assert is_empty(value)


@pytest.mark.parametrize("value", [False, 0, "x", ["a"]])
def test_non_empty_values(value):
    assert not is_empty(value)


def test_text_is_trimmed_and_length_checked():
    assert coerce_answer("text", "  hello ").value == "hello"
    with pytest.raises(AnswerError, match="Minimum length is 3"):
        coerce_answer("textarea", "hi", validation={"min": 3})


def test_text_pattern_must_match_fully():
    validation = {"pattern": r"\d{5}", "message": "Enter a 5 digit ZIP"}
    assert coerce_answer("text", "12345", validation=validation).kind == "text"
    with pytest.raises(AnswerError, match="Enter a 5 digit ZIP"):
        coerce_answer("text", "123456", validation=validation)


def test_date_requires_iso_format():
    assert coerce_answer("date", "2026-11-02").value == "2026-11-02"
    with pytest.raises(AnswerError):
        coerce_answer("date", "11/02/2026")


def test_choice_must_be_an_option():
    assert coerce_answer("select", "crm", options=OPTIONS).kind == "choice"
    with pytest.raises(AnswerError):
        coerce_answer("radio", "fax", options=OPTIONS)


def test_multiselect_rules():
    answer = coerce_answer("multiselect", ["crm", "ticketing"], options=OPTIONS)
    assert answer.kind == "multi_choice"
    assert answer.value == ["crm", "ticketing"]

    with pytest.raises(AnswerError):
        coerce_answer("multiselect", ["crm", "crm"], options=OPTIONS)
    with pytest.raises(AnswerError):
        coerce_answer("multiselect", ["crm"], options=OPTIONS, validation={"min": 2})
    with pytest.raises(AnswerError):
        coerce_answer("multiselect", "crm", options=OPTIONS)


def test_checkbox_takes_booleans_only():
    assert coerce_answer("checkbox", False).value is False
    with pytest.raises(AnswerError):
        coerce_answer("checkbox", "yes")


def test_number_accepts_numeric_strings_and_rejects_booleans():
    assert coerce_answer("number", "40").value == 40
    assert coerce_answer("number", 12.5).value == 12.5
    with pytest.raises(AnswerError):
        coerce_answer("number", True)
    with pytest.raises(AnswerError, match="Must be between 10 and 60 hours"):
        coerce_answer("number", 70, validation={"min": 10, "max": 60, "message": "Must be between 10 and 60 hours"})


def test_file_takes_one_or_many_references():
    assert coerce_answer("file", "docs/w9.pdf").kind == "text"
    assert coerce_answer("file", ["a.pdf", "b.pdf"]).kind == "multi_text"


def _question(id, order, type="text", required=True, options=None):
    return ApplicationQuestion(id=id, question=f"Question {id}", type=type, required=required, order=order, options=options)


def test_validate_names_first_missing_required_question():
    questions = [_question("q2", 2), _question("q1", 1), _question("q3", 3)]

    with pytest.raises(ValidationFailed) as exc:
        validate_answers(questions, [{"question_id": "q1", "value": "ok"}])

    assert exc.value.question_id == "q2"
    assert set(exc.value.errors) == {"q2", "q3"}
    assert "q2" in exc.value.message


def test_validate_rejects_unknown_and_duplicate_answers():
    questions = [_question("q1", 1)]

    with pytest.raises(ValidationFailed) as exc:
        validate_answers(questions, [{"question_id": "q1", "value": "a"}, {"question_id": "zz", "value": "b"}])
    assert "zz" in exc.value.errors

    with pytest.raises(ValidationFailed) as exc:
        validate_answers(questions, [{"question_id": "q1", "value": "a"}, {"question_id": "q1", "value": "b"}])
    assert exc.value.question_id == "q1"


def test_validate_skips_empty_optional_answers():
    questions = [_question("q1", 1), _question("q2", 2, required=False)]

    typed = validate_answers(questions, [{"question_id": "q1", "value": "a"}, {"question_id": "q2", "value": ""}])

    assert [(q.id, a.value) for q, a in typed] == [("q1", "a")]


def test_required_checkbox_answered_false_counts():
    questions = [_question("agree", 1, type="checkbox")]
    typed = validate_answers(questions, [{"question_id": "agree", "value": False}])
    assert typed[0][1].value is False


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("nan"), float("inf")])
def test_number_rejects_non_finite_values(value):
    with pytest.raises(AnswerError, match="finite"):
        coerce_answer("number", value, validation={"min": 1, "max": 40})


def test_broken_pattern_is_an_answer_error():
    with pytest.raises(AnswerError, match="invalid format rule"):
        coerce_answer("text", "12345", validation={"pattern": "(["})
