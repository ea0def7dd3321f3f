"""
Answer values for dynamic application questions.

Every submitted value is coerced into a tagged variant picked by the
question's declared type, then checked against the question's
``validation`` descriptor:

- text / textarea / date  -> TextAnswer
- file                    -> TextAnswer or MultiTextAnswer
- select / radio          -> ChoiceAnswer
- multiselect             -> MultiChoiceAnswer
- checkbox                -> BoolAnswer
- number                  -> NumberAnswer
"""

import math
import re
from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

QUESTION_TYPES = ("text", "textarea", "select", "multiselect", "radio", "checkbox", "number", "date", "file")
CHOICE_TYPES = ("select", "radio", "multiselect")


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    value: str


class MultiTextAnswer(BaseModel):
    kind: Literal["multi_text"] = "multi_text"
    value: list[str]


class ChoiceAnswer(BaseModel):
    kind: Literal["choice"] = "choice"
    value: str


class MultiChoiceAnswer(BaseModel):
    kind: Literal["multi_choice"] = "multi_choice"
    value: list[str]


class BoolAnswer(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool


class NumberAnswer(BaseModel):
    kind: Literal["number"] = "number"
    value: int | float


AnswerValue = Annotated[
    Union[TextAnswer, MultiTextAnswer, ChoiceAnswer, MultiChoiceAnswer, BoolAnswer, NumberAnswer],
    Field(discriminator="kind"),
]


class AnswerError(ValueError):
    """A value that does not fit its question."""


def is_empty(value: Any) -> bool:
    """Missing, blank string, or empty list."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def option_values(options: list | None) -> list[str]:
    """Selectable values from an options list (dicts or bare labels)."""
    values = []
    for opt in options or []:
        if isinstance(opt, dict):
            values.append(str(opt.get("value", opt.get("label", ""))))
        else:
            values.append(str(opt))
    return values


def _message(validation: dict, default: str) -> str:
    return validation.get("message") or default


def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise AnswerError("Expected a text value")
    return value.strip()


def _as_string_list(value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise AnswerError("Expected a list of text values")
    return [v.strip() for v in value]


def _as_number(value: Any) -> int | float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise AnswerError("Expected a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise AnswerError("Expected a number") from None
    else:
        raise AnswerError("Expected a number")
    # Rejects nan and inf
    if not math.isfinite(number):
        raise AnswerError("Expected a finite number")
    if isinstance(value, str) and number.is_integer():
        return int(number)
    return number


def _check_bounds(size: int | float, validation: dict, what: str) -> None:
    low, high = validation.get("min"), validation.get("max")
    if low is not None and size < low:
        raise AnswerError(_message(validation, f"Minimum {what} is {low}"))
    if high is not None and size > high:
        raise AnswerError(_message(validation, f"Maximum {what} is {high}"))


def coerce_answer(question_type: str, value: Any, options: list | None = None, validation: dict | None = None):
    """Turn a raw wire value into a typed answer, or raise AnswerError.

    ``value`` must already be known to be non-empty.
    """
    validation = validation or {}

    if question_type in ("text", "textarea"):
        text = _as_string(value)
        _check_bounds(len(text), validation, "length")
        pattern = validation.get("pattern")
        if pattern:
            try:
                matched = re.fullmatch(pattern, text)
            except re.error:
                raise AnswerError("This question has an invalid format rule") from None
            if not matched:
                raise AnswerError(_message(validation, "Value does not match the expected format"))
        return TextAnswer(value=text)

    if question_type == "date":
        text = _as_string(value)
        try:
            date.fromisoformat(text)
        except ValueError:
            raise AnswerError(_message(validation, "Expected a date (YYYY-MM-DD)")) from None
        return TextAnswer(value=text)

    if question_type == "file":
        if isinstance(value, list):
            return MultiTextAnswer(value=_as_string_list(value))
        return TextAnswer(value=_as_string(value))

    if question_type in ("select", "radio"):
        choice = _as_string(value)
        if choice not in option_values(options):
            raise AnswerError(f"'{choice}' is not one of the available options")
        return ChoiceAnswer(value=choice)

    if question_type == "multiselect":
        choices = _as_string_list(value)
        allowed = option_values(options)
        unknown = [c for c in choices if c not in allowed]
        if unknown:
            raise AnswerError(f"Unknown options: {', '.join(unknown)}")
        if len(set(choices)) != len(choices):
            raise AnswerError("Options may only be selected once")
        _check_bounds(len(choices), validation, "number of selections")
        return MultiChoiceAnswer(value=choices)

    if question_type == "checkbox":
        if not isinstance(value, bool):
            raise AnswerError("Expected true or false")
        return BoolAnswer(value=value)

    if question_type == "number":
        number = _as_number(value)
        _check_bounds(number, validation, "value")
        return NumberAnswer(value=number)

    raise AnswerError(f"Unsupported question type: {question_type}")
