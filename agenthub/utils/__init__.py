"""Utility modules."""

from .answers import AnswerError, coerce_answer, is_empty

__all__ = ["AnswerError", "coerce_answer", "is_empty"]
