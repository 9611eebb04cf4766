"""Exception hierarchy for bayes-text.

Every error raised by the library derives from :class:`BayesTextError` and
also from the closest built-in exception, so callers may catch either.
"""

from __future__ import annotations


class BayesTextError(Exception):
    """Base class for all bayes-text errors."""


class InvalidArgumentError(BayesTextError, ValueError):
    """A required argument was ``None`` or empty."""


class CategoryNotFoundError(BayesTextError, LookupError):
    """The named category does not exist in the model."""

    def __init__(self, category: str) -> None:
        super().__init__(f"No such category '{category}'")
        self.category = category


class CategoryExistsError(BayesTextError, ValueError):
    """The named category is already present in the model."""

    def __init__(self, category: str) -> None:
        super().__init__(f"Category name '{category}' already exists")
        self.category = category


class CorruptModelError(BayesTextError, ValueError):
    """A persisted model could not be decoded into a well-formed model."""
