"""Shared test fixtures for bayes-text tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from bayes_text.classifier import BayesClassifier
from bayes_text.stemmer import identity_stem
from bayes_text.tokenizer import Tokenizer


@pytest.fixture
def plain_tokenizer() -> Tokenizer:
    """Tokenizer with stemming disabled, so features equal lowercase words."""
    return Tokenizer(stemmer=identity_stem)


@pytest.fixture
def classifier(plain_tokenizer: Tokenizer) -> BayesClassifier:
    """Untrained two-category classifier without stemming."""
    return BayesClassifier(["x", "y"], tokenizer=plain_tokenizer)


@pytest.fixture
def trained_classifier(classifier: BayesClassifier) -> BayesClassifier:
    """Classifier trained on one short text per category."""
    classifier.train("x", "apple apple banana")
    classifier.train("y", "car truck road")
    return classifier


@pytest.fixture
def spam_text() -> str:
    return "Cheap pills! Buy cheap pills now, limited offer!!!"


@pytest.fixture
def ham_text() -> str:
    return "The quarterly meeting moved to Thursday afternoon; agenda attached."


@pytest.fixture
def text_files(tmp_path: Path, spam_text: str, ham_text: str) -> dict[str, Path]:
    """Write the spam and ham samples to temporary UTF-8 files."""
    spam = tmp_path / "spam.txt"
    spam.write_text(spam_text, encoding="utf-8")
    ham = tmp_path / "ham.txt"
    ham.write_text(ham_text, encoding="utf-8")
    return {"spam": spam, "ham": ham}
